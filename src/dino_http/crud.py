"""CRUD endpoint factory.

``define_crud_api`` builds the six standard operations of a resource. Each
operation is configured either with a path segment appended to the
resource path, or with a custom coroutine function that replaces the
default implementation entirely. The choice is resolved once, at
construction time, into a ``PathEndpoint`` or a ``CustomEndpoint``.

Example:
    >>> users = define_crud_api(api, "/user", list="search", delete=my_soft_delete)
    >>> page = await users.list_page({"name": "dino"}, {"pn": 0, "pl": 20})
    >>> await users.change_status(["1", "2"], "disabled")
"""

from __future__ import annotations

from collections.abc import Awaitable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Union

from .client import merge_params
from .types import ApiPageResponse, ApiResponse, Pageable, Sortable

if TYPE_CHECKING:
    from .client import ApiClient


@dataclass(frozen=True)
class PathEndpoint:
    """Endpoint served by the default implementation at ``path``."""

    path: str


@dataclass(frozen=True)
class CustomEndpoint:
    """Endpoint served by a user-supplied coroutine function."""

    func: Callable[..., Awaitable[Any]]


Endpoint = Union[PathEndpoint, CustomEndpoint]
EndpointSpec = Union[str, Callable[..., Awaitable[Any]], None]


def resolve_endpoint(target: EndpointSpec, base_path: str, default_segment: str) -> Endpoint:
    """Resolve a path segment or custom function into an ``Endpoint``."""
    if callable(target):
        return CustomEndpoint(target)
    segment = (target or default_segment).lstrip("/")
    return PathEndpoint(f"{base_path or ''}/{segment}")


def join_ids(ids: str | list[str]) -> str:
    if isinstance(ids, str):
        return ids
    return ",".join(str(i) for i in ids)


@dataclass
class CrudApi:
    """The six operations of a CRUD resource."""

    get_one: Callable[..., Awaitable[ApiResponse[Any]]]
    list_page: Callable[..., Awaitable[ApiPageResponse[Any]]]
    add_one: Callable[..., Awaitable[ApiResponse[Any]]]
    update_one: Callable[..., Awaitable[ApiResponse[Any]]]
    delete: Callable[..., Awaitable[ApiResponse[Any]]]
    change_status: Callable[..., Awaitable[ApiResponse[Any]]]


def define_crud_api(
    client: ApiClient,
    path: str = "",
    *,
    get: EndpointSpec = None,
    list: EndpointSpec = None,
    add: EndpointSpec = None,
    update: EndpointSpec = None,
    delete: EndpointSpec = None,
    status: EndpointSpec = None,
    default_params: Mapping[str, Any] | None = None,
    service: str | None = None,
) -> CrudApi:
    """Define the CRUD operations of a resource.

    Args:
        client: Client used for the default implementations
        path: Resource path, e.g. ``/user``
        get: Segment or function for ``get_one`` (default: ``id``)
        list: Segment or function for ``list_page`` (default: ``list``)
        add: Segment or function for ``add_one`` (default: ``add``)
        update: Segment or function for ``update_one`` (default: ``update``)
        delete: Segment or function for ``delete`` (default: ``delete``)
        status: Segment or function for ``change_status`` (default: ``status``)
        default_params: Query parameters sent with every default call
        service: Service name (default: the default service)

    Returns:
        A ``CrudApi`` whose operations are plain coroutine functions.
    """
    endpoints = {
        "get": resolve_endpoint(get, path, "id"),
        "list": resolve_endpoint(list, path, "list"),
        "add": resolve_endpoint(add, path, "add"),
        "update": resolve_endpoint(update, path, "update"),
        "delete": resolve_endpoint(delete, path, "delete"),
        "status": resolve_endpoint(status, path, "status"),
    }

    def params(**extra: Any) -> dict[str, Any]:
        return merge_params(default_params, extra)

    def build_get(url: str):
        async def get_one(id: str | int) -> ApiResponse[Any]:
            return await client.get(url, params(id=id), service=service)

        return get_one

    def build_list(url: str):
        async def list_page(
            data: Any, page: Pageable | Mapping[str, Any], sort: Sortable | None = None
        ) -> ApiPageResponse[Any]:
            return await client.post_page(url, data, page, params(), sort, service=service)

        return list_page

    def build_add(url: str):
        async def add_one(data: Any) -> ApiResponse[Any]:
            return await client.post(url, data, params(), service=service)

        return add_one

    def build_update(url: str):
        async def update_one(id: str | int, data: Any) -> ApiResponse[Any]:
            return await client.post(url, data, params(id=id), service=service)

        return update_one

    def build_delete(url: str):
        async def delete_many(ids: str | list[str]) -> ApiResponse[Any]:
            return await client.get(url, params(ids=join_ids(ids)), service=service)

        return delete_many

    def build_status(url: str):
        async def change_status(ids: str | list[str], status: str) -> ApiResponse[Any]:
            return await client.post(
                url, None, params(ids=join_ids(ids), status=status), service=service
            )

        return change_status

    builders = {
        "get": build_get,
        "list": build_list,
        "add": build_add,
        "update": build_update,
        "delete": build_delete,
        "status": build_status,
    }

    operations = {}
    for key, endpoint in endpoints.items():
        if isinstance(endpoint, CustomEndpoint):
            operations[key] = endpoint.func
        else:
            operations[key] = builders[key](endpoint.path)

    return CrudApi(
        get_one=operations["get"],
        list_page=operations["list"],
        add_one=operations["add"],
        update_one=operations["update"],
        delete=operations["delete"],
        change_status=operations["status"],
    )
