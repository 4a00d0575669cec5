"""Tree endpoint factory."""

from __future__ import annotations

from collections.abc import Awaitable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable

from .types import ApiPageResponse, ApiResponse, Pageable

if TYPE_CHECKING:
    from .client import ApiClient


@dataclass
class TreeApi:
    """Operations of a tree-shaped resource."""

    get_tree: Callable[[str | int], Awaitable[ApiResponse[Any]]]
    get_picker_tree: Callable[[str | int], Awaitable[ApiResponse[Any]]]
    get_search: Callable[..., Awaitable[ApiPageResponse[Any]]]
    get_options: Callable[..., Awaitable[ApiPageResponse[Any]]]


def define_tree_api(client: ApiClient, path: str, service: str | None = None) -> TreeApi:
    """Define tree operations under ``path``.

    ``get_tree`` and ``get_picker_tree`` GET ``{path}/tree`` and
    ``{path}/picker-tree`` with ``parentId``; ``get_search`` and
    ``get_options`` POST a paginated query to ``{path}/search`` and
    ``{path}/options``.
    """

    async def get_tree(parent_id: str | int) -> ApiResponse[Any]:
        return await client.get(f"{path}/tree", {"parentId": parent_id}, service=service)

    async def get_picker_tree(parent_id: str | int) -> ApiResponse[Any]:
        return await client.get(f"{path}/picker-tree", {"parentId": parent_id}, service=service)

    async def get_search(data: Any, page: Pageable | Mapping[str, Any]) -> ApiPageResponse[Any]:
        return await client.post_page(f"{path}/search", data, page, service=service)

    async def get_options(data: Any, page: Pageable | Mapping[str, Any]) -> ApiPageResponse[Any]:
        return await client.post_page(f"{path}/options", data, page, service=service)

    return TreeApi(
        get_tree=get_tree,
        get_picker_tree=get_picker_tree,
        get_search=get_search,
        get_options=get_options,
    )
