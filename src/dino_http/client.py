"""API client: composition root and endpoint builders.

``ApiClient`` owns the service registry and the message boundary. Its
request helpers shape parameters, apply the key-casing transcoder on the
way out (snake_case) and on the way back (camelCase), and decode the
business envelope. The ``define_*`` builders return reusable coroutine
functions bound to a path and default parameters.

Example:
    Basic usage::

        from dino_http import ApiClient, ServiceConfig

        api = ApiClient()
        api.setup_api(ServiceConfig(base_url="https://api.example.com"))

        list_users = api.define_post_page_api("/user/list", {"status": "active"})
        page = await list_users({"displayName": "dino"}, {"pn": 0, "pl": 20}, sort="age:desc")
        for user in page.data:
            print(user["displayName"])

    Several services::

        api.setup_api(ServiceConfig(base_url="https://billing.example.com"), name="billing")
        invoice = await api.get("/invoice/id", {"id": 42}, service="billing")
"""

from __future__ import annotations

from collections.abc import Awaitable, Mapping
from dataclasses import replace
from typing import Any, Callable

from .errors import ApiStatusError
from .message import LoggingMessage, Message
from .registry import DEFAULT_SERVICE, ServiceEntry, ServiceRegistry
from .transcoder import to_camel_object, to_snake_object
from .transport import MULTIPART_FORM_DATA, httpx_transport
from .types import (
    ApiPageResponse,
    ApiResponse,
    Pageable,
    RequestDescriptor,
    ServiceConfig,
    Sortable,
    TransportFactory,
)

JSON_CONTENT_TYPE = "application/json"


def merge_params(*sources: Mapping[str, Any] | None) -> dict[str, Any]:
    """Merge parameter mappings left to right; later values win."""
    merged: dict[str, Any] = {}
    for source in sources:
        if source:
            merged.update(source)
    return merged


def page_params(
    params: Mapping[str, Any] | None,
    page: Pageable | Mapping[str, Any],
    sort: Sortable | Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Attach pagination and sort parameters.

    Example:
        >>> page_params({"status": 1}, {"pn": 0, "pl": 20}, "age:desc")
        {'status': 1, 'pn': 0, 'pl': 20, 'sort': 'age:desc'}
    """
    if isinstance(page, Pageable):
        page = page.model_dump()
    merged = merge_params(params, page)
    if isinstance(sort, Mapping):
        merged.update(sort)
    elif sort:
        merged["sort"] = sort
    return merged


class ApiClient:
    """Entry point owning the service registry.

    Args:
        message: User-facing message surface (default: ``LoggingMessage``)
        transport_factory: Transport used by services set up without one
    """

    def __init__(
        self,
        message: Message | None = None,
        transport_factory: TransportFactory = httpx_transport,
    ):
        self.message = message or LoggingMessage()
        self.registry = ServiceRegistry(self.message)
        self.transport_factory = transport_factory

    async def __aenter__(self) -> ApiClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close all service transports."""
        await self.registry.aclose()

    # Service setup

    def setup_api(
        self,
        config: ServiceConfig | None = None,
        *,
        name: str = DEFAULT_SERVICE,
        transport_factory: TransportFactory | None = None,
        **overrides: Any,
    ) -> ServiceEntry:
        """Set up (or replace) a service.

        Args:
            config: Service configuration (default: ``ServiceConfig()``)
            name: Service name (default: the default service)
            transport_factory: Overrides the client's transport factory
            **overrides: ``ServiceConfig`` fields replacing those of ``config``

        Returns:
            The registry entry, whose interceptor managers can be extended.
        """
        if config is None:
            config = ServiceConfig(**overrides)
        elif overrides:
            config = replace(config, **overrides)
        return self.registry.setup(config, transport_factory or self.transport_factory, name)

    def use_api(self, name: str | None = None) -> ServiceEntry:
        """Look up a service entry; raises ``ServiceNotFoundError`` if missing."""
        return self.registry.get(name)

    # Requests

    async def request(
        self,
        url: str,
        *,
        method: str = "GET",
        service: str | None = None,
        params: Mapping[str, Any] | None = None,
        data: Any = None,
        headers: Mapping[str, str] | None = None,
        content_type: str | None = None,
        with_token: bool = True,
        **options: Any,
    ) -> Any:
        """Send a request through a service pipeline.

        Args:
            url: Path relative to the service base URL, or absolute URL
            method: HTTP method (default: GET)
            service: Service name (default: the default service)
            params: Query parameters, converted to snake_case keys
            data: Body, sent as-is
            headers: Extra headers
            content_type: Content-Type header (default: ``application/json``)
            with_token: Inject the auth header (default: True); passing
                ``skip_auth=True`` in ``options`` has the same effect
            **options: Other ``RequestDescriptor`` fields (timeout, proxy,
                base_url, response_type, progress callbacks)

        Returns:
            The response body with keys converted to camelCase.

        Raises:
            ApiStatusError: If the HTTP status is not 200
            ApiError: If the business code is not a success code
            TransportError: On network failure
        """
        entry = self.use_api(service)
        skip_auth = options.pop("skip_auth", False) or not with_token
        descriptor = RequestDescriptor(
            url=url,
            method=method,
            headers={"Content-Type": content_type or JSON_CONTENT_TYPE, **(headers or {})},
            params=to_snake_object(params),
            data=data,
            skip_auth=skip_auth,
            **options,
        )

        response = await entry.request(descriptor)
        if response.status != 200:
            raise ApiStatusError(response)
        return to_camel_object(response.body)

    async def get(
        self, url: str, params: Mapping[str, Any] | None = None, **options: Any
    ) -> ApiResponse[Any]:
        """GET returning the decoded envelope."""
        body = await self.request(url, method="GET", params=params, **options)
        return ApiResponse[Any].model_validate(body)

    async def post(
        self,
        url: str,
        data: Any = None,
        params: Mapping[str, Any] | None = None,
        **options: Any,
    ) -> ApiResponse[Any]:
        """POST; the payload is sent as ``{"body": <snake_case data>}``."""
        body = await self.request(
            url, method="POST", params=params, data={"body": to_snake_object(data)}, **options
        )
        return ApiResponse[Any].model_validate(body)

    async def upload(
        self,
        url: str,
        data: Mapping[str, Any],
        params: Mapping[str, Any] | None = None,
        *,
        method: str = "POST",
        **options: Any,
    ) -> ApiResponse[Any]:
        """Multipart upload.

        Values of ``data`` that are bytes, file objects or
        ``(filename, content[, content_type])`` tuples are sent as files;
        everything else as form fields.
        """
        body = await self.request(
            url,
            method=method,
            params=params,
            data=data,
            content_type=MULTIPART_FORM_DATA,
            **options,
        )
        return ApiResponse[Any].model_validate(body)

    async def get_page(
        self,
        url: str,
        page: Pageable | Mapping[str, Any],
        params: Mapping[str, Any] | None = None,
        sort: Sortable | None = None,
        **options: Any,
    ) -> ApiPageResponse[Any]:
        """Paginated GET."""
        body = await self.request(
            url, method="GET", params=page_params(params, page, sort), **options
        )
        return ApiPageResponse[Any].model_validate(body)

    async def post_page(
        self,
        url: str,
        data: Any,
        page: Pageable | Mapping[str, Any],
        params: Mapping[str, Any] | None = None,
        sort: Sortable | None = None,
        **options: Any,
    ) -> ApiPageResponse[Any]:
        """Paginated POST; the payload is wrapped like ``post``."""
        body = await self.request(
            url,
            method="POST",
            params=page_params(params, page, sort),
            data={"body": to_snake_object(data)},
            **options,
        )
        return ApiPageResponse[Any].model_validate(body)

    # Endpoint builders

    def define_get_api(
        self, url: str, default_params: Mapping[str, Any] | None = None, **options: Any
    ) -> Callable[..., Awaitable[ApiResponse[Any]]]:
        """Build ``fn(params=None)`` performing a GET."""

        async def call(params: Mapping[str, Any] | None = None) -> ApiResponse[Any]:
            return await self.get(url, merge_params(default_params, params), **options)

        return call

    def define_post_api(
        self, url: str, default_params: Mapping[str, Any] | None = None, **options: Any
    ) -> Callable[..., Awaitable[ApiResponse[Any]]]:
        """Build ``fn(data, params=None)`` performing a POST."""

        async def call(data: Any, params: Mapping[str, Any] | None = None) -> ApiResponse[Any]:
            return await self.post(url, data, merge_params(default_params, params), **options)

        return call

    def define_get_page_api(
        self, url: str, default_params: Mapping[str, Any] | None = None, **options: Any
    ) -> Callable[..., Awaitable[ApiPageResponse[Any]]]:
        """Build ``fn(params, page, sort=None)`` performing a paginated GET."""

        async def call(
            params: Mapping[str, Any] | None,
            page: Pageable | Mapping[str, Any],
            sort: Sortable | None = None,
        ) -> ApiPageResponse[Any]:
            return await self.get_page(
                url, page, merge_params(default_params, params), sort, **options
            )

        return call

    def define_post_page_api(
        self, url: str, default_params: Mapping[str, Any] | None = None, **options: Any
    ) -> Callable[..., Awaitable[ApiPageResponse[Any]]]:
        """Build ``fn(data, page, params=None, sort=None)`` performing a paginated POST."""

        async def call(
            data: Any,
            page: Pageable | Mapping[str, Any],
            params: Mapping[str, Any] | None = None,
            sort: Sortable | None = None,
        ) -> ApiPageResponse[Any]:
            return await self.post_page(
                url, data, page, merge_params(default_params, params), sort, **options
            )

        return call

    def define_upload_api(
        self, url: str, default_params: Mapping[str, Any] | None = None, **options: Any
    ) -> Callable[..., Awaitable[ApiResponse[Any]]]:
        """Build ``fn(data, params=None, **progress)`` performing an upload."""

        async def call(
            data: Mapping[str, Any],
            params: Mapping[str, Any] | None = None,
            **progress: Any,
        ) -> ApiResponse[Any]:
            return await self.upload(
                url, data, merge_params(default_params, params), **options, **progress
            )

        return call
