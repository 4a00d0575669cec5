"""Type definitions for dino-http.

This module defines the data model that flows through the request pipeline:
service configuration, the request/response descriptors handed to and from
the transport, authentication and tenant value objects, and the business
envelope returned by the backend.

Configuration objects follow the same split as the rest of the package:
``ServiceConfig`` is a plain dataclass holding behaviour (hooks), while
nested value objects are Pydantic models so they can be validated from
decoded JSON.

Classes:
    ServiceConfig: Base configuration and behavioural hooks for a service
    ProxyConfig: Proxy settings forwarded to the transport
    AuthToken: Credential injected into outbound requests
    Tenant: Multi-tenancy identifier substituted into URL templates
    RequestDescriptor: Transport-independent outbound request
    ResponseDescriptor: Transport-independent inbound response
    ApiResponse: ``{code, msg, cost, data}`` business envelope
    ApiPageResponse: Paginated envelope with ``total``/``total_page``/``pn``/``pl``

Type Aliases:
    Hook: A callable returning a value or an awaitable
    Transport: Async callable executing a ``RequestDescriptor``
    TransportFactory: Builds a ``Transport`` for a ``ServiceConfig``

Example:
    Configure a tenant-aware service::

        from dino_http.types import AuthToken, ServiceConfig, Tenant

        config = ServiceConfig(
            base_url="https://api.example.com/{tenant}",
            success_code=0,
            need_login_code=[630],
            tenant=lambda: Tenant(id="acme", name="Acme"),
            auth_token=lambda: AuthToken(
                refresh_token="r",
                expires_in=3600,
                auth_header_name="Authorization",
                auth_payload="Bearer xyz",
            ),
        )
"""

from __future__ import annotations

from collections.abc import Awaitable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Literal, Optional, TypeVar, Union

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from .errors import AutoLoginError
from .utils import as_array

DataT = TypeVar("DataT")

Hook = Callable[[], Any]
"""Callable returning a value or an awaitable of that value."""

ResponseType = Literal["json", "text", "bytes"]

DEFAULT_REQUEST_TIMEOUT = 60.0
DEFAULT_SUCCESS_CODE = 0
DEFAULT_NEED_LOGIN_CODE = 630


class CamelModel(BaseModel):
    """Base for models decoded from camelCase wire data."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BasicCredentials(BaseModel):
    """Username/password pair used for proxy authentication."""

    username: str
    password: str


class ProxyConfig(BaseModel):
    """Proxy settings for a service or a single request.

    Attributes:
        host: Proxy host name
        port: Proxy port
        auth: Optional basic credentials
        protocol: ``http``, ``https``, ``socks4`` or ``socks5`` (default: ``http``)

    Example:
        Route a service through a local proxy::

            proxy = ProxyConfig(host="127.0.0.1", port=8888)
            proxy.url  # "http://127.0.0.1:8888"
    """

    host: str
    port: int
    auth: Optional[BasicCredentials] = None
    protocol: Literal["http", "https", "socks4", "socks5"] = "http"

    @property
    def url(self) -> str:
        """Proxy URL in the form understood by httpx."""
        userinfo = ""
        if self.auth:
            userinfo = f"{self.auth.username}:{self.auth.password}@"
        return f"{self.protocol}://{userinfo}{self.host}:{self.port}"


class AuthToken(CamelModel):
    """Login credential.

    Attributes:
        refresh_token: Token used to obtain a fresh credential
        expires_in: Credential lifetime in seconds
        auth_header_name: Header the credential is injected under
        auth_payload: Header value, e.g. ``"Bearer <jwt>"``
    """

    refresh_token: str = ""
    expires_in: int = 0
    auth_header_name: str
    auth_payload: str


class Tenant(CamelModel):
    """Tenant information. Only ``id`` is used by the pipeline."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    id: Union[str, int]
    name: str = ""
    logo: str = ""


class UserInfo(CamelModel):
    """User returned by the login endpoints."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    id: Union[str, int]
    user_type: str = ""
    display_name: str = ""
    avatar_url: str = ""
    tenant_id: Optional[str] = None
    status: int = 0


class ApiResponse(CamelModel, Generic[DataT]):
    """Business envelope ``{code, msg, cost, data}``."""

    code: int
    msg: str = ""
    cost: float = 0
    data: Optional[DataT] = None


class ApiPageResponse(ApiResponse[list[DataT]], Generic[DataT]):
    """Paginated envelope.

    Example:
        >>> ApiPageResponse.model_validate({
        ...     "code": 0, "msg": "ok", "cost": 3, "data": [{"id": 1}],
        ...     "total": 1, "totalPage": 1, "pn": 0, "pl": 20,
        ... }).total_page
        1
    """

    total: int = 0
    total_page: int = 0
    pn: int = 0
    pl: int = 0


class Pageable(BaseModel):
    """Pagination parameters: zero-based page index and page length."""

    pn: int = 0
    pl: int = 20


Sortable = Union[str, list[str]]
"""``field`` or ``field:asc|desc``, or an ordered list of those."""


@dataclass(frozen=True)
class ProgressEvent:
    """Upload or download progress reported by the transport."""

    loaded: int
    total: int | None = None
    upload: bool = False
    download: bool = False

    @property
    def progress(self) -> float | None:
        """Completion percentage (0-100), ``None`` when the total is unknown."""
        if not self.total:
            return None
        return self.loaded * 100.0 / self.total


ProgressHandler = Callable[[ProgressEvent], None]


@dataclass
class RequestDescriptor:
    """An outbound request before it reaches the transport.

    Built-in request interceptors never mutate a descriptor in place; they
    return an updated copy with ``dataclasses.replace``.

    Attributes:
        method: HTTP method, upper case
        url: Path or absolute URL; may contain ``{tenant}``
        base_url: Base URL override; ``None`` means "use the service default"
        headers: Request headers
        params: Query parameters, arbitrarily nested
        data: Body payload
        timeout: Timeout in seconds; ``None`` means "use the service default"
        skip_auth: When true the auth header is not injected
        proxy: Proxy override; ``None`` means "use the service default"
        response_type: How the transport decodes the body
        on_upload_progress: Upload progress callback
        on_download_progress: Download progress callback
    """

    url: str = ""
    method: str = "GET"
    base_url: str | None = None
    headers: dict[str, str] = field(default_factory=dict)
    params: Any = None
    data: Any = None
    timeout: float | None = None
    skip_auth: bool = False
    proxy: ProxyConfig | None = None
    response_type: ResponseType = "json"
    on_upload_progress: ProgressHandler | None = None
    on_download_progress: ProgressHandler | None = None

    def __post_init__(self) -> None:
        self.method = self.method.upper()

    def header(self, name: str) -> str | None:
        """Case-insensitive header lookup."""
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return None


@dataclass
class ResponseDescriptor:
    """An inbound response as produced by the transport.

    Attributes:
        status: HTTP status code
        status_text: HTTP reason phrase
        headers: Response headers
        body: Decoded body; for the backend this is the business envelope
        request: The descriptor that was actually sent
        reissue: Set by the re-auth interceptor to ask for the single retry
    """

    status: int
    status_text: str = ""
    headers: dict[str, str] = field(default_factory=dict)
    body: Any = None
    request: RequestDescriptor | None = None
    reissue: bool = False

    @property
    def code(self) -> Any:
        """Business code of the envelope, ``None`` when the body has none."""
        if isinstance(self.body, Mapping):
            return self.body.get("code")
        return None

    @property
    def msg(self) -> str:
        """Business message of the envelope, empty when missing."""
        if isinstance(self.body, Mapping):
            return str(self.body.get("msg") or "")
        return ""


Transport = Callable[[RequestDescriptor], Awaitable[ResponseDescriptor]]
"""Async callable executing a request descriptor."""


def _no_tenant() -> Tenant | None:
    return None


def _no_auth_token() -> AuthToken | None:
    return None


async def _auto_login_not_configured() -> bool:
    raise AutoLoginError("auto_login is not implemented for this service")


def _ignore_login_expired() -> None:
    return None


@dataclass
class ServiceConfig:
    """Configuration for a backend service.

    Holds the per-service defaults applied by the built-in request
    interceptors and the hooks the pipeline calls for tenancy and
    authentication. Every hook may be synchronous or return an awaitable.

    Attributes:
        base_url: Base URL, may contain a ``{tenant}`` placeholder
        request_timeout: Timeout in seconds applied when a request sets none (default: 60.0)
        success_code: Business code(s) meaning success (default: 0)
        need_login_code: Business code(s) meaning "re-authenticate" (default: 630)
        default_headers: Headers merged under request headers
        default_params: Query parameters merged under request parameters
        proxy: Proxy applied when a request sets none
        tenant: Hook returning the current ``Tenant`` or ``None``
        auth_token: Hook returning the current ``AuthToken`` or ``None``
        auto_login: Hook re-authenticating; fails by raising or returning ``False``
        on_login_expired: Hook called when re-authentication is impossible

    Notes:
        ``success_code`` and ``need_login_code`` accept a single int or any
        iterable of ints and are normalized to frozensets.
        The default ``auto_login`` always fails, forcing explicit configuration.
    """

    base_url: str = ""
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    success_code: int | Iterable[int] = DEFAULT_SUCCESS_CODE
    need_login_code: int | Iterable[int] = DEFAULT_NEED_LOGIN_CODE
    default_headers: dict[str, str] = field(default_factory=dict)
    default_params: dict[str, Any] = field(default_factory=dict)
    proxy: ProxyConfig | dict[str, Any] | None = None
    tenant: Hook = _no_tenant
    auth_token: Hook = _no_auth_token
    auto_login: Hook = _auto_login_not_configured
    on_login_expired: Hook = _ignore_login_expired

    def __post_init__(self) -> None:
        self.success_code = frozenset(as_array(self.success_code))
        self.need_login_code = frozenset(as_array(self.need_login_code))
        if isinstance(self.proxy, dict):
            self.proxy = ProxyConfig(**self.proxy)

    def is_success(self, code: Any) -> bool:
        """Whether ``code`` is in the success set."""
        return code in self.success_code

    def needs_login(self, code: Any) -> bool:
        """Whether ``code`` is in the "needs login" set."""
        return code in self.need_login_code


TransportFactory = Callable[[ServiceConfig], Transport]
"""Builds the transport used by a service entry."""
