"""Client-side HTTP API access layer.

dino-http lets an application register named backend services, each with
its own base configuration, and issue GET/POST/upload/paginated requests
through one interceptor pipeline. Keys are converted between the wire
convention (snake_case) and the application convention (camelCase) on the
way out and on the way back.

Key Features:
    - Named services with per-service defaults (base URL, headers, params,
      timeout, proxy)
    - Ordered request/response interceptor chains, sync or async handlers
    - Multi-tenant URL templates (``{tenant}``)
    - Auth header injection with a single automatic retry after re-login
    - Business envelope decoding (``{code, msg, cost, data}``)
    - Endpoint builders, CRUD and tree factories

Quick Start:
    Basic usage example::

        from dino_http import ApiClient, AuthToken, ServiceConfig

        api = ApiClient()
        api.setup_api(
            ServiceConfig(
                base_url="https://api.example.com/{tenant}",
                tenant=lambda: {"id": "acme"},
                auth_token=lambda: AuthToken(
                    auth_header_name="Authorization",
                    auth_payload="Bearer xyz",
                ),
                auto_login=session.refresh,
            )
        )

        get_user = api.define_get_api("/user/id")
        user = (await get_user({"id": 1})).data

    Add an interceptor::

        entry = api.use_api()

        async def add_request_id(request, ctx):
            return dataclasses.replace(
                request, headers={**request.headers, "X-Request-ID": new_id()}
            )

        cancel = entry.request_interceptors.use(add_request_id)

See Also:
    - ServiceConfig: Configuration options for services
    - InterceptorManager: Ordered interceptor chains
    - RequestPipeline: Request/response orchestration and re-auth retry
"""

from .auth import LoginAuthInfo, define_refresh_token_api
from .client import ApiClient, merge_params, page_params
from .config import load_service_config
from .crud import CrudApi, CustomEndpoint, PathEndpoint, define_crud_api
from .errors import (
    ApiError,
    ApiStatusError,
    AutoLoginError,
    ConfigurationError,
    DinoHTTPError,
    LoginExpiredError,
    ServiceNotFoundError,
    TransportError,
)
from .interceptors import InterceptorHandler, InterceptorManager
from .message import LoggingMessage, Message
from .pipeline import RequestContext, RequestPipeline, ResponseContext
from .registry import DEFAULT_SERVICE, ServiceEntry, ServiceRegistry
from .transcoder import to_camel_object, to_snake_object
from .transport import HTTPXTransport, httpx_transport
from .tree import TreeApi, define_tree_api
from .types import (
    ApiPageResponse,
    ApiResponse,
    AuthToken,
    Pageable,
    ProgressEvent,
    ProxyConfig,
    RequestDescriptor,
    ResponseDescriptor,
    ServiceConfig,
    Tenant,
    UserInfo,
)

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_SERVICE",
    "ApiClient",
    "ApiError",
    "ApiPageResponse",
    "ApiResponse",
    "ApiStatusError",
    "AuthToken",
    "AutoLoginError",
    "ConfigurationError",
    "CrudApi",
    "CustomEndpoint",
    "DinoHTTPError",
    "HTTPXTransport",
    "InterceptorHandler",
    "InterceptorManager",
    "LoggingMessage",
    "LoginAuthInfo",
    "LoginExpiredError",
    "Message",
    "Pageable",
    "PathEndpoint",
    "ProgressEvent",
    "ProxyConfig",
    "RequestContext",
    "RequestDescriptor",
    "RequestPipeline",
    "ResponseContext",
    "ResponseDescriptor",
    "ServiceConfig",
    "ServiceEntry",
    "ServiceNotFoundError",
    "ServiceRegistry",
    "Tenant",
    "TransportError",
    "TreeApi",
    "UserInfo",
    "__version__",
    "define_crud_api",
    "define_refresh_token_api",
    "define_tree_api",
    "httpx_transport",
    "load_service_config",
    "merge_params",
    "page_params",
    "to_camel_object",
    "to_snake_object",
]
