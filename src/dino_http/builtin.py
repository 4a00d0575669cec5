"""Built-in request and response interceptors.

Every service entry gets the interceptors below installed at setup time, in
this order. Later request interceptors depend on state set by earlier ones
(the tenant substitution must see the base URL chosen by the base-URL
interceptor, for example), so the order is part of the contract.

Request interceptors:
    1. default base URL
    2. default query parameters (request wins)
    3. default headers (request wins)
    4. default timeout
    5. default proxy
    6. form-urlencoded body serialization
    7. ``{tenant}`` substitution in URL and base URL
    8. auth header injection

Response interceptors:
    1. success check
    2. re-authentication (single retry)
    3. default error
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import replace
from typing import TYPE_CHECKING, Any, Callable

from loguru import logger

from . import qs
from .errors import ApiError, LoginExpiredError
from .types import AuthToken, RequestDescriptor, ResponseDescriptor, ServiceConfig
from .utils import resolve_value

if TYPE_CHECKING:
    from .interceptors import InterceptorManager
    from .message import Message
    from .pipeline import RequestContext, ResponseContext

FORM_URLENCODED = "application/x-www-form-urlencoded"
TENANT_PLACEHOLDER = "{tenant}"


# Request interceptors


def default_base_url(config: ServiceConfig) -> Callable:
    def apply_base_url(request: RequestDescriptor, ctx: RequestContext) -> RequestDescriptor:
        if request.base_url:
            return request
        return replace(request, base_url=config.base_url)

    return apply_base_url


def default_params(config: ServiceConfig) -> Callable:
    def merge_params(request: RequestDescriptor, ctx: RequestContext) -> RequestDescriptor:
        if not config.default_params:
            return request
        if request.params is None:
            return replace(request, params=dict(config.default_params))
        if isinstance(request.params, Mapping):
            return replace(request, params={**config.default_params, **request.params})
        return request

    return merge_params


def default_headers(config: ServiceConfig) -> Callable:
    def merge_headers(request: RequestDescriptor, ctx: RequestContext) -> RequestDescriptor:
        if not config.default_headers:
            return request
        present = {key.lower() for key in request.headers}
        merged = {
            key: value
            for key, value in config.default_headers.items()
            if key.lower() not in present
        }
        merged.update(request.headers)
        return replace(request, headers=merged)

    return merge_headers


def default_timeout(config: ServiceConfig) -> Callable:
    def apply_timeout(request: RequestDescriptor, ctx: RequestContext) -> RequestDescriptor:
        if config.request_timeout and config.request_timeout > 0 and request.timeout is None:
            return replace(request, timeout=config.request_timeout)
        return request

    return apply_timeout


def default_proxy(config: ServiceConfig) -> Callable:
    def apply_proxy(request: RequestDescriptor, ctx: RequestContext) -> RequestDescriptor:
        if config.proxy and request.proxy is None:
            return replace(request, proxy=config.proxy)
        return request

    return apply_proxy


def form_urlencoded(config: ServiceConfig) -> Callable:
    def encode_form(request: RequestDescriptor, ctx: RequestContext) -> RequestDescriptor:
        content_type = (request.header("Content-Type") or "").split(";")[0].strip().lower()
        if request.method == "POST" and content_type == FORM_URLENCODED:
            return replace(request, data=qs.stringify(request.data))
        return request

    return encode_form


def _tenant_id(tenant: Any) -> str | None:
    if not tenant:
        return None
    if isinstance(tenant, str):
        return tenant
    if isinstance(tenant, Mapping):
        value = tenant.get("id")
    else:
        value = getattr(tenant, "id", None)
    return str(value) if value not in (None, "") else None


def tenant_substitution(config: ServiceConfig) -> Callable:
    async def substitute_tenant(
        request: RequestDescriptor, ctx: RequestContext
    ) -> RequestDescriptor:
        tenant_id = _tenant_id(await resolve_value(config.tenant))
        if tenant_id is None:
            return request
        return replace(
            request,
            url=request.url.replace(TENANT_PLACEHOLDER, tenant_id),
            base_url=(request.base_url or "").replace(TENANT_PLACEHOLDER, tenant_id),
        )

    return substitute_tenant


def auth_injection(config: ServiceConfig) -> Callable:
    async def inject_auth(request: RequestDescriptor, ctx: RequestContext) -> RequestDescriptor:
        if request.skip_auth:
            return request
        token = await resolve_value(config.auth_token)
        if not token:
            return request
        if isinstance(token, Mapping):
            token = AuthToken.model_validate(token)
        headers = {
            key: value
            for key, value in request.headers.items()
            if key.lower() != token.auth_header_name.lower()
        }
        headers[token.auth_header_name] = token.auth_payload
        return replace(request, headers=headers)

    return inject_auth


# Response interceptors


def success_check(config: ServiceConfig) -> Callable:
    """Pass success and "needs login" responses, reject everything else."""

    def check_success(response: ResponseDescriptor, ctx: ResponseContext) -> ResponseDescriptor:
        if config.is_success(response.code) or config.needs_login(response.code):
            return response
        raise ApiError(response)

    return check_success


def reauth(config: ServiceConfig, message: Message) -> Callable:
    """Re-authenticate once on a "needs login" code.

    On a successful ``auto_login`` the response comes back flagged with
    ``reissue``; the pipeline then sends the original request again with
    ``ctx.attempt`` incremented. Once ``ctx.attempt`` reaches
    ``ctx.max_reauth`` a further "needs login" code is final.
    """

    async def expire(response: ResponseDescriptor, reason: str, cause=None):
        logger.warning(f"[{response.code}] login expired: {reason}")
        await resolve_value(config.on_login_expired)
        return LoginExpiredError(response, reason, cause=cause)

    async def check_login(
        response: ResponseDescriptor, ctx: ResponseContext
    ) -> ResponseDescriptor:
        if response.reissue or not config.needs_login(response.code):
            return response

        if ctx.attempt >= ctx.max_reauth:
            raise await expire(response, "still needs login after re-authentication")

        try:
            logged_in = await resolve_value(config.auto_login)
        except Exception as e:
            message.error(str(e))
            raise await expire(response, str(e), cause=e) from e

        if logged_in is False:
            message.error("auto login failed")
            raise await expire(response, "auto login failed")

        logger.info(f"Re-authenticated for service '{ctx.service}', reissuing request")
        return replace(response, reissue=True)

    return check_login


def default_error(config: ServiceConfig) -> Callable:
    def reject_failure(
        response: ResponseDescriptor, ctx: ResponseContext
    ) -> ResponseDescriptor:
        if response.reissue or config.is_success(response.code):
            return response
        raise ApiError(response)

    return reject_failure


def install(
    config: ServiceConfig,
    request_interceptors: InterceptorManager,
    response_interceptors: InterceptorManager,
    message: Message,
) -> None:
    """Install the built-in interceptors on a pair of managers, in order."""
    for factory in (
        default_base_url,
        default_params,
        default_headers,
        default_timeout,
        default_proxy,
        form_urlencoded,
        tenant_substitution,
        auth_injection,
    ):
        request_interceptors.use(factory(config))

    response_interceptors.use(success_check(config))
    response_interceptors.use(reauth(config, message))
    response_interceptors.use(default_error(config))
