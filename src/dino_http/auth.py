"""Login endpoints."""

from __future__ import annotations

from collections.abc import Awaitable
from typing import TYPE_CHECKING, Callable, Optional

from .types import AuthToken, CamelModel, Tenant, UserInfo

if TYPE_CHECKING:
    from .client import ApiClient


class LoginAuthInfo(CamelModel):
    """Result of a login: the token plus the user's tenant context."""

    current_tenant: Optional[Tenant] = None
    tenant_list: Optional[list[Tenant]] = None
    user: Optional[UserInfo] = None
    auth_token: AuthToken


def define_refresh_token_api(
    client: ApiClient, path: str, service: str | None = None
) -> Callable[[str], Awaitable[LoginAuthInfo]]:
    """Build ``fn(refresh_token)`` exchanging a refresh token for a new login.

    The request is sent without the auth header, since the current
    credential is typically the one that expired.

    Example:
        >>> refresh = define_refresh_token_api(api, "/auth/refresh-token")
        >>> info = await refresh(store.refresh_token)
        >>> store.save(info.auth_token)
    """
    login = client.define_post_api(path, service=service, with_token=False)

    async def refresh(refresh_token: str) -> LoginAuthInfo:
        response = await login({"refreshToken": refresh_token})
        return LoginAuthInfo.model_validate(response.data)

    return refresh
