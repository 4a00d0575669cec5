"""Example demonstrating tenants, tokens and automatic re-login."""

import asyncio
from dataclasses import replace

from dino_http import (
    ApiClient,
    AuthToken,
    LoginExpiredError,
    ServiceConfig,
    Tenant,
    define_refresh_token_api,
)


class Session:
    """In-memory credential store."""

    def __init__(self):
        self.tenant = Tenant(id="acme", name="Acme")
        self.token = AuthToken(
            refresh_token="refresh-token",
            auth_header_name="Authorization",
            auth_payload="Bearer expired",
        )
        self.refresh = None

    async def auto_login(self):
        """Exchange the refresh token; the failed request is retried once."""
        info = await self.refresh(self.token.refresh_token)
        self.token = info.auth_token
        return True

    def logout(self):
        print("Session expired, please sign in again")


async def main():
    session = Session()

    async with ApiClient() as api:
        entry = api.setup_api(
            ServiceConfig(
                base_url="https://{tenant}.api.example.com",
                need_login_code=[630, 631],
                tenant=lambda: session.tenant,
                auth_token=lambda: session.token,
                auto_login=session.auto_login,
                on_login_expired=session.logout,
            )
        )
        session.refresh = define_refresh_token_api(api, "/auth/refresh-token")

        # Custom interceptor, runs after the built-in ones
        def add_client_header(request, ctx):
            return replace(request, headers={**request.headers, "X-Client": "dino-http"})

        remove = entry.request_interceptors.use(add_client_header)

        try:
            profile = await api.get("/user/profile")
            print(f"Profile: {profile.data}")
        except LoginExpiredError:
            print("Could not re-authenticate")
        finally:
            remove()


if __name__ == "__main__":
    asyncio.run(main())
