"""Example demonstrating basic dino-http usage."""

import asyncio

from dino_http import ApiClient, ApiError, ServiceConfig, define_crud_api


async def main():
    async with ApiClient() as api:
        api.setup_api(
            ServiceConfig(
                base_url="https://api.example.com",
                default_headers={"Accept-Language": "en"},
                request_timeout=10,
            )
        )

        # One-off calls
        user = await api.get("/user/id", {"id": 1})
        print(f"User: {user.data}")

        # Reusable endpoints
        search_users = api.define_post_page_api("/user/search", {"status": "active"})
        page = await search_users({"displayName": "dino"}, {"pn": 0, "pl": 20}, sort="age:desc")
        print(f"Found {page.total} users over {page.total_page} pages")

        # CRUD resource
        users = define_crud_api(api, "/user")
        try:
            await users.change_status(["1", "2"], "disabled")
        except ApiError as e:
            print(f"Rejected: [{e.code}] {e.msg}")


if __name__ == "__main__":
    asyncio.run(main())
