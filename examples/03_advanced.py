"""
Advanced - Proxy, custom captcha solver and the low-level login session
"""
import asyncio

from storelogin import (
    APIConfig,
    AsyncHTTPClient,
    CallbackCaptchaSolver,
    LoginSession,
    StoreClient,
    TRACE,
    setup_logging,
)


async def solve_with_service(public_key, blob):
    # Hand the challenge to an external solving service here
    return input(f"Token for {public_key}: ")


async def main():
    # TRACE logs every request (passwords and codes are masked)
    setup_logging(TRACE)

    config = StoreClient.create_config(proxy="http://proxy:8080", timeout=30)
    async with StoreClient(config=config, captcha_solver=CallbackCaptchaSolver(solve_with_service)) as store:
        await store.start("user@example.com", "password")

    # Driving the flow step by step
    async with AsyncHTTPClient(APIConfig.default()) as http:
        session = LoginSession(http, "user@example.com")
        if not await session.refresh_and_sid(False):
            reputation = await session.get_reputation()
            await session.login("user@example.com", "password", blob=reputation.blob)
            await session.refresh_and_sid(True)


if __name__ == "__main__":
    asyncio.run(main())
