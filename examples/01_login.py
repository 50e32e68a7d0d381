"""
Basic usage - Log in and keep the session
"""
import asyncio
import os

from storelogin import StoreClient, ConsoleCaptchaSolver


async def main():
    # Session mode (cookies saved to my_account.session)
    # Next runs reuse the saved cookies and only refresh the SID
    async with StoreClient("my_account", captcha_solver=ConsoleCaptchaSolver()) as store:
        await store.start(
            os.environ["STORELOGIN_EMAIL"],
            os.environ["STORELOGIN_PASSWORD"],
            os.environ.get("STORELOGIN_TOTP"),
        )

        print(f"Logged in as {store.email}")
        for morsel in store.cookie_jar:
            print(f"  {morsel.key} ({morsel['domain']})")


if __name__ == "__main__":
    asyncio.run(main())
