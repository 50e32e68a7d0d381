"""
Multiple accounts - Log in every account from a JSON file
"""
import asyncio

from storelogin import StoreClient, ConsoleCaptchaSolver, load_accounts, setup_logging


async def main():
    setup_logging()
    solver = ConsoleCaptchaSolver()

    # accounts.json: {"accounts": [{"email": ..., "password": ..., "totp": ...}]}
    for account in load_accounts("accounts.json"):
        async with StoreClient(account.email, captcha_solver=solver) as store:
            await store.start(account.email, account.password, account.totp)
            print(f"{account.email}: ok")


if __name__ == "__main__":
    asyncio.run(main())
