"""storelogin CLI - Main commands."""
import asyncio
import logging
import re
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

app = typer.Typer(
    name="storelogin",
    help="Epic Games Store login CLI",
    add_completion=False
)
console = Console()


# Sessions live in ~/.config/storelogin/<name>.session
def get_session_dir() -> Path:
    config_dir = Path.home() / ".config" / "storelogin"
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def session_name_for(email: str) -> str:
    """File-safe session name for an account."""
    return re.sub(r'[^A-Za-z0-9_.-]', '_', email.lower())


def session_file_for(email: str, session: Optional[str] = None) -> Path:
    """Session file used for an account, honouring an explicit --session name."""
    return get_session_dir() / f"{session or session_name_for(email)}.session"


def run_async(coro):
    """Run async function."""
    return asyncio.run(coro)


def _setup_logging(verbose: int) -> None:
    from storelogin import setup_logging, TRACE

    if verbose >= 2:
        setup_logging(TRACE)
    elif verbose == 1:
        setup_logging(logging.DEBUG)
    else:
        setup_logging(logging.WARNING)


async def _login_account(
    email: str,
    password: str,
    totp: Optional[str],
    session: Optional[str] = None
) -> None:
    from storelogin import StoreClient, ConsoleCaptchaSolver

    client = StoreClient(
        str(session_file_for(email, session)),
        captcha_solver=ConsoleCaptchaSolver(console)
    )
    try:
        await client.start(email, password, totp)
    finally:
        await client.close()


@app.command()
def login(
    email: str = typer.Option(None, "--email", "-e", help="Account email", envvar="STORELOGIN_EMAIL"),
    password: str = typer.Option(None, "--password", "-p", help="Account password", envvar="STORELOGIN_PASSWORD"),
    totp: Optional[str] = typer.Option(None, "--totp", help="TOTP secret for MFA", envvar="STORELOGIN_TOTP"),
    session: Optional[str] = typer.Option(None, "--session", "-s", help="Session name (defaults to the email)"),
    verbose: int = typer.Option(0, "--verbose", "-v", count=True, help="-v debug, -vv trace requests"),
):
    """Log in to the store and save the session."""
    _setup_logging(verbose)

    if not email:
        email = typer.prompt("Email")
    if not password:
        password = typer.prompt("Password", hide_input=True)

    try:
        run_async(_login_account(email, password, totp, session))
    except Exception as e:
        console.print(f"[red]Login failed: {e}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]Logged in as {email}[/green]")
    console.print(f"Session saved to: {session_file_for(email, session)}")


@app.command("login-all")
def login_all(
    accounts_file: Path = typer.Option(..., "--accounts", "-a", help="JSON file with accounts", exists=True),
    verbose: int = typer.Option(0, "--verbose", "-v", count=True, help="-v debug, -vv trace requests"),
):
    """Log in every account from an accounts file, one after another."""
    from storelogin import load_accounts, ConfigurationError

    _setup_logging(verbose)

    try:
        accounts = load_accounts(accounts_file)
    except ConfigurationError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    table = Table()
    table.add_column("Account", style="cyan")
    table.add_column("Result")

    failures = 0
    for account in accounts:
        try:
            run_async(_login_account(account.email, account.password, account.totp))
            table.add_row(account.email, "[green]logged in[/green]")
        except Exception as e:
            failures += 1
            table.add_row(account.email, f"[red]{e}[/red]")

    console.print(table)
    if failures:
        raise typer.Exit(1)


@app.command()
def verify(
    code: str = typer.Argument(..., help="Verification code received by email"),
    email: str = typer.Option(..., "--email", "-e", help="Account email", envvar="STORELOGIN_EMAIL"),
    session: Optional[str] = typer.Option(None, "--session", "-s", help="Session name (defaults to the email)"),
):
    """Submit an email verification code."""
    from storelogin import StoreClient

    async def do_verify():
        async with StoreClient(str(session_file_for(email, session))) as client:
            await client.send_email_verification(email, code)

    try:
        run_async(do_verify())
    except Exception as e:
        console.print(f"[red]Verification failed: {e}[/red]")
        raise typer.Exit(1)
    console.print("[green]Verification code sent[/green]")


@app.command()
def status(
    email: str = typer.Option(..., "--email", "-e", help="Account email", envvar="STORELOGIN_EMAIL"),
    session: Optional[str] = typer.Option(None, "--session", "-s", help="Session name (defaults to the email)"),
):
    """Check whether the saved session is still valid."""
    from storelogin import StoreClient

    session_file = session_file_for(email, session)
    if not session_file.exists():
        console.print("[red]Not logged in. Run 'storelogin login' first.[/red]")
        raise typer.Exit(1)

    async def do_check():
        async with StoreClient(str(session_file)) as client:
            return await client.is_logged_in(email)

    try:
        logged_in = run_async(do_check())
    except Exception as e:
        console.print(f"[red]Status check failed: {e}[/red]")
        raise typer.Exit(1)

    if logged_in:
        console.print(f"[green]Session for {email} is valid[/green]")
    else:
        console.print(f"[yellow]Session for {email} expired[/yellow]")
        raise typer.Exit(1)


@app.command()
def logout(
    email: str = typer.Option(..., "--email", "-e", help="Account email", envvar="STORELOGIN_EMAIL"),
    session: Optional[str] = typer.Option(None, "--session", "-s", help="Session name (defaults to the email)"),
):
    """Delete the saved session."""
    session_file = session_file_for(email, session)
    if session_file.exists():
        session_file.unlink()
        console.print("[green]Logged out successfully[/green]")
    else:
        console.print("[yellow]No active session[/yellow]")


if __name__ == "__main__":
    app()
