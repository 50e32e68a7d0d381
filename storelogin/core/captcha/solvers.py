"""
Captcha solver implementations.

Provides an interactive console solver and an adapter for plain callables.
"""
import asyncio
import inspect
from typing import Callable, Optional, Union, Awaitable

from rich.console import Console

from .protocols import CaptchaSolver
from ..exceptions import CaptchaError
from ..logging import get_logger

SolverFunc = Callable[[str, Optional[str]], Union[str, Awaitable[str]]]


class ConsoleCaptchaSolver(CaptchaSolver):
    """
    Asks a human for the solved token on the terminal.

    The challenge parameters are printed so they can be fed to any Arkose
    capable page; the pasted token is returned as-is. Blocks until the user
    answers.

    Example:
        >>> solver = ConsoleCaptchaSolver()
        >>> token = await solver.solve(ArkosePublicKey.LOGIN.value, blob)
    """

    def __init__(self, console: Optional[Console] = None):
        self._console = console or Console(stderr=True)
        self._logger = get_logger('captcha')

    async def solve(self, public_key: str, blob: Optional[str] = None) -> str:
        self._logger.info("Manual captcha requested for key %s", public_key)
        self._console.print("[yellow]Captcha required to continue the login.[/yellow]")
        self._console.print(f"Public key: [bold]{public_key}[/bold]")
        if blob:
            self._console.print(f"Data blob: {blob}")

        loop = asyncio.get_event_loop()

        # Use thread executor for blocking input
        def read_token():
            return self._console.input("Solved captcha token: ")

        token = (await loop.run_in_executor(None, read_token)).strip()
        if not token:
            raise CaptchaError('No captcha token entered')
        return token


class CallbackCaptchaSolver(CaptchaSolver):
    """
    Wraps a sync or async function ``(public_key, blob) -> token``.
    """

    def __init__(self, func: SolverFunc):
        self._func = func

    async def solve(self, public_key: str, blob: Optional[str] = None) -> str:
        token = self._func(public_key, blob)
        if inspect.isawaitable(token):
            token = await token
        if not token:
            raise CaptchaError('Captcha callback returned an empty token')
        return token
