"""
Captcha solver protocols.

The login flow only needs something that turns challenge parameters into a
solved token; how the token is obtained (a human, a browser, a service) is
up to the implementation.
"""
from typing import Protocol, Optional, runtime_checkable


@runtime_checkable
class CaptchaSolver(Protocol):
    """
    Protocol for captcha solver implementations.
    """

    async def solve(self, public_key: str, blob: Optional[str] = None) -> str:
        """
        Solve a challenge.

        Args:
            public_key: Arkose public key of the challenge site
            blob: Opaque data blob from the reputation endpoint

        Returns:
            Solved captcha token
        """
        ...
