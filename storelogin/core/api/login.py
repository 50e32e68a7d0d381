"""
Storefront login flow.

LoginSession drives the account portal: CSRF negotiation, credential
submission, CAPTCHA and MFA challenges, and the SID exchange that leaves an
authenticated store session in the HTTP client's cookie jar.
"""
from typing import Callable, Optional

from .async_client import AsyncHTTPClient
from .config import APIConfig
from .errors import StoreAPIError, LoginAction, classify_login_error
from .models import LoginBody, MFABody, ReputationData, RedirectResponse
from ..captcha import ArkosePublicKey, CaptchaSolver
from ..exceptions import (
    CaptchaSolverMissingError,
    CsrfTokenMissingError,
    LoginAttemptsExceededError,
    MFASecretMissingError,
    MissingSidError,
)
from ..logging import get_user_logger
from ..mfa import generate_totp

CSRF_COOKIE = 'XSRF-TOKEN'
CSRF_HEADER = 'x-xsrf-token'


class LoginSession:
    """
    Login flow for one account.

    The HTTP client's cookie jar is the only state shared between calls, so
    every method must be awaited in sequence.

    Example:
        >>> async with AsyncHTTPClient(config) as http:
        ...     session = LoginSession(http, email, captcha_solver=solver)
        ...     await session.full_login(email, password, totp_secret)
    """

    def __init__(
        self,
        client: AsyncHTTPClient,
        email: str,
        *,
        config: Optional[APIConfig] = None,
        captcha_solver: Optional[CaptchaSolver] = None,
        totp_generator: Callable[[str], str] = generate_totp
    ):
        """
        Initialize login session.

        Args:
            client: HTTP client whose cookie jar receives the session
            email: Account the session is bound to (used to tag logs)
            config: API configuration (defaults to the client's)
            captcha_solver: Capability returning solved captcha tokens
            totp_generator: Function turning a TOTP seed into a code
        """
        self._client = client
        self._config = config or client.config
        self._captcha_solver = captcha_solver
        self._totp_generator = totp_generator
        self._endpoints = self._config.endpoints
        self._logger = get_user_logger('api.login', email)

    async def get_csrf(self) -> str:
        """
        Fetch a fresh CSRF token.

        Raises:
            CsrfTokenMissingError: If the XSRF-TOKEN cookie was not set
        """
        self._logger.debug('Refreshing CSRF')
        self._logger.trace('CSRF request: %s', self._endpoints.csrf)
        response = await self._client.get(self._endpoints.csrf)
        token = response.cookies.get(CSRF_COOKIE)
        if not token:
            raise CsrfTokenMissingError(CSRF_COOKIE)
        return token

    async def get_reputation(self) -> ReputationData:
        """Fetch anti-bot reputation data (carries the Arkose blob)."""
        self._logger.trace('Reputation request: %s', self._endpoints.reputation)
        response = await self._client.get(self._endpoints.reputation)
        return ReputationData.from_dict(response.body)

    async def login_mfa(self, totp_secret: Optional[str] = None) -> None:
        """
        Submit an authenticator code.

        Raises:
            MFASecretMissingError: If no TOTP secret is available
        """
        self._logger.debug('Logging in with MFA')
        if not totp_secret:
            raise MFASecretMissingError()
        csrf_token = await self.get_csrf()
        body = MFABody(code=self._totp_generator(totp_secret))
        self._logger.trace('MFA request: %s', self._endpoints.mfa)
        await self._client.post(
            self._endpoints.mfa,
            json_body=body.to_json(),
            headers={CSRF_HEADER: csrf_token}
        )

    async def send_verify(self, code: str) -> None:
        """Submit an email verification code."""
        csrf_token = await self.get_csrf()
        self._logger.trace('Verify email request: %s', self._endpoints.email_verify)
        await self._client.post(
            self._endpoints.email_verify,
            json_body={'verificationCode': code},
            headers={CSRF_HEADER: csrf_token}
        )

    async def login(
        self,
        email: str,
        password: str,
        captcha: str = '',
        totp: Optional[str] = None,
        blob: Optional[str] = None,
        attempt: int = 0
    ) -> None:
        """
        Submit credentials, recovering from the challenges the portal raises.

        Session invalidation retries with the same inputs, an invalid captcha
        is solved through the captcha solver and retried, and a two-factor
        demand is answered once with login_mfa(). Each retry fetches a new
        CSRF token and counts against max_login_attempts.

        Args:
            email: Account email
            password: Account password
            captcha: Solved captcha token, if one is already known
            totp: TOTP seed used if the portal demands MFA
            blob: Arkose blob from get_reputation()
            attempt: Attempts already made

        Raises:
            LoginAttemptsExceededError: If the retry bound is exceeded
            MFASecretMissingError: If MFA is demanded without a seed
            StoreAPIError: For any unrecoverable portal error
        """
        max_attempts = self._config.max_login_attempts

        while True:
            self._logger.debug('Attempting login (attempt %d, captcha=%s)', attempt, bool(captcha))
            if attempt > max_attempts:
                raise LoginAttemptsExceededError(attempt, max_attempts)
            csrf_token = await self.get_csrf()

            body = LoginBody(email=email, password=password, captcha=captcha)
            try:
                self._logger.trace('Login request: %s', self._endpoints.login)
                await self._client.post(
                    self._endpoints.login,
                    json_body=body.to_json(),
                    headers={CSRF_HEADER: csrf_token}
                )
            except Exception as e:
                action = classify_login_error(e)
                if action is LoginAction.FAIL:
                    if isinstance(e, StoreAPIError) and e.has_error_code:
                        self._logger.error('Login failed: %s', e.body)
                    else:
                        self._logger.error('Login failed: %r', e)
                    raise
            else:
                self._logger.debug('Logged in')
                return

            if action is LoginAction.RETRY:
                self._logger.debug('Session invalidated, retrying')
            elif action is LoginAction.CAPTCHA:
                self._logger.debug('Captcha required')
                captcha = await self._solve_captcha(blob)
            elif action is LoginAction.MFA:
                await self.login_mfa(totp)
                return
            attempt += 1

    async def _solve_captcha(self, blob: Optional[str]) -> str:
        if self._captcha_solver is None:
            raise CaptchaSolverMissingError()
        return await self._captcha_solver.solve(ArkosePublicKey.LOGIN.value, blob)

    async def get_store_token(self) -> None:
        """
        Load the store homepage so it sets the 'store-token' cookie, which
        authenticates requests to the GraphQL proxy endpoint.
        """
        self._logger.trace('Request store homepage: %s', self._endpoints.store_homepage)
        response = await self._client.get(self._endpoints.store_homepage, text=True)
        self._logger.trace('Store homepage response headers: %s', dict(response.headers))

    async def refresh_and_sid(self, fail_on_missing: bool) -> bool:
        """
        Exchange the current portal session for a store SID.

        Args:
            fail_on_missing: Raise instead of returning False when the
                portal has no session (used right after a fresh login)

        Returns:
            True if the SID and store token were set, False if not logged in

        Raises:
            MissingSidError: If fail_on_missing and no SID was issued
        """
        self._logger.debug('Setting SID')
        csrf_token = await self.get_csrf()
        params = {
            'clientId': self._config.client_id,
            'redirectUrl': self._endpoints.store_homepage,
        }
        self._logger.trace('Redirect request: %s %s', self._endpoints.redirect, params)
        response = await self._client.get(
            self._endpoints.redirect,
            params=params,
            headers={CSRF_HEADER: csrf_token}
        )
        redirect = RedirectResponse.from_dict(response.body)
        if not redirect.sid:
            if fail_on_missing:
                raise MissingSidError()
            return False

        self._logger.trace('Set SID request: %s', self._endpoints.set_sid)
        sid_response = await self._client.get(
            self._endpoints.set_sid,
            params={'sid': redirect.sid}
        )
        self._logger.trace('Set SID response headers: %s', dict(sid_response.headers))
        await self.get_store_token()
        return True

    async def full_login(
        self,
        email: str,
        password: str,
        totp: Optional[str] = None
    ) -> None:
        """
        Reuse the session in the cookie jar if it is still valid, otherwise
        run the complete credential login.
        """
        if await self.refresh_and_sid(False):
            self._logger.info('Successfully refreshed login')
            return

        self._logger.debug('Could not refresh credentials. Logging in fresh.')
        reputation = await self.get_reputation()
        await self.login(email, password, '', totp, reputation.blob)
        await self.refresh_and_sid(True)
        self._logger.info('Successfully logged in fresh')
