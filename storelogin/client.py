"""
StoreClient - High-level async client for the storefront login.

Example:
    >>> async with StoreClient("my_account") as store:
    ...     await store.start("user@example.com", "password", totp_secret)
    ...     jar = store.cookie_jar
"""
from pathlib import Path
from typing import Optional, Union

import aiohttp

from .core.api import (
    APIConfig,
    AsyncHTTPClient,
    LoginSession,
    ProxyConfig,
    SSLConfig,
    TimeoutConfig,
)
from .core.captcha import CaptchaSolver
from .core.logging import get_logger
from .core.session import (
    SessionStorage,
    SessionData,
    SQLiteSession,
    MemorySession,
    export_cookies,
    import_cookies,
)


class StoreClient:
    """
    High-level async client with cookie session persistence.

    Supports two modes:

    1. Session mode (cookies saved to <name>.session):
        >>> client = StoreClient("my_account")
        >>> await client.start(email, password)

    2. Memory mode (nothing persisted):
        >>> async with StoreClient() as store:
        ...     await store.start(email, password)

    With custom configuration:
        >>> config = StoreClient.create_config(proxy="http://proxy:8080")
        >>> client = StoreClient("session", config=config)
    """

    def __init__(
        self,
        session: Optional[Union[str, SessionStorage]] = None,
        *,
        config: Optional[APIConfig] = None,
        base_path: Optional[Path] = None,
        captcha_solver: Optional[CaptchaSolver] = None
    ):
        """
        Initialize client.

        Args:
            session: Session name (creates .session file), custom storage,
                or None for a memory-only session
            config: Optional API configuration
            base_path: Base path for session files
            captcha_solver: Solver used when the portal demands a captcha
        """
        self._config = config or APIConfig.default()
        self._captcha_solver = captcha_solver
        self._logger = get_logger('client')

        if session is None:
            self._session: SessionStorage = MemorySession()
        elif isinstance(session, str):
            self._session = SQLiteSession(session, base_path)
        else:
            self._session = session

        self._http: Optional[AsyncHTTPClient] = None
        self._login: Optional[LoginSession] = None
        self._email: Optional[str] = None

    # =========================================================================
    # Configuration helpers
    # =========================================================================

    @staticmethod
    def create_config(
        proxy: Optional[str] = None,
        proxy_user: Optional[str] = None,
        proxy_pass: Optional[str] = None,
        timeout: float = 60,
        verify_ssl: bool = True,
        user_agent: Optional[str] = None
    ) -> APIConfig:
        """
        Create API configuration with common options.

        Args:
            proxy: Proxy URL (e.g., "http://proxy:8080")
            proxy_user: Proxy username
            proxy_pass: Proxy password
            timeout: Request timeout in seconds
            verify_ssl: Whether to verify SSL certificates
            user_agent: Custom user agent string

        Returns:
            APIConfig instance
        """
        proxy_config = None
        if proxy:
            proxy_config = ProxyConfig(
                url=proxy,
                username=proxy_user,
                password=proxy_pass
            )

        config = APIConfig(
            proxy=proxy_config,
            timeout=TimeoutConfig(total=timeout),
            ssl=SSLConfig(verify=verify_ssl),
        )
        if user_agent:
            config.user_agent = user_agent
        return config

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def cookie_jar(self) -> Optional[aiohttp.CookieJar]:
        """Cookie jar carrying the authenticated session."""
        return self._http.cookie_jar if self._http else None

    @property
    def http(self) -> Optional[AsyncHTTPClient]:
        return self._http

    @property
    def email(self) -> Optional[str]:
        return self._email

    def get_session(self) -> Optional[SessionData]:
        """Get saved session data."""
        return self._session.load()

    # =========================================================================
    # Login
    # =========================================================================

    async def connect(self) -> 'StoreClient':
        """Open the HTTP client."""
        if self._http is None:
            self._http = AsyncHTTPClient(self._config)
            await self._http.__aenter__()
        return self

    def _bind(self, email: str) -> LoginSession:
        if self._login is None or self._email != email:
            self._email = email
            self._login = LoginSession(
                self._http,
                email,
                config=self._config,
                captcha_solver=self._captcha_solver,
            )
        return self._login

    def _restore_cookies(self, email: str) -> None:
        if not self._session.exists():
            return
        session_data = self._session.load()
        if session_data is None or not session_data.is_valid():
            return
        if session_data.email != email:
            self._logger.info(
                "Saved session belongs to %s, not restoring it for %s",
                session_data.email, email
            )
            return
        count = import_cookies(self._http.cookie_jar, session_data.cookies)
        self._logger.debug("Restored %d cookies for %s", count, email)

    def _save_cookies(self, email: str) -> None:
        previous = self._session.load() if self._session.exists() else None
        session_data = SessionData(email=email, cookies=export_cookies(self._http.cookie_jar))
        if previous is not None and previous.email == email:
            session_data.created_at = previous.created_at
        self._session.save(session_data)

    async def start(
        self,
        email: str,
        password: str,
        totp_secret: Optional[str] = None
    ) -> 'StoreClient':
        """
        Log in, reusing the saved session when it is still valid.

        Args:
            email: Account email
            password: Account password
            totp_secret: TOTP seed for accounts with MFA enabled

        Returns:
            Self for chaining
        """
        await self.connect()
        self._restore_cookies(email)
        login = self._bind(email)
        await login.full_login(email, password, totp_secret)
        self._save_cookies(email)
        self._logger.info("Logged in as %s", email)
        return self

    async def is_logged_in(self, email: str) -> bool:
        """
        Check whether the saved session is still accepted by the portal.

        Refreshes the SID when it is.
        """
        await self.connect()
        self._restore_cookies(email)
        logged_in = await self._bind(email).refresh_and_sid(False)
        if logged_in:
            self._save_cookies(email)
        return logged_in

    async def send_email_verification(self, email: str, code: str) -> None:
        """Submit an email verification code for the account."""
        await self.connect()
        self._restore_cookies(email)
        await self._bind(email).send_verify(code)
        self._save_cookies(email)

    async def log_out(self) -> None:
        """Forget cookies and delete the saved session."""
        if self._http and self._http.cookie_jar is not None:
            self._http.cookie_jar.clear()
        self._session.delete()
        self._login = None
        self._email = None

    # =========================================================================
    # Context manager
    # =========================================================================

    async def __aenter__(self) -> 'StoreClient':
        return await self.connect()

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        """Close the client and release resources."""
        if self._http:
            await self._http.close()
            self._http = None
        self._login = None

        if hasattr(self._session, 'close'):
            self._session.close()
