"""
Async storefront HTTP client.

Thin wrapper around aiohttp that keeps one cookie jar for the whole login
flow and turns HTTP error statuses into StoreAPIError.
"""
import json
from dataclasses import dataclass, field
from typing import Dict, Optional, Any, Mapping
import aiohttp

from .config import APIConfig
from .errors import StoreAPIError
from ..logging import get_logger, logging_configured, TRACE

REDACTED_FIELDS = ('password', 'code', 'verificationCode')


@dataclass
class HTTPResponse:
    """
    Buffered HTTP response.

    Attributes:
        status: HTTP status code
        url: Final URL after redirects
        headers: Response headers
        cookies: Cookies set by this response (name -> value)
        body: Parsed JSON if the payload is JSON, raw text otherwise
    """
    status: int
    url: str
    headers: Mapping[str, str] = field(default_factory=dict)
    cookies: Dict[str, str] = field(default_factory=dict)
    body: Any = None

    @property
    def ok(self) -> bool:
        return self.status < 400


def _redact(payload: Any) -> Any:
    if isinstance(payload, Mapping):
        return {
            key: '***' if key in REDACTED_FIELDS and value else value
            for key, value in payload.items()
        }
    return payload


class AsyncHTTPClient:
    """
    Asynchronous HTTP client for the storefront.

    Features:
    - Full async/await support
    - Configurable proxy, SSL, timeouts
    - Cookie jar shared by every request (and kept across reconnects)
    - Structured errors for non-2xx answers

    Example:
        >>> config = APIConfig.default()
        >>> async with AsyncHTTPClient(config) as client:
        ...     response = await client.get(config.endpoints.csrf)
    """

    def __init__(
        self,
        config: Optional[APIConfig] = None,
        cookie_jar: Optional[aiohttp.CookieJar] = None
    ):
        """
        Initialize async HTTP client.

        Args:
            config: API configuration (uses defaults if not provided)
            cookie_jar: Existing jar to reuse (created on first use otherwise)
        """
        self._config = config or APIConfig.default()
        self._session: Optional[aiohttp.ClientSession] = None
        self._connector: Optional[aiohttp.TCPConnector] = None
        self._cookie_jar = cookie_jar
        self._closed = False

        self._logger = get_logger('api.http')
        # Only set level if no handler is configured (basicConfig or
        # configure_logging not called); otherwise inherit
        if not logging_configured():
            self._logger.setLevel(self._config.log_level)

    @property
    def config(self) -> APIConfig:
        """Get current configuration."""
        return self._config

    @property
    def cookie_jar(self) -> Optional[aiohttp.CookieJar]:
        """Cookie jar holding the authenticated session."""
        return self._cookie_jar

    @property
    def closed(self) -> bool:
        return self._closed

    async def __aenter__(self) -> 'AsyncHTTPClient':
        """Async context manager entry."""
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure session is created and open."""
        if self._session is None or self._session.closed:
            if self._cookie_jar is None:
                self._cookie_jar = aiohttp.CookieJar(
                    unsafe=self._config.unsafe_cookies
                )
            self._connector = aiohttp.TCPConnector(
                **self._config.get_connector_kwargs()
            )
            self._session = aiohttp.ClientSession(
                connector=self._connector,
                cookie_jar=self._cookie_jar,
                **self._config.get_session_kwargs()
            )
            self._closed = False
        return self._session

    async def close(self):
        """Close client and release resources. The cookie jar is kept."""
        self._closed = True

        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None
        self._connector = None

    async def get(
        self,
        url: str,
        *,
        params: Optional[Dict[str, str]] = None,
        headers: Optional[Dict[str, str]] = None,
        text: bool = False
    ) -> HTTPResponse:
        """
        Send a GET request.

        Args:
            url: Absolute URL
            params: Query string parameters
            headers: Extra request headers
            text: Keep the body as text instead of decoding JSON

        Returns:
            Buffered response

        Raises:
            StoreAPIError: If the server answers with status >= 400
        """
        return await self.request('GET', url, params=params, headers=headers, text=text)

    async def post(
        self,
        url: str,
        *,
        json_body: Any = None,
        headers: Optional[Dict[str, str]] = None
    ) -> HTTPResponse:
        """
        Send a POST request with a JSON body.

        Raises:
            StoreAPIError: If the server answers with status >= 400
        """
        return await self.request('POST', url, json_body=json_body, headers=headers)

    async def request(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Dict[str, str]] = None,
        json_body: Any = None,
        headers: Optional[Dict[str, str]] = None,
        text: bool = False
    ) -> HTTPResponse:
        """Send a request and buffer the response."""
        session = await self._ensure_session()

        self._logger.log(
            TRACE, "%s %s params=%s body=%s",
            method, url, params, _redact(json_body)
        )

        async with session.request(
            method,
            url,
            params=params,
            json=json_body,
            headers=headers,
            proxy=self._config.proxy.to_aiohttp_proxy() if self._config.proxy else None
        ) as response:
            response_text = await response.text()
            result = HTTPResponse(
                status=response.status,
                url=str(response.url),
                headers=response.headers.copy(),
                cookies={name: morsel.value for name, morsel in response.cookies.items()},
                body=response_text if text else self._parse_body(response_text),
            )

        self._logger.log(
            TRACE, "%s %s -> %s %s",
            method, url, result.status,
            response_text[:1000] if len(response_text) > 1000 else response_text
        )

        if not result.ok:
            raise StoreAPIError(
                result.status,
                self._parse_body(response_text),
                url
            )

        return result

    def _parse_body(self, response_text: str) -> Any:
        """Parse JSON when possible, otherwise keep the raw text."""
        if not response_text:
            return None
        try:
            return json.loads(response_text)
        except json.JSONDecodeError:
            return response_text
