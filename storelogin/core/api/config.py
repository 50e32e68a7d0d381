"""
API configuration module.

Provides configuration for the storefront HTTP client and the login flow.
Every endpoint is overridable so the client can be pointed at a mirror or a
local test server.
"""
from dataclasses import dataclass, field, fields, replace
from typing import Optional, Dict, Any
from urllib.parse import urlsplit
import ssl


EPIC_CLIENT_ID = '875a3b57d3a640a6b7f9b4e883463ab4'
MAX_LOGIN_ATTEMPTS = 5


@dataclass(frozen=True)
class EndpointConfig:
    """
    Storefront endpoints used by the login flow.
    """
    csrf: str = 'https://www.epicgames.com/id/api/csrf'
    login: str = 'https://www.epicgames.com/id/api/login'
    reputation: str = 'https://www.epicgames.com/id/api/reputation'
    mfa: str = 'https://www.epicgames.com/id/api/login/mfa'
    email_verify: str = 'https://www.epicgames.com/id/api/email/verify'
    redirect: str = 'https://www.epicgames.com/id/api/redirect'
    set_sid: str = 'https://www.unrealengine.com/id/api/set-sid'
    store_homepage: str = 'https://www.epicgames.com/store/en-US/'

    @classmethod
    def for_host(cls, base_url: str) -> 'EndpointConfig':
        """
        Rebase every endpoint on a single origin, keeping the paths.

        Args:
            base_url: Origin such as 'http://127.0.0.1:8080'
        """
        base = base_url.rstrip('/')
        defaults = cls()
        rebased = {}
        for f in fields(cls):
            parts = urlsplit(getattr(defaults, f.name))
            rebased[f.name] = f"{base}{parts.path}"
        return cls(**rebased)


@dataclass
class ProxyConfig:
    """
    Proxy configuration.

    Supports HTTP and HTTPS proxies.
    """
    url: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None

    def to_aiohttp_proxy(self) -> Optional[str]:
        """Convert to aiohttp proxy format."""
        if not self.url:
            return None

        if self.username and self.password:
            # Insert credentials into URL
            if '://' in self.url:
                protocol, rest = self.url.split('://', 1)
                return f"{protocol}://{self.username}:{self.password}@{rest}"

        return self.url


@dataclass
class SSLConfig:
    """
    SSL/TLS configuration.
    """
    verify: bool = True
    ca_file: Optional[str] = None
    check_hostname: bool = True

    def create_ssl_context(self):
        """Create SSL context from configuration (False disables verification)."""
        if not self.verify:
            return False

        context = ssl.create_default_context()

        if self.ca_file:
            context.load_verify_locations(self.ca_file)

        context.check_hostname = self.check_hostname

        return context


@dataclass
class TimeoutConfig:
    """
    Timeout configuration.

    Granular control over different timeout types.
    """
    total: float = 60.0  # Total request timeout
    connect: float = 15.0  # Connection timeout
    sock_read: float = 30.0  # Socket read timeout

    def to_aiohttp_timeout(self):
        """Convert to aiohttp ClientTimeout."""
        import aiohttp
        return aiohttp.ClientTimeout(
            total=self.total,
            connect=self.connect,
            sock_read=self.sock_read,
        )


@dataclass
class APIConfig:
    """
    Complete API configuration.

    Centralizes all configuration options for the storefront client.
    Credentials are never part of it; they are passed to the login calls.
    """
    endpoints: EndpointConfig = field(default_factory=EndpointConfig)

    # OAuth client the redirect endpoint issues SIDs for
    client_id: str = EPIC_CLIENT_ID

    # Attempts allowed after the first one before login gives up
    max_login_attempts: int = MAX_LOGIN_ATTEMPTS

    user_agent: str = (
        'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 '
        '(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36'
    )

    # Sub-configurations
    proxy: Optional[ProxyConfig] = None
    ssl: SSLConfig = field(default_factory=SSLConfig)
    timeout: TimeoutConfig = field(default_factory=TimeoutConfig)

    # Additional headers
    extra_headers: Dict[str, str] = field(default_factory=dict)

    # Accept cookies from IP-address hosts (local test servers)
    unsafe_cookies: bool = False

    # Logging
    log_level: int = 20  # logging.INFO

    @classmethod
    def default(cls) -> 'APIConfig':
        """Create default configuration."""
        return cls()

    @classmethod
    def with_proxy(cls, proxy_url: str, **kwargs) -> 'APIConfig':
        """Create configuration with proxy."""
        return cls(
            proxy=ProxyConfig(url=proxy_url),
            **kwargs
        )

    @classmethod
    def insecure(cls, **kwargs) -> 'APIConfig':
        """Create configuration with SSL verification disabled."""
        return cls(
            ssl=SSLConfig(verify=False, check_hostname=False),
            **kwargs
        )

    @classmethod
    def for_host(cls, base_url: str, **kwargs) -> 'APIConfig':
        """Create configuration with every endpoint served from base_url."""
        kwargs.setdefault('unsafe_cookies', True)
        return cls(endpoints=EndpointConfig.for_host(base_url), **kwargs)

    def with_endpoints(self, **overrides: str) -> 'APIConfig':
        """Return a copy with some endpoints replaced."""
        return replace(self, endpoints=replace(self.endpoints, **overrides))

    def get_connector_kwargs(self) -> Dict[str, Any]:
        """Get kwargs for aiohttp TCPConnector."""
        return {
            'ssl': self.ssl.create_ssl_context(),
        }

    def get_session_kwargs(self) -> Dict[str, Any]:
        """Get kwargs for aiohttp ClientSession."""
        headers = {
            'User-Agent': self.user_agent,
            **self.extra_headers
        }

        return {
            'headers': headers,
            'timeout': self.timeout.to_aiohttp_timeout(),
        }
