"""
storelogin - Async login automation for the Epic Games Store account portal.

Usage:
    >>> from storelogin import StoreClient
    >>>
    >>> async with StoreClient("my_account") as store:
    ...     await store.start("user@example.com", "password", "TOTPSEED")
    ...     print(store.cookie_jar)
"""
import logging
from .client import StoreClient

# Configuration
from .core.api import (
    APIConfig,
    EndpointConfig,
    ProxyConfig,
    SSLConfig,
    TimeoutConfig,
    AsyncHTTPClient,
    LoginSession,
    StoreAPIError,
)

# Session management
from .core.session import (
    SessionStorage,
    SessionData,
    SQLiteSession,
    MemorySession
)

from .core.captcha import (
    ArkosePublicKey,
    CaptchaSolver,
    ConsoleCaptchaSolver,
    CallbackCaptchaSolver,
)
from .core.accounts import Account, load_accounts, account_from_env
from .core.exceptions import (
    StoreException,
    StoreAuthError,
    LoginAttemptsExceededError,
    MFASecretMissingError,
    MissingSidError,
    CsrfTokenMissingError,
    CaptchaSolverMissingError,
    CaptchaError,
    ConfigurationError,
)
from .core.logging import configure_logging, TRACE

__version__ = '1.0.0'


def setup_logging(level=logging.INFO):
    """
    Configure logging for storelogin modules.

    Args:
        level: Logging level (default: logging.INFO; TRACE dumps requests)
    """
    return configure_logging(level)


__all__ = [
    'StoreClient',
    'LoginSession',
    'AsyncHTTPClient',
    'APIConfig',
    'EndpointConfig',
    'ProxyConfig',
    'SSLConfig',
    'TimeoutConfig',
    'SessionStorage',
    'SessionData',
    'SQLiteSession',
    'MemorySession',
    'ArkosePublicKey',
    'CaptchaSolver',
    'ConsoleCaptchaSolver',
    'CallbackCaptchaSolver',
    'Account',
    'load_accounts',
    'account_from_env',
    'StoreException',
    'StoreAuthError',
    'StoreAPIError',
    'LoginAttemptsExceededError',
    'MFASecretMissingError',
    'MissingSidError',
    'CsrfTokenMissingError',
    'CaptchaSolverMissingError',
    'CaptchaError',
    'ConfigurationError',
    'TRACE',
    'setup_logging',
]
