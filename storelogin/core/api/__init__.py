"""Storefront API module."""
from .errors import StoreAPIError, APIErrorCodes, LoginAction, classify_login_error
from .config import (
    APIConfig,
    EndpointConfig,
    ProxyConfig,
    SSLConfig,
    TimeoutConfig,
    EPIC_CLIENT_ID,
    MAX_LOGIN_ATTEMPTS,
)
from .async_client import AsyncHTTPClient, HTTPResponse
from .models import LoginBody, MFABody, ReputationData, RedirectResponse
from .login import LoginSession

__all__ = [
    # Client
    'AsyncHTTPClient',
    'HTTPResponse',

    # Login flow
    'LoginSession',
    'LoginBody',
    'MFABody',
    'ReputationData',
    'RedirectResponse',

    # Configuration
    'APIConfig',
    'EndpointConfig',
    'ProxyConfig',
    'SSLConfig',
    'TimeoutConfig',
    'EPIC_CLIENT_ID',
    'MAX_LOGIN_ATTEMPTS',

    # Errors
    'StoreAPIError',
    'APIErrorCodes',
    'LoginAction',
    'classify_login_error',
]
