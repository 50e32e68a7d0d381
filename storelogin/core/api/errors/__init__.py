"""Storefront API errors and exceptions."""
from .api_errors import StoreAPIError, APIErrorCodes, LoginAction, classify_login_error

__all__ = [
    'StoreAPIError',
    'APIErrorCodes',
    'LoginAction',
    'classify_login_error',
]
