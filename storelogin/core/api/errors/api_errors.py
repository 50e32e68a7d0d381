"""Storefront API error codes and exceptions."""
from enum import Enum
from typing import Any, Optional

from ...exceptions import StoreException


class APIErrorCodes:
    """Error codes returned in the storefront's JSON error bodies."""

    SESSION_INVALIDATED = 'session_invalidated'
    CAPTCHA_INVALID = 'errors.com.epicgames.accountportal.captcha_invalid'
    MFA_REQUIRED = 'errors.com.epicgames.common.two_factor_authentication.required'

    DESCRIPTIONS = {
        CAPTCHA_INVALID: 'A CAPTCHA challenge must be solved before logging in',
        MFA_REQUIRED: 'Multi-factor authentication is required',
        'errors.com.epicgames.accountportal.invalid_account_credentials':
            'Sorry the credentials you are using are invalid',
        'errors.com.epicgames.accountportal.session_invalidated':
            'The login session was invalidated, a new CSRF token is needed',
        'errors.com.epicgames.common.two_factor_authentication.code_invalid':
            'The two-factor authentication code is invalid',
    }

    @classmethod
    def get_message(cls, code: Optional[str]) -> str:
        """Gets a readable message for an error code."""
        if not code:
            return 'Unknown error'
        return cls.DESCRIPTIONS.get(code, code)


class StoreAPIError(StoreException):
    """
    Exception raised when the storefront answers with an error status.

    Attributes:
        status: HTTP status code
        body: Parsed JSON body (dict) or raw text
        url: Requested URL
    """

    def __init__(self, status: int, body: Any = None, url: str = '') -> None:
        self.status = status
        self.body = body
        self.url = url
        error_code = None
        if isinstance(body, dict) and isinstance(body.get('errorCode'), str):
            error_code = body['errorCode']
        message = f"HTTP {status} from {url}"
        if error_code:
            message += f": {APIErrorCodes.get_message(error_code)} ({error_code})"
        super().__init__(message, error_code)

    @property
    def has_error_code(self) -> bool:
        """Whether the body carried a machine-readable errorCode."""
        return bool(self.error_code)


class LoginAction(Enum):
    """Next step of the login loop after a failed credential POST."""
    RETRY = 'retry'
    CAPTCHA = 'captcha'
    MFA = 'mfa'
    FAIL = 'fail'


def classify_login_error(error: BaseException) -> LoginAction:
    """
    Map a failed login request to the next action.

    Only StoreAPIError with an errorCode can be recovered from; anything
    else (network errors, unexpected bodies, unknown codes) is FAIL.
    """
    if not isinstance(error, StoreAPIError) or not error.has_error_code:
        return LoginAction.FAIL

    code = error.error_code
    if APIErrorCodes.SESSION_INVALIDATED in code:
        return LoginAction.RETRY
    if code == APIErrorCodes.CAPTCHA_INVALID:
        return LoginAction.CAPTCHA
    if code == APIErrorCodes.MFA_REQUIRED:
        return LoginAction.MFA
    return LoginAction.FAIL
