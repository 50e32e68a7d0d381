"""
Custom exceptions for storefront authentication.

This module defines exception classes for failures that are detected locally
(missing preconditions, exhausted retries, bad configuration). Errors reported
by the storefront itself are raised as StoreAPIError from core.api.errors.
"""
from typing import Optional


class StoreException(Exception):
    """Base exception for all storelogin errors."""

    def __init__(self, message: str, error_code: Optional[str] = None) -> None:
        """
        Initialize the exception.

        Args:
            message: Error message
            error_code: Storefront error code (if available)
        """
        self.message = message
        self.error_code = error_code
        super().__init__(message)


class StoreAuthError(StoreException):
    """Exception raised when the login flow cannot continue."""
    pass


class LoginAttemptsExceededError(StoreAuthError):
    """Raised when the login retry bound is exceeded."""

    def __init__(self, attempt: int, max_attempts: int) -> None:
        self.attempt = attempt
        self.max_attempts = max_attempts
        super().__init__(
            f"Too many login attempts ({attempt} > {max_attempts})"
        )


class MFASecretMissingError(StoreAuthError):
    """Raised when the account requires MFA but no TOTP secret was given."""

    def __init__(self) -> None:
        super().__init__('TOTP required for MFA login')


class MissingSidError(StoreAuthError):
    """Raised when a fresh login did not produce a session identifier."""

    def __init__(self) -> None:
        super().__init__('Sid returned null')


class CsrfTokenMissingError(StoreAuthError):
    """Raised when the CSRF endpoint did not set the XSRF-TOKEN cookie."""

    def __init__(self, cookie_name: str) -> None:
        self.cookie_name = cookie_name
        super().__init__(f"CSRF response did not set the {cookie_name} cookie")


class CaptchaSolverMissingError(StoreAuthError):
    """Raised when a CAPTCHA is demanded and no solver is configured."""

    def __init__(self) -> None:
        super().__init__('Captcha required but no captcha solver is configured')


class CaptchaError(StoreException):
    """Raised when a CAPTCHA could not be solved."""
    pass


class ConfigurationError(StoreException):
    """Raised for invalid account or client configuration."""
    pass
