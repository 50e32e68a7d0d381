"""TOTP code generation for authenticator-app second factors."""
from datetime import datetime
from typing import Optional, Union

import pyotp


def normalize_secret(secret: str) -> str:
    """
    Clean up a base32 seed pasted from an authenticator export.

    Spaces and dashes are dropped and letters upper-cased.
    """
    return secret.replace(' ', '').replace('-', '').upper()


def generate_totp(secret: str, for_time: Optional[Union[int, datetime]] = None) -> str:
    """
    Generate the current 6-digit code for a TOTP seed.

    Args:
        secret: Base32 shared secret
        for_time: Timestamp to generate the code for (defaults to now)

    Returns:
        Zero-padded numeric code
    """
    totp = pyotp.TOTP(normalize_secret(secret))
    if for_time is None:
        return totp.now()
    return totp.at(for_time)
