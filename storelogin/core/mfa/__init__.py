"""Multi-factor authentication helpers."""
from .totp import generate_totp, normalize_secret

__all__ = [
    'generate_totp',
    'normalize_secret',
]
