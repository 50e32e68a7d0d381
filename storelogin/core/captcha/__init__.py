"""Captcha handling: site keys and solver implementations."""
from .keys import ArkosePublicKey
from .protocols import CaptchaSolver
from .solvers import ConsoleCaptchaSolver, CallbackCaptchaSolver

__all__ = [
    'ArkosePublicKey',
    'CaptchaSolver',
    'ConsoleCaptchaSolver',
    'CallbackCaptchaSolver',
]
