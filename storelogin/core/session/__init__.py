"""
Session management module.

Persists the storefront cookie jar so later runs can reuse a login instead
of submitting credentials again.
"""
from .protocols import SessionStorage
from .models import SessionData
from .sqlite_session import SQLiteSession
from .memory_session import MemorySession
from .cookies import export_cookies, import_cookies

__all__ = [
    'SessionStorage',
    'SessionData',
    'SQLiteSession',
    'MemorySession',
    'export_cookies',
    'import_cookies',
]
