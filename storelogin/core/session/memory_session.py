"""
In-memory session storage implementation.

Provides non-persistent cookie storage for testing and one-off logins.
"""
from typing import Optional

from .protocols import SessionStorage
from .models import SessionData


class MemorySession(SessionStorage):
    """
    In-memory session storage.

    Keeps the account's cookie snapshot in memory only.
    Data is lost when the object is destroyed.

    Useful for:
    - Unit testing
    - One-off logins where the cookie jar is used right away
    - Sharing a session between StoreClient instances in one process

    Example:
        >>> storage = MemorySession()
        >>> async with StoreClient(storage) as store:
        ...     await store.start(email, password)
        >>> storage.load().cookies
    """

    def __init__(self):
        """Initialize memory session storage."""
        self._data: Optional[SessionData] = None

    def load(self) -> Optional[SessionData]:
        """
        Load the saved cookie snapshot.

        Returns:
            SessionData if one was saved, None otherwise
        """
        return self._data

    def save(self, data: SessionData) -> None:
        """
        Replace the saved snapshot, refreshing its updated_at timestamp.

        Args:
            data: Session data to keep
        """
        data.update_timestamp()
        self._data = data

    def delete(self) -> None:
        """Forget the saved snapshot."""
        self._data = None

    def exists(self) -> bool:
        """
        Check if a snapshot was saved.

        Returns:
            True if session data exists
        """
        return self._data is not None

    def close(self) -> None:
        """Close storage (no-op for memory storage)."""
        pass

    def __enter__(self) -> 'MemorySession':
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
