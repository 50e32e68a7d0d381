"""
Session data models.

Contains data classes for session information.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List
import json


@dataclass
class SessionData:
    """
    Saved storefront session for one account.

    Contains the cookies needed to resume the session without going through
    the credential login again.

    Attributes:
        email: Account email address
        cookies: Cookie jar snapshot (see session.cookies.export_cookies)
        created_at: Session creation timestamp
        updated_at: Last update timestamp
    """
    email: str
    cookies: List[Dict[str, Any]] = field(default_factory=list)
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict:
        """
        Convert to dictionary for serialization.

        Returns:
            Dictionary representation
        """
        return {
            'email': self.email,
            'cookies': self.cookies,
            'created_at': self.created_at.isoformat(),
            'updated_at': self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'SessionData':
        """
        Create from dictionary.

        Args:
            data: Dictionary with session data

        Returns:
            SessionData instance
        """
        return cls(
            email=data['email'],
            cookies=list(data.get('cookies') or []),
            created_at=datetime.fromisoformat(data['created_at']) if data.get('created_at') else datetime.now(),
            updated_at=datetime.fromisoformat(data['updated_at']) if data.get('updated_at') else datetime.now(),
        )

    def to_json(self) -> str:
        """
        Serialize to JSON string.

        Returns:
            JSON string
        """
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, json_str: str) -> 'SessionData':
        """
        Create from JSON string.

        Args:
            json_str: JSON string

        Returns:
            SessionData instance
        """
        return cls.from_dict(json.loads(json_str))

    def is_valid(self) -> bool:
        """
        Check if session data is usable.

        Returns:
            True if there is an email and at least one named cookie
        """
        return bool(
            self.email and
            self.cookies and
            all(cookie.get('name') for cookie in self.cookies)
        )

    def update_timestamp(self) -> None:
        """Update the updated_at timestamp to now."""
        self.updated_at = datetime.now()
