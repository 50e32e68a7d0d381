"""
Account configuration.

Accounts are read from a JSON file shaped like::

    {"accounts": [{"email": "...", "password": "...", "totp": "..."}]}

or from environment variables for a single account.
"""
import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Mapping, Optional, Union

from .exceptions import ConfigurationError


@dataclass(frozen=True)
class Account:
    """Credentials for one storefront account."""
    email: str
    password: str
    totp: Optional[str] = None

    def __repr__(self) -> str:
        return f"Account(email={self.email!r}, totp={'set' if self.totp else 'unset'})"

    @classmethod
    def from_dict(cls, data: Mapping) -> 'Account':
        if not isinstance(data, Mapping):
            raise ConfigurationError(f"Account entry must be an object, got {type(data).__name__}")
        email = data.get('email')
        password = data.get('password')
        if not email or not password:
            raise ConfigurationError('Account entry needs both email and password')
        return cls(email=email, password=password, totp=data.get('totp') or None)


def load_accounts(path: Union[str, Path]) -> List[Account]:
    """
    Load accounts from a JSON file.

    Raises:
        ConfigurationError: If the file is missing, malformed or empty
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding='utf-8'))
    except FileNotFoundError:
        raise ConfigurationError(f"Accounts file not found: {path}")
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Accounts file {path} is not valid JSON: {e}")

    entries = data.get('accounts') if isinstance(data, dict) else data
    if not isinstance(entries, list) or not entries:
        raise ConfigurationError(f"No accounts defined in {path}")

    return [Account.from_dict(entry) for entry in entries]


def account_from_env(
    prefix: str = 'STORELOGIN_',
    environ: Optional[Mapping[str, str]] = None
) -> Optional[Account]:
    """
    Build an account from <prefix>EMAIL, <prefix>PASSWORD and <prefix>TOTP.

    Returns:
        Account, or None when email or password is not set
    """
    env = os.environ if environ is None else environ
    email = env.get(f"{prefix}EMAIL")
    password = env.get(f"{prefix}PASSWORD")
    if not email or not password:
        return None
    return Account(email=email, password=password, totp=env.get(f"{prefix}TOTP") or None)
