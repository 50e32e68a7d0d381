"""Request and response payloads of the storefront login API."""
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, Optional


@dataclass
class LoginBody:
    """Credential submission."""
    email: str
    password: str
    captcha: str = ''
    rememberMe: bool = True

    def to_json(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class MFABody:
    """Second factor submission."""
    code: str
    method: str = 'authenticator'
    rememberDevice: bool = True

    def to_json(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ReputationData:
    """
    Anti-bot reputation returned before login.

    Attributes:
        verdict: Server verdict (e.g. 'allow' or 'challenge')
        blob: Arkose data blob, handed untouched to the captcha solver
        raw: Complete response body
    """
    verdict: Optional[str] = None
    blob: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> 'ReputationData':
        if not isinstance(data, dict):
            return cls(raw={})
        arkose = data.get('arkose_data') or {}
        return cls(
            verdict=data.get('verdict'),
            blob=arkose.get('blob') if isinstance(arkose, dict) else None,
            raw=data,
        )


@dataclass
class RedirectResponse:
    """Response of the redirect endpoint; sid is null when not logged in."""
    redirect_url: Optional[str] = None
    sid: Optional[str] = None
    authorization_code: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> 'RedirectResponse':
        if not isinstance(data, dict):
            return cls()
        return cls(
            redirect_url=data.get('redirectUrl'),
            sid=data.get('sid'),
            authorization_code=data.get('authorizationCode'),
        )
