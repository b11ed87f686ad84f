"""Authentication models (principals, refresh token records, token claims)."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Principal:
    """A known login identity.

    Passwords are compared in plaintext; principals come from configuration
    and are never created or changed at runtime.
    """

    username: str
    password: str
    role: str


@dataclass(frozen=True)
class RefreshTokenRecord:
    """Server-side association for an opaque refresh token value."""

    username: str
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now


@dataclass(frozen=True)
class TokenClaims:
    """Validated claim set of an access token."""

    subject: str
    role: str
    token_id: str
    issuer: str
    audience: str
    issued_at: datetime
    expires_at: datetime


@dataclass(frozen=True)
class TokenPair:
    """Access + refresh token pair handed to a client."""

    access_token: str
    refresh_token: str
    expires_in: int  # seconds
    token_type: str = "Bearer"


@dataclass(frozen=True)
class CurrentUser:
    username: str
    role: str
