"""Authentication schemas (DTOs).

JSON bodies use camelCase field names; snake_case is accepted on input too.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from .models import CurrentUser, TokenPair


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Request schemas
class LoginRequest(CamelModel):
    """Login request. No length or charset rules are applied."""

    username: str
    password: str


class RefreshTokenRequest(CamelModel):
    """Refresh token request."""

    refresh_token: str


class LogoutRequest(CamelModel):
    """Logout request; the refresh token is optional."""

    refresh_token: str | None = None


# Response schemas
class TokenResponse(CamelModel):
    """JWT token response."""

    access_token: str
    refresh_token: str
    expires_in: int  # seconds
    token_type: str = "Bearer"

    @classmethod
    def from_pair(cls, pair: TokenPair) -> "TokenResponse":
        return cls(
            access_token=pair.access_token,
            refresh_token=pair.refresh_token,
            expires_in=pair.expires_in,
            token_type=pair.token_type,
        )


class CurrentUserResponse(CamelModel):
    username: str
    role: str

    @classmethod
    def from_user(cls, user: CurrentUser) -> "CurrentUserResponse":
        return cls(username=user.username, role=user.role)
