"""Authentication dependencies for FastAPI."""

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .exceptions import InvalidTokenException
from .models import TokenClaims
from .service import AuthService, get_auth_service

security = HTTPBearer(auto_error=False)


async def get_current_claims(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    auth_service: AuthService = Depends(get_auth_service),
) -> TokenClaims:
    """Validate the bearer access token on the request.

    Args:
        credentials: HTTP authorization credentials with bearer token
        auth_service: Token session manager

    Returns:
        Validated token claims

    Raises:
        InvalidTokenException: If the token is missing or invalid

    """
    if credentials is None:
        raise InvalidTokenException()

    return auth_service.validate_access_token(credentials.credentials)
