"""Authentication router (JWT token management endpoints)."""

import logging

from fastapi import APIRouter, Depends, Request, Response, status

from src.config.settings import settings
from src.shared.rate_limit import limiter

from .dependencies import get_current_claims
from .models import TokenClaims
from .schemas import CurrentUserResponse, LoginRequest, LogoutRequest, RefreshTokenRequest, TokenResponse
from .service import AuthService, get_auth_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/login", response_model=TokenResponse)
@limiter.limit(settings.login_rate_limit)
async def login(request: Request, data: LoginRequest, auth_service: AuthService = Depends(get_auth_service)):
    """Login and get JWT tokens.

    - **username**: Username (case-insensitive)
    - **password**: Password

    Returns accessToken and refreshToken.
    """
    tokens = auth_service.login(data.username, data.password)
    return TokenResponse.from_pair(tokens)


@router.post("/refresh", response_model=TokenResponse)
async def refresh_token(data: RefreshTokenRequest, auth_service: AuthService = Depends(get_auth_service)):
    """Refresh access token using refresh token.

    - **refreshToken**: Valid refresh token (single use)

    Returns new accessToken and refreshToken.
    """
    tokens = auth_service.refresh(data.refresh_token)
    return TokenResponse.from_pair(tokens)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    data: LogoutRequest | None = None,
    claims: TokenClaims = Depends(get_current_claims),
    auth_service: AuthService = Depends(get_auth_service),
):
    """Logout and revoke a refresh token.

    - **refreshToken**: Refresh token to revoke (optional)

    The access token stays valid until it expires.
    """
    auth_service.logout(data.refresh_token if data else None, username=claims.subject)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/logout-all", status_code=status.HTTP_204_NO_CONTENT)
async def logout_all(
    claims: TokenClaims = Depends(get_current_claims),
    auth_service: AuthService = Depends(get_auth_service),
):
    """Revoke every refresh token of the current user."""
    auth_service.logout_all(claims.subject)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/me", response_model=CurrentUserResponse)
async def me(
    claims: TokenClaims = Depends(get_current_claims),
    auth_service: AuthService = Depends(get_auth_service),
):
    """Get information about the authenticated user."""
    return CurrentUserResponse.from_user(auth_service.current_user(claims))
