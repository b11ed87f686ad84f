"""JWT utilities for authentication."""

import secrets
import uuid
from datetime import UTC, datetime, timedelta

import jwt

from src.config.settings import MIN_JWT_SECRET_LENGTH, settings

from .exceptions import SigningKeyError
from .models import Principal, TokenClaims

REFRESH_TOKEN_BYTES = 64

REQUIRED_CLAIMS = ["sub", "role", "jti", "iss", "aud", "iat", "exp"]


def validate_signing_secret(secret: str | None) -> str:
    """Ensure the signing secret is usable.

    Raises:
        SigningKeyError: If the secret is missing or shorter than 32 characters

    """
    if not secret:
        raise SigningKeyError("JWT secret not configured")
    if len(secret) < MIN_JWT_SECRET_LENGTH:
        raise SigningKeyError(
            f"JWT secret is too short ({len(secret)} chars). Minimum {MIN_JWT_SECRET_LENGTH} characters required."
        )
    return secret


def create_access_token(
    principal: Principal,
    now: datetime | None = None,
    expires_delta: timedelta | None = None,
) -> tuple[str, TokenClaims]:
    """Create a signed JWT access token for a principal.

    Args:
        principal: Identity the token is issued for
        now: Issue time (defaults to the current UTC time)
        expires_delta: Optional lifetime override

    Returns:
        Encoded token string and the claims it carries

    """
    secret = validate_signing_secret(settings.jwt_secret)

    issued_at = (now or datetime.now(UTC)).replace(microsecond=0)
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)

    claims = TokenClaims(
        subject=principal.username,
        role=principal.role,
        token_id=uuid.uuid4().hex,
        issuer=settings.jwt_issuer,
        audience=settings.jwt_audience,
        issued_at=issued_at,
        expires_at=issued_at + expires_delta,
    )

    to_encode = {
        "sub": claims.subject,
        "role": claims.role,
        "jti": claims.token_id,
        "iss": claims.issuer,
        "aud": claims.audience,
        "iat": claims.issued_at,
        "exp": claims.expires_at,
    }

    encoded_jwt = jwt.encode(to_encode, secret, algorithm=settings.jwt_algorithm)
    return encoded_jwt, claims


def generate_refresh_token() -> str:
    """Generate an opaque refresh token from 64 cryptographically random bytes."""
    return secrets.token_urlsafe(REFRESH_TOKEN_BYTES)


def decode_access_token(token: str, now: datetime | None = None) -> TokenClaims:
    """Decode and verify a JWT access token.

    Signature, issuer, audience and expiry are all checked, with no leeway.

    Args:
        token: JWT token string
        now: Reference time for the expiry check (defaults to the current UTC time)

    Returns:
        Validated claims

    Raises:
        InvalidTokenError: If any check fails

    """
    secret = validate_signing_secret(settings.jwt_secret)

    payload = jwt.decode(
        token,
        secret,
        algorithms=[settings.jwt_algorithm],
        audience=settings.jwt_audience,
        issuer=settings.jwt_issuer,
        options={"require": REQUIRED_CLAIMS, "verify_exp": now is None, "verify_iat": now is None},
        leeway=0,
    )

    for claim in ("exp", "iat"):
        if isinstance(payload[claim], bool) or not isinstance(payload[claim], int | float):
            raise jwt.InvalidTokenError(f"{claim} claim must be a number")

    try:
        expires_at = datetime.fromtimestamp(payload["exp"], UTC)
        issued_at = datetime.fromtimestamp(payload["iat"], UTC)
    except (OverflowError, OSError, ValueError) as err:
        raise jwt.InvalidTokenError("Time claim out of range") from err

    # PyJWT only checks time claims against the wall clock
    if now is not None and expires_at <= now:
        raise jwt.ExpiredSignatureError("Signature has expired")

    return TokenClaims(
        subject=str(payload["sub"]),
        role=str(payload["role"]),
        token_id=str(payload["jti"]),
        issuer=payload["iss"],
        audience=settings.jwt_audience,
        issued_at=issued_at,
        expires_at=expires_at,
    )
