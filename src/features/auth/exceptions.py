"""Authentication exceptions."""

from enum import StrEnum

from fastapi import HTTPException, status


class AuthFailureReason(StrEnum):
    """Internal reason code attached to every 401 raised by the auth feature."""

    BAD_CREDENTIALS = "bad_credentials"
    REFRESH_NOT_FOUND = "refresh_not_found"
    REFRESH_EXPIRED = "refresh_expired"
    PRINCIPAL_GONE = "principal_gone"
    ACCESS_TOKEN_INVALID = "access_token_invalid"


class SigningKeyError(RuntimeError):
    """Raised when the JWT signing secret is missing or too short."""


class AuthenticationException(HTTPException):
    """Base authentication exception."""

    reason: AuthFailureReason

    def __init__(self, reason: AuthFailureReason, detail: str = "Authentication failed"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )
        self.reason = reason


class InvalidCredentialsException(AuthenticationException):
    """Raised when username or password is incorrect.

    The message never reveals which of the two was wrong.
    """

    def __init__(self):
        super().__init__(AuthFailureReason.BAD_CREDENTIALS, detail="Invalid username or password")


class InvalidTokenException(AuthenticationException):
    """Raised when an access token fails signature, issuer, audience or expiry checks."""

    def __init__(self):
        super().__init__(AuthFailureReason.ACCESS_TOKEN_INVALID, detail="Invalid or expired token")


class RefreshTokenNotFoundException(AuthenticationException):
    """Raised when refresh token is not found or revoked."""

    def __init__(self):
        super().__init__(
            AuthFailureReason.REFRESH_NOT_FOUND,
            detail="The refresh token is invalid or has been revoked",
        )


class RefreshTokenExpiredException(AuthenticationException):
    """Raised when refresh token has expired."""

    def __init__(self):
        super().__init__(
            AuthFailureReason.REFRESH_EXPIRED,
            detail="The refresh token has expired. Please login again.",
        )


class PrincipalGoneException(AuthenticationException):
    """Raised when a refresh token's owner is no longer a known principal."""

    def __init__(self):
        super().__init__(
            AuthFailureReason.PRINCIPAL_GONE,
            detail="The user associated with this token no longer exists",
        )