"""Authentication service layer."""

import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from jwt.exceptions import InvalidTokenError

from src.config.settings import settings

from .exceptions import (
    InvalidCredentialsException,
    InvalidTokenException,
    PrincipalGoneException,
    RefreshTokenExpiredException,
    RefreshTokenNotFoundException,
)
from .jwt_utils import create_access_token, decode_access_token, generate_refresh_token
from .models import CurrentUser, Principal, RefreshTokenRecord, TokenClaims, TokenPair
from .principals import PrincipalDirectory, StaticPrincipalDirectory, verify_credentials
from .store import RefreshTokenStore, TakeOutcome

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(UTC)


class AuthService:
    """Service for login, token issuance, rotation and revocation.

    Access tokens are stateless JWTs; refresh tokens are opaque values kept in
    a RefreshTokenStore and are single-use. Revoking refresh tokens does not
    touch access tokens already handed out; those stay valid until they expire.
    """

    def __init__(
        self,
        directory: PrincipalDirectory,
        store: RefreshTokenStore | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.directory = directory
        self.store = store if store is not None else RefreshTokenStore()
        self.clock = clock

    def authenticate(self, username: str, password: str) -> Principal:
        """Verify credentials.

        Raises:
            InvalidCredentialsException: If username or password is wrong

        """
        principal = verify_credentials(self.directory, username, password)
        if principal is None:
            logger.warning(f"Failed login attempt for user: {username}")
            raise InvalidCredentialsException()
        return principal

    def login(self, username: str, password: str) -> TokenPair:
        logger.info(f"Login attempt for user: {username}")
        principal = self.authenticate(username, password)
        tokens = self.issue_token_pair(principal)
        logger.info(f"User {principal.username} logged in successfully")
        return tokens

    def issue_token_pair(self, principal: Principal) -> TokenPair:
        """Create an access token and a tracked refresh token for a principal.

        Args:
            principal: Identity the tokens are issued for

        Returns:
            TokenPair with both tokens and the access token lifetime in seconds

        """
        now = self.clock()
        try:
            access_token, _ = create_access_token(principal, now=now)
        except Exception:
            logger.exception(f"Failed to generate access token for user {principal.username}")
            raise

        refresh_token = generate_refresh_token()
        record = RefreshTokenRecord(
            username=principal.username,
            expires_at=now + timedelta(days=settings.refresh_token_expire_days),
        )
        self.store.put(refresh_token, record, now)

        return TokenPair(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_in=settings.access_token_expire_seconds,
        )

    def refresh(self, refresh_token: str) -> TokenPair:
        """Exchange a refresh token for a new token pair.

        The presented token is consumed whatever the outcome, so a second use
        of the same value always fails with RefreshTokenNotFoundException.

        Raises:
            RefreshTokenNotFoundException: Token never issued, already rotated or revoked
            RefreshTokenExpiredException: Token past its expiry
            PrincipalGoneException: Token owner is no longer a known principal

        """
        logger.info("Token refresh attempt")
        result = self.store.take_if_valid(refresh_token, self.clock())

        if result.outcome is TakeOutcome.NOT_FOUND:
            logger.warning("Invalid refresh token used")
            raise RefreshTokenNotFoundException()

        record = result.record
        if result.outcome is TakeOutcome.EXPIRED:
            logger.warning(f"Expired refresh token used for user: {record.username}")
            raise RefreshTokenExpiredException()

        principal = self.directory.find_by_username(record.username)
        if principal is None:
            logger.warning(f"User {record.username} not found during token refresh")
            raise PrincipalGoneException()

        tokens = self.issue_token_pair(principal)
        logger.info(f"Token refreshed for user: {principal.username}")
        return tokens

    def logout(self, refresh_token: str | None, username: str = "unknown") -> None:
        """Revoke a single refresh token. Always succeeds."""
        logger.info(f"Logout for user: {username}")
        if refresh_token and not self.store.remove(refresh_token):
            logger.debug(f"Logout for user {username} presented an unknown refresh token")

    def logout_all(self, username: str) -> int:
        """Revoke every refresh token owned by username.

        Returns:
            Number of refresh tokens revoked

        """
        revoked = self.store.remove_all_for_user(username)
        logger.info(f"Logout from all sessions for user: {username} ({revoked} refresh tokens revoked)")
        return revoked

    def validate_access_token(self, token: str) -> TokenClaims:
        """Validate a presented access token.

        Raises:
            InvalidTokenException: On any failure; the specific cause is only logged

        """
        try:
            return decode_access_token(token, now=self.clock())
        except InvalidTokenError as err:
            logger.warning(f"Access token rejected: {type(err).__name__}: {err}")
            raise InvalidTokenException() from err

    @staticmethod
    def current_user(claims: TokenClaims) -> CurrentUser:
        return CurrentUser(username=claims.subject, role=claims.role)


_auth_service: AuthService | None = None


def build_auth_service() -> AuthService:
    """Build an AuthService from application settings."""
    directory = StaticPrincipalDirectory.from_settings(settings.demo_users)
    return AuthService(directory=directory)


def get_auth_service() -> AuthService:
    """FastAPI dependency returning the process-wide AuthService."""
    global _auth_service
    if _auth_service is None:
        _auth_service = build_auth_service()
    return _auth_service


def set_auth_service(service: AuthService | None) -> None:
    global _auth_service
    _auth_service = service
