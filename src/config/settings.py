"""Application settings and configuration."""

import logging

from pydantic import BaseModel, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.config.cors_config import CORSConfigurationError, build_cors_options

logger = logging.getLogger(__name__)

MIN_JWT_SECRET_LENGTH = 32


class DemoUser(BaseModel):
    """A statically configured login identity."""

    username: str
    password: str
    role: str


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application (hardcoded constants)
    app_name: str = "Northwind API"
    app_version: str = "1.0.0"

    # Environment-specific settings
    debug: bool = False
    environment: str = "development"  # development, staging, production

    # API
    api_prefix: str = "/api"

    # CORS
    cors_allow_origins: str | None = None
    cors_allow_methods: str | None = None
    cors_allow_headers: str | None = None
    cors_allow_credentials: bool = False
    cors_max_age: int = 600

    # Security
    jwt_secret: str
    jwt_issuer: str = "Northwind.App.Backend"
    jwt_audience: str = "Northwind.App.Frontend"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60
    refresh_token_expire_days: int = 7

    # Demo principals (no user database in this service)
    demo_users: list[DemoUser] = [
        DemoUser(username="admin", password="admin", role="Admin"),
        DemoUser(username="user", password="user", role="User"),
    ]

    # Rate limiting
    rate_limit_enabled: bool = True
    rate_limit_default: str = "100/minute"
    login_rate_limit: str = "10/minute"

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("environment", mode="before")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment value."""
        valid_envs = {"development", "staging", "production"}
        env = str(v).lower()
        if env not in valid_envs:
            raise ValueError(f"Environment must be one of {valid_envs}, got {env}")
        return env

    @field_validator("jwt_secret")
    @classmethod
    def validate_jwt_secret(cls, v: str) -> str:
        """Refuse to start with a signing secret that is too short."""
        if len(v) < MIN_JWT_SECRET_LENGTH:
            raise ValueError(
                f"JWT secret must be at least {MIN_JWT_SECRET_LENGTH} characters long, got {len(v)}"
            )
        return v

    @field_validator("access_token_expire_minutes", "refresh_token_expire_days")
    @classmethod
    def validate_positive_lifetime(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("Token lifetimes must be positive")
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = str(v).upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {v}")
        return level

    @property
    def access_token_expire_seconds(self) -> int:
        return self.access_token_expire_minutes * 60

    def get_cors_options(self) -> dict:
        """Get keyword arguments for CORSMiddleware.

        Raises:
            CORSConfigurationError: If CORS configuration is invalid or insecure.

        """
        try:
            return build_cors_options(
                allow_origins=self.cors_allow_origins,
                allow_methods=self.cors_allow_methods,
                allow_headers=self.cors_allow_headers,
                allow_credentials=self.cors_allow_credentials,
                max_age=self.cors_max_age,
                environment=self.environment,
            )
        except CORSConfigurationError as exc:
            logger.error(f"Failed to create CORS configuration: {exc}")
            raise


settings = Settings()  # type: ignore[call-arg]
