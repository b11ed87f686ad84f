"""CORS configuration with environment-aware validation."""

import logging
from urllib.parse import urlparse

logger = logging.getLogger(__name__)

DEFAULT_METHODS = ["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"]
DEFAULT_HEADERS = ["authorization", "content-type"]


class CORSConfigurationError(Exception):
    """Raised when CORS configuration is invalid or insecure."""

    pass


def parse_comma_separated_list(value: str | list[str] | None) -> list[str]:
    """Parse comma-separated string or return as-is if already a list.

    Args:
        value: Comma-separated string or list

    Returns:
        List of values with whitespace stripped

    """
    if value is None:
        return []

    if isinstance(value, list):
        return [v.strip() for v in value if v.strip()]

    if isinstance(value, str):
        return [v.strip() for v in value.split(",") if v.strip()]

    raise CORSConfigurationError(f"Invalid value type: {type(value)}")


def normalize_origin(origin: str) -> str:
    """Normalize an origin URL by stripping whitespace and trailing slashes.

    Raises:
        CORSConfigurationError: If origin is empty or not a URL.

    """
    origin = origin.strip()

    if not origin:
        raise CORSConfigurationError("Origin cannot be empty")

    if origin == "*":
        return origin

    parsed = urlparse(origin)
    if not parsed.scheme or not parsed.netloc:
        raise CORSConfigurationError(f"Invalid origin URL: {origin}")

    return origin.rstrip("/")


def build_cors_options(
    allow_origins: str | list[str] | None = None,
    allow_methods: str | list[str] | None = None,
    allow_headers: str | list[str] | None = None,
    allow_credentials: bool = False,
    max_age: int = 600,
    environment: str = "development",
) -> dict:
    """Build the keyword arguments for Starlette's CORSMiddleware.

    Development defaults to any origin, which is what the public demo API
    serves. Staging and production must list their origins explicitly.

    Raises:
        CORSConfigurationError: If configuration is invalid or insecure.

    """
    environment = environment.lower()

    if allow_origins is None and environment == "development":
        origins = ["*"]
    else:
        origins = [normalize_origin(o) for o in parse_comma_separated_list(allow_origins)]

    has_wildcard = "*" in origins

    if allow_credentials and has_wildcard:
        raise CORSConfigurationError(
            "Cannot enable credentials with wildcard origins (*). Provide explicit allowed origins instead."
        )

    if has_wildcard and environment != "development":
        raise CORSConfigurationError(f"Wildcard origins (*) are not allowed in {environment} environment.")

    if not origins and environment != "development":
        raise CORSConfigurationError(f"{environment.capitalize()} environment requires explicit allowed origins")

    options = {
        "allow_origins": origins,
        "allow_credentials": allow_credentials,
        "allow_methods": parse_comma_separated_list(allow_methods) or DEFAULT_METHODS,
        "allow_headers": parse_comma_separated_list(allow_headers) or DEFAULT_HEADERS,
        "max_age": max_age,
    }

    logger.info(
        f"CORS configured for {environment}: origins={origins}, "
        f"credentials={allow_credentials}, max_age={max_age}s"
    )
    return options
