"""Middleware logging one line per HTTP request."""

import logging
import time
from collections.abc import Callable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

logger = logging.getLogger(__name__)


def level_for(path: str, status_code: int, failed: bool = False) -> int:
    """Pick the log level for a finished request.

    Health checks log at DEBUG, server errors and exceptions at ERROR,
    client errors at WARNING, everything else at INFO.
    """
    if path.lower().startswith("/health"):
        return logging.DEBUG
    if failed or status_code > 499:
        return logging.ERROR
    if status_code > 399:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log method, path, status code and elapsed time of every request."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start = time.perf_counter()
        path = request.url.path

        try:
            response: Response = await call_next(request)
        except Exception:
            elapsed_ms = (time.perf_counter() - start) * 1000
            logger.log(
                level_for(path, 500, failed=True),
                f"{request.method} {path} failed after {elapsed_ms:.1f} ms",
                exc_info=True,
            )
            raise

        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.log(
            level_for(path, response.status_code),
            f"{request.method} {path} -> {response.status_code} in {elapsed_ms:.1f} ms",
        )
        return response
