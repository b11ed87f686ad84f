import logging
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from src.config.cors_config import CORSConfigurationError
from src.config.logging_config import configure_logging
from src.config.settings import settings
from src.features.auth import service as auth_service_module
from src.features.auth.jwt_utils import validate_signing_secret
from src.features.auth.router import router as auth_router
from src.shared.middlewares.request_logging import RequestLoggingMiddleware
from src.shared.rate_limit import limiter, rate_limit_handler

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    """Handle startup and shutdown events."""
    # Startup
    configure_logging(settings.log_level)
    validate_signing_secret(settings.jwt_secret)
    auth_service_module.set_auth_service(auth_service_module.build_auth_service())
    logger.info(f"{settings.app_name} {settings.app_version} starting ({settings.environment})")
    yield
    # Shutdown
    auth_service_module.set_auth_service(None)
    logger.info(f"{settings.app_name} shutting down")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

# Add rate limiting middleware
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_handler)
app.add_middleware(SlowAPIMiddleware)

# Configure CORS middleware with environment-aware settings
try:
    app.add_middleware(CORSMiddleware, **settings.get_cors_options())
except CORSConfigurationError as exc:
    logger.error(f"CORS configuration error: {exc}")
    raise

app.add_middleware(RequestLoggingMiddleware)

# Router Registration
routers: list[APIRouter] = [
    auth_router,
]

for router in routers:
    app.include_router(router, prefix=settings.api_prefix)


@app.get("/")
async def root():
    return {"message": settings.app_name, "status": "running"}


@app.get("/health")
async def health():
    return {"status": "healthy"}
