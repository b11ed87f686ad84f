"""Test configuration and fixtures.

Every test gets its own AuthService (fresh refresh token store, controllable
clock) installed through FastAPI dependency overrides, so tests never share
session state.
"""

from collections.abc import AsyncGenerator
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
import pytest_asyncio
from dotenv import load_dotenv
from httpx import ASGITransport, AsyncClient

# Load test environment variables before the settings object is created
test_env_path = Path(__file__).parent.parent / ".env.test"
load_dotenv(test_env_path, override=True)


from src.features.auth.models import Principal  # noqa: E402
from src.features.auth.principals import StaticPrincipalDirectory  # noqa: E402
from src.features.auth.service import AuthService, get_auth_service  # noqa: E402
from src.features.auth.store import RefreshTokenStore  # noqa: E402
from src.main import app  # noqa: E402


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime.now(UTC).replace(microsecond=0)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def principals() -> list[Principal]:
    return [
        Principal(username="admin", password="admin", role="Admin"),
        Principal(username="user", password="user", role="User"),
    ]


@pytest.fixture
def directory(principals) -> StaticPrincipalDirectory:
    return StaticPrincipalDirectory(principals)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> RefreshTokenStore:
    return RefreshTokenStore()


@pytest.fixture
def auth_service(directory, store, clock) -> AuthService:
    return AuthService(directory=directory, store=store, clock=clock)


@pytest.fixture(autouse=True)
def override_auth_service(auth_service: AuthService):
    """Install the per-test AuthService for every endpoint."""
    app.dependency_overrides[get_auth_service] = lambda: auth_service
    yield
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client() -> AsyncGenerator[AsyncClient]:
    """Create an async HTTP test client (unauthenticated)."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest_asyncio.fixture
async def login(client: AsyncClient):
    """Factory fixture logging in through the API.

    Usage:
        tokens = await login()                  # admin/admin
        tokens = await login("user", "user")
    """

    async def _login(username: str = "admin", password: str = "admin") -> dict:
        response = await client.post("/api/auth/login", json={"username": username, "password": password})
        assert response.status_code == 200, response.text
        return response.json()

    return _login
