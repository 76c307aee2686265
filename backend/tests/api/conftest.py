"""API test fixtures — per-test app on in-memory SQLite + async HTTP client.

Invariants:
    - Every test gets a fresh app and a fresh in-memory database
    - The database is connected (tables created) before the client is handed out
    - Lifespan is NOT run here; tests that need it enter it explicitly

Design Decisions:
    - create_app(settings) instead of the module-level app: each test owns its
      settings, strategy secret, and DatabaseSessionManager
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
"""

import pytest
from httpx import ASGITransport, AsyncClient

from app.config import Settings
from app.main import create_app

from tests.api.helpers import register


@pytest.fixture
def settings():
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        jwt_secret_key="test-secret",
        bcrypt_rounds=4,
        graphiql=False,
        max_body_bytes=2048,
        max_form_fields=20,
        _env_file=None,
    )


@pytest.fixture
async def app(settings):
    application = create_app(settings)
    await application.state.database.connect()
    yield application
    await application.state.database.dispose()


@pytest.fixture
async def client(app):
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c


@pytest.fixture
async def auth_header(client):
    token = await register(client)
    return {"Authorization": token}
