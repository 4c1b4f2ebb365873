"""
Shared fixtures for client tests: the real server app behind an in-process transport.
"""

import pytest
from httpx import ASGITransport

from app.core.config import Settings
from app.core.database import init_db
from app.main import create_app
from taskboard_client.api import TaskboardAPI
from taskboard_client.state import SessionStore
from taskboard_shared.schemas.users import SignupRequest


@pytest.fixture
async def server():
    app = create_app(
        Settings(
            database_url="sqlite+aiosqlite:///:memory:",
            secret_key="client-test-secret",
            bcrypt_rounds=4,
            create_tables_on_startup=False,
        )
    )
    await init_db(app.state.engine)
    yield app
    await app.state.engine.dispose()


@pytest.fixture
async def api(server):
    async with TaskboardAPI("http://test/api/v1", transport=ASGITransport(app=server)) as client:
        yield client


@pytest.fixture
async def store(tmp_path):
    s = SessionStore(str(tmp_path / "state" / "client.db"))
    await s.open()
    yield s
    await s.close()


@pytest.fixture
def alice() -> SignupRequest:
    return SignupRequest(email="alice@example.com", password="secret1", name="Alice", country="NZ")
