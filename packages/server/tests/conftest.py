"""
Shared fixtures for server tests: an app per test on a fresh in-memory database.
"""

import pytest
from httpx import ASGITransport, AsyncClient

from app.core.config import Settings
from app.core.database import init_db
from app.main import create_app

PASSWORD = "secret1"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        secret_key="test-secret",
        bcrypt_rounds=4,
        create_tables_on_startup=False,
        log_format="text",
    )


@pytest.fixture
async def app(settings):
    application = create_app(settings)
    await init_db(application.state.engine)
    yield application
    await application.state.engine.dispose()


@pytest.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def register(client):
    """Sign up a user and return ``(headers, user)`` for authenticated calls."""

    async def _register(email: str = "alice@example.com", name: str = "Alice", country: str = "NZ"):
        resp = await client.post(
            "/api/v1/auth/signup",
            json={"email": email, "password": PASSWORD, "name": name, "country": country},
        )
        assert resp.status_code == 201, resp.text
        body = resp.json()
        return {"Authorization": f"Bearer {body['token']}"}, body["user"]

    return _register


@pytest.fixture
def make_member(client):
    async def _make_member(headers, name: str = "Bob", email: str = "bob@example.com", role: str = "Developer"):
        resp = await client.post(
            "/api/v1/members",
            json={"name": name, "email": email, "role": role},
            headers=headers,
        )
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _make_member


@pytest.fixture
def make_task(client):
    async def _make_task(headers, member_id: str, **fields):
        payload = {"title": "Write report", "dueDate": "2025-01-01"}
        payload.update(fields)
        resp = await client.post(
            f"/api/v1/members/{member_id}/tasks", json=payload, headers=headers
        )
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _make_task
