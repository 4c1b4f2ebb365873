"""
Tests for authentication.

Covers:
- Password hashing
- Token issue / verify, expiry and tampering
- Signup, login and /auth/me over HTTP
- Missing signing secret
"""

from __future__ import annotations

import uuid
from datetime import timedelta

import jwt
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import func, select

from app.core.auth import TokenService, burn_password_check, hash_password, verify_password
from app.core.config import Settings
from app.core.database import init_db
from app.core.errors import AuthenticationError, ConfigurationError
from app.main import create_app
from app.models.user import User

PASSWORD = "secret1"


# ---------------------------------------------------------------------------
# Unit Tests: Password hashing
# ---------------------------------------------------------------------------

class TestPasswordHashing:
    def test_hash_and_verify(self):
        hashed = hash_password("MySecureP@ssw0rd!", rounds=4)
        assert hashed != "MySecureP@ssw0rd!"
        assert verify_password("MySecureP@ssw0rd!", hashed)

    def test_wrong_password_fails(self):
        hashed = hash_password("correct-password", rounds=4)
        assert not verify_password("wrong-password", hashed)

    def test_different_hashes_for_same_password(self):
        """bcrypt uses random salt, so hashes differ."""
        h1 = hash_password("same", rounds=4)
        h2 = hash_password("same", rounds=4)
        assert h1 != h2
        assert verify_password("same", h1)
        assert verify_password("same", h2)

    def test_malformed_hash_never_verifies(self):
        assert not verify_password("anything", "not-a-bcrypt-hash")

    def test_burn_password_check_returns_nothing(self):
        assert burn_password_check("whatever", rounds=4) is None


# ---------------------------------------------------------------------------
# Unit Tests: Tokens
# ---------------------------------------------------------------------------

class TestTokenService:
    def test_issue_and_verify(self):
        tokens = TokenService("s3cret")
        uid = uuid.uuid4()
        identity = tokens.verify(tokens.issue(uid, "user"))
        assert identity.user_id == uid
        assert identity.role == "user"

    def test_payload_claims(self):
        uid = uuid.uuid4()
        token = TokenService("s3cret", expire_days=7).issue(uid, "user")
        payload = jwt.decode(token, "s3cret", algorithms=["HS256"])
        assert payload["userId"] == str(uid)
        assert payload["role"] == "user"
        assert payload["exp"] - payload["iat"] == 7 * 24 * 3600

    def test_expired_token_rejected(self):
        tokens = TokenService("s3cret")
        token = tokens.issue(uuid.uuid4(), "user", expires_delta=timedelta(seconds=-1))
        with pytest.raises(AuthenticationError):
            tokens.verify(token)

    def test_wrong_secret_rejected(self):
        token = TokenService("one").issue(uuid.uuid4(), "user")
        with pytest.raises(AuthenticationError):
            TokenService("two").verify(token)

    def test_tampered_token_rejected(self):
        tokens = TokenService("s3cret")
        token = tokens.issue(uuid.uuid4(), "user")
        head, body, sig = token.split(".")
        with pytest.raises(AuthenticationError):
            tokens.verify(f"{head}.{body}x.{sig}")

    def test_garbage_rejected(self):
        with pytest.raises(AuthenticationError):
            TokenService("s3cret").verify("not-a-token")

    def test_token_without_user_id_rejected(self):
        token = jwt.encode({"role": "user", "iat": 0, "exp": 4102444800}, "s3cret", algorithm="HS256")
        with pytest.raises(AuthenticationError):
            TokenService("s3cret").verify(token)

    def test_missing_secret_is_configuration_error(self):
        tokens = TokenService("")
        with pytest.raises(ConfigurationError):
            tokens.issue(uuid.uuid4(), "user")
        with pytest.raises(ConfigurationError):
            tokens.verify("anything")


# ---------------------------------------------------------------------------
# Integration Tests: signup / login / me
# ---------------------------------------------------------------------------

SIGNUP = {"email": "alice@example.com", "password": PASSWORD, "name": "Alice", "country": "NZ"}


@pytest.mark.asyncio
async def test_signup_returns_user_and_token(client: AsyncClient):
    resp = await client.post("/api/v1/auth/signup", json={**SIGNUP, "grade": "A"})
    assert resp.status_code == 201
    body = resp.json()
    assert body["token"]
    user = body["user"]
    assert user["email"] == "alice@example.com"
    assert user["name"] == "Alice"
    assert user["grade"] == "A"
    assert user["role"] == "user"
    assert "createdAt" in user
    assert "password" not in user and "passwordHash" not in user


@pytest.mark.asyncio
async def test_duplicate_signup_conflicts_and_first_account_survives(client: AsyncClient):
    assert (await client.post("/api/v1/auth/signup", json=SIGNUP)).status_code == 201

    resp = await client.post(
        "/api/v1/auth/signup", json={**SIGNUP, "password": "another-pw", "name": "Mallory"}
    )
    assert resp.status_code == 409
    assert resp.json() == {"error": "Email already in use"}

    login = await client.post(
        "/api/v1/auth/login", json={"email": SIGNUP["email"], "password": PASSWORD}
    )
    assert login.status_code == 200
    assert login.json()["user"]["name"] == "Alice"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "override, field",
    [
        ({"email": "not-an-email"}, "email"),
        ({"password": "12345"}, "password"),
        ({"name": ""}, "name"),
        ({"country": ""}, "country"),
    ],
)
async def test_signup_validation(client: AsyncClient, override, field):
    resp = await client.post("/api/v1/auth/signup", json={**SIGNUP, **override})
    assert resp.status_code == 400
    assert field in resp.json()["error"]


@pytest.mark.asyncio
async def test_signup_rejects_password_longer_than_bcrypt_accepts(client: AsyncClient):
    resp = await client.post("/api/v1/auth/signup", json={**SIGNUP, "password": "x" * 100})
    assert resp.status_code == 400
    assert resp.json() == {"error": {"password": "Password must be at most 72 bytes"}}

    # Counted in bytes, not characters.
    resp = await client.post("/api/v1/auth/signup", json={**SIGNUP, "password": "é" * 37})
    assert resp.status_code == 400
    assert "password" in resp.json()["error"]

    resp = await client.post("/api/v1/auth/signup", json={**SIGNUP, "password": "x" * 72})
    assert resp.status_code == 201


@pytest.mark.asyncio
async def test_login_with_overlong_password_is_unauthorized(client: AsyncClient, register):
    await register()
    resp = await client.post(
        "/api/v1/auth/login", json={"email": "alice@example.com", "password": "x" * 100}
    )
    assert resp.status_code == 401
    assert resp.json() == {"error": "Invalid credentials"}


@pytest.mark.asyncio
async def test_signup_missing_fields(client: AsyncClient):
    resp = await client.post("/api/v1/auth/signup", json={"email": "a@example.com"})
    assert resp.status_code == 400
    assert set(resp.json()["error"]) == {"password", "name", "country"}


@pytest.mark.asyncio
async def test_login_success(client: AsyncClient, register):
    _, user = await register()
    resp = await client.post(
        "/api/v1/auth/login", json={"email": "alice@example.com", "password": PASSWORD}
    )
    assert resp.status_code == 200
    assert resp.json()["user"]["id"] == user["id"]
    assert resp.json()["token"]


@pytest.mark.asyncio
async def test_login_wrong_password(client: AsyncClient, register):
    await register()
    resp = await client.post(
        "/api/v1/auth/login", json={"email": "alice@example.com", "password": "wrong-pw"}
    )
    assert resp.status_code == 401
    assert resp.json() == {"error": "Invalid credentials"}


@pytest.mark.asyncio
async def test_login_unknown_email_looks_like_wrong_password(client: AsyncClient):
    resp = await client.post(
        "/api/v1/auth/login", json={"email": "nobody@example.com", "password": "whatever"}
    )
    assert resp.status_code == 401
    assert resp.json() == {"error": "Invalid credentials"}


@pytest.mark.asyncio
async def test_me_returns_profile(client: AsyncClient, register):
    headers, user = await register()
    resp = await client.get("/api/v1/auth/me", headers=headers)
    assert resp.status_code == 200
    me = resp.json()["user"]
    assert me["id"] == user["id"]
    assert me["email"] == user["email"]
    assert me["country"] == "NZ"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "headers",
    [
        {},
        {"Authorization": "Bearer"},
        {"Authorization": "Token abc"},
        {"Authorization": "Bearer not-a-jwt"},
    ],
)
async def test_me_requires_valid_bearer(client: AsyncClient, headers):
    resp = await client.get("/api/v1/auth/me", headers=headers)
    assert resp.status_code == 401
    assert resp.json() == {"error": "Invalid or expired token"}


@pytest.mark.asyncio
async def test_token_for_unknown_user_rejected_by_me(app, client: AsyncClient):
    token = app.state.token_service.issue(uuid.uuid4(), "user")
    resp = await client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_expired_token_rejected_over_http(app, client: AsyncClient, register):
    _, user = await register()
    token = app.state.token_service.issue(
        uuid.UUID(user["id"]), "user", expires_delta=timedelta(seconds=-1)
    )
    resp = await client.get("/api/v1/members", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_signup_without_secret_fails_and_persists_nothing():
    settings = Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        secret_key="",
        bcrypt_rounds=4,
        create_tables_on_startup=False,
    )
    app = create_app(settings)
    await init_db(app.state.engine)
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            resp = await ac.post("/api/v1/auth/signup", json=SIGNUP)
        assert resp.status_code == 500
        assert resp.json() == {"error": "Token signing secret is not configured"}

        async with app.state.session_factory() as session:
            count = (await session.execute(select(func.count()).select_from(User))).scalar_one()
        assert count == 0
    finally:
        await app.state.engine.dispose()
