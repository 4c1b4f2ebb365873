"""
Authentication for Taskboard.

Supports:
- Password hashing (bcrypt)
- Signed, time-bound session tokens (JWT, HS256 by default)
- The bearer-token gate every /members route depends on
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Optional

import bcrypt
import jwt
import structlog
from fastapi import Depends, Request
from fastapi.security import APIKeyHeader

from app.core.config import Settings
from app.core.errors import AuthenticationError, ConfigurationError

log = structlog.get_logger()

api_key_header = APIKeyHeader(name="Authorization", auto_error=False)

# ---------------------------------------------------------------------------
# Password hashing
# ---------------------------------------------------------------------------

def hash_password(password: str, rounds: int = 12) -> str:
    """Hash a password using bcrypt with a random salt."""
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=rounds)).decode()


def verify_password(password: str, hashed: str) -> bool:
    """Verify a password against a bcrypt hash. Malformed hashes never verify."""
    try:
        return bcrypt.checkpw(password.encode(), hashed.encode())
    except ValueError:
        return False


@lru_cache
def _dummy_hash(rounds: int) -> str:
    return hash_password("taskboard-timing-guard", rounds)


def burn_password_check(password: str, rounds: int = 12) -> None:
    """Spend one bcrypt check so an unknown email costs as much as a known one."""
    verify_password(password, _dummy_hash(rounds))


# ---------------------------------------------------------------------------
# JWT
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TokenIdentity:
    """The caller as proven by a verified token."""

    user_id: uuid.UUID
    role: str


class TokenService:
    """Issues and verifies session tokens with the process-wide signing key."""

    def __init__(self, secret_key: str, algorithm: str = "HS256", expire_days: int = 7):
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._lifetime = timedelta(days=expire_days)

    @classmethod
    def from_settings(cls, settings: Settings) -> TokenService:
        return cls(settings.secret_key, settings.jwt_algorithm, settings.token_expire_days)

    def _require_secret(self) -> str:
        if not self._secret_key:
            log.error("auth.secret_missing")
            raise ConfigurationError("Token signing secret is not configured")
        return self._secret_key

    def issue(
        self,
        user_id: uuid.UUID,
        role: str,
        *,
        expires_delta: timedelta | None = None,
    ) -> str:
        """Create a signed token embedding ``userId`` and ``role``."""
        secret = self._require_secret()
        now = datetime.now(timezone.utc)
        payload = {
            "userId": str(user_id),
            "role": role,
            "iat": now,
            "exp": now + (expires_delta or self._lifetime),
        }
        return jwt.encode(payload, secret, algorithm=self._algorithm)

    def verify(self, token: str) -> TokenIdentity:
        """Decode and verify a token. Every failure is an AuthenticationError."""
        secret = self._require_secret()
        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=[self._algorithm],
                options={"require": ["exp", "iat"]},
            )
            return TokenIdentity(
                user_id=uuid.UUID(str(payload["userId"])),
                role=str(payload.get("role", "user")),
            )
        except (jwt.PyJWTError, KeyError, ValueError, TypeError):
            raise AuthenticationError()


# ---------------------------------------------------------------------------
# Authentication dependencies
# ---------------------------------------------------------------------------

def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def _extract_bearer(authorization: Optional[str]) -> str:
    if not authorization or not authorization.startswith("Bearer "):
        raise AuthenticationError()
    token = authorization[len("Bearer "):].strip()
    if not token:
        raise AuthenticationError()
    return token


async def get_current_identity(
    request: Request,
    authorization: Optional[str] = Depends(api_key_header),
    tokens: TokenService = Depends(get_token_service),
) -> TokenIdentity:
    """Main authentication dependency: resolve the bearer token to a caller."""
    token = _extract_bearer(authorization)
    identity = tokens.verify(token)
    request.state.identity = identity
    structlog.contextvars.bind_contextvars(user_id=str(identity.user_id))
    return identity
