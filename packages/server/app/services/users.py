"""
Account service: signup and credential checks.
"""

from __future__ import annotations

import uuid
from typing import Optional

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core.auth import burn_password_check, hash_password, verify_password
from app.core.errors import AuthenticationError, ConflictError
from app.models.user import User
from taskboard_shared.schemas.common import Role
from taskboard_shared.schemas.users import LoginRequest, SignupRequest

log = structlog.get_logger()


async def get_user_by_email(session: AsyncSession, email: str) -> Optional[User]:
    result = await session.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def get_user(session: AsyncSession, user_id: uuid.UUID) -> Optional[User]:
    return await session.get(User, user_id)


async def signup(
    session: AsyncSession,
    req: SignupRequest,
    *,
    bcrypt_rounds: int = 12,
) -> User:
    """Create a user. Raises ConflictError when the email is already taken."""
    if await get_user_by_email(session, req.email):
        raise ConflictError("Email already in use")

    user = User(
        email=req.email,
        name=req.name,
        country=req.country,
        grade=req.grade,
        password_hash=hash_password(req.password, bcrypt_rounds),
        role=Role.USER.value,
    )
    session.add(user)
    try:
        await session.flush()
    except IntegrityError:
        # Lost a race with a concurrent signup for the same email.
        await session.rollback()
        raise ConflictError("Email already in use")

    log.info("user.signed_up", user_id=str(user.id))
    return user


async def authenticate(
    session: AsyncSession,
    req: LoginRequest,
    *,
    bcrypt_rounds: int = 12,
) -> User:
    """Return the user for valid credentials, else raise AuthenticationError."""
    user = await get_user_by_email(session, req.email)
    if user is None:
        burn_password_check(req.password, bcrypt_rounds)
        log.warning("auth.login_failure", reason="unknown_email")
        raise AuthenticationError("Invalid credentials")

    if not verify_password(req.password, user.password_hash):
        log.warning("auth.login_failure", user_id=str(user.id), reason="bad_password")
        raise AuthenticationError("Invalid credentials")

    log.info("auth.login_success", user_id=str(user.id))
    return user
