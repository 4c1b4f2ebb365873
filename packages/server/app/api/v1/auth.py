"""
Authentication endpoints.

- Email/Password signup & login, both returning a bearer token
- Current-user lookup for clients restoring a stored token
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import (
    TokenIdentity,
    TokenService,
    get_app_settings,
    get_current_identity,
    get_token_service,
)
from app.core.config import Settings
from app.core.database import get_session
from app.core.errors import AuthenticationError
from app.services import users as user_service
from taskboard_shared.schemas.users import (
    AuthResponse,
    LoginRequest,
    MeResponse,
    SignupRequest,
    UserRead,
)

log = structlog.get_logger()
router = APIRouter()


@router.post("/signup", response_model=AuthResponse, status_code=201)
async def signup(
    body: SignupRequest,
    session: AsyncSession = Depends(get_session),
    settings: Settings = Depends(get_app_settings),
    tokens: TokenService = Depends(get_token_service),
):
    """Register a new user with email/password and return a session token."""
    user = await user_service.signup(session, body, bcrypt_rounds=settings.bcrypt_rounds)
    # Issue before committing so a missing secret leaves no half-created account.
    token = tokens.issue(user.id, user.role)
    await session.commit()
    return AuthResponse(user=UserRead.model_validate(user), token=token)


@router.post("/login", response_model=AuthResponse)
async def login(
    body: LoginRequest,
    session: AsyncSession = Depends(get_session),
    settings: Settings = Depends(get_app_settings),
    tokens: TokenService = Depends(get_token_service),
):
    """Authenticate with email/password and receive a session token."""
    user = await user_service.authenticate(session, body, bcrypt_rounds=settings.bcrypt_rounds)
    token = tokens.issue(user.id, user.role)
    return AuthResponse(user=UserRead.model_validate(user), token=token)


@router.get("/me", response_model=MeResponse)
async def me(
    identity: TokenIdentity = Depends(get_current_identity),
    session: AsyncSession = Depends(get_session),
):
    """Return the profile behind the presented token."""
    user = await user_service.get_user(session, identity.user_id)
    if user is None:
        # Token outlived its account.
        raise AuthenticationError()
    return MeResponse(user=UserRead.model_validate(user))
