"""
Sign-in state: ties the API token to the persisted session.
"""

from __future__ import annotations

from typing import Optional

import structlog

from taskboard_shared.schemas.users import LoginRequest, SignupRequest, UserRead

from .api import APIError, TaskboardAPI
from .state import SessionStore

log = structlog.get_logger()


class AuthSession:
    """Signup, login, logout, and resuming a stored session."""

    def __init__(self, api: TaskboardAPI, store: SessionStore):
        self._api = api
        self._store = store
        self.user: Optional[UserRead] = None

    async def restore(self, *, verify: bool = True) -> Optional[UserRead]:
        """Load the stored session. With ``verify``, drop it if the server rejects the token."""
        saved = await self._store.load()
        if saved is None:
            return None
        token, user = saved
        self._api.token = token
        self.user = user
        if verify:
            try:
                self.user = await self._api.me()
            except APIError as exc:
                if exc.status_code != 401:
                    raise
                log.info("session.expired", user_id=str(user.id))
                await self.logout()
                return None
            await self._store.save(token, self.user)
        return self.user

    async def signup(self, req: SignupRequest) -> UserRead:
        auth = await self._api.signup(req)
        await self._store.save(auth.token, auth.user)
        self.user = auth.user
        log.info("session.signed_up", user_id=str(auth.user.id))
        return auth.user

    async def login(self, email: str, password: str) -> UserRead:
        auth = await self._api.login(LoginRequest(email=email, password=password))
        await self._store.save(auth.token, auth.user)
        self.user = auth.user
        log.info("session.logged_in", user_id=str(auth.user.id))
        return auth.user

    async def logout(self) -> None:
        await self._store.clear()
        self._api.token = None
        self.user = None
