"""
SQLite persistence for the client session.

Stores the bearer token and the last-known user profile so a restarted client
can resume without logging in again.
"""

from __future__ import annotations

import os
from datetime import datetime, timezone

import aiosqlite

from taskboard_shared.schemas.users import UserRead

_SCHEMA = """
CREATE TABLE IF NOT EXISTS session (
    id          INTEGER PRIMARY KEY CHECK (id = 1),
    token       TEXT NOT NULL,
    user_json   TEXT NOT NULL,
    updated_at  TEXT NOT NULL
);
"""


class SessionStore:
    """Async SQLite store holding at most one signed-in session."""

    def __init__(self, db_path: str):
        self._db_path = db_path
        self._db: aiosqlite.Connection | None = None

    async def open(self) -> None:
        os.makedirs(os.path.dirname(self._db_path) or ".", exist_ok=True)
        self._db = await aiosqlite.connect(self._db_path)
        self._db.row_factory = aiosqlite.Row
        await self._db.executescript(_SCHEMA)
        await self._db.commit()

    async def close(self) -> None:
        if self._db:
            await self._db.close()
            self._db = None

    async def save(self, token: str, user: UserRead) -> None:
        assert self._db
        now = datetime.now(timezone.utc).isoformat()
        user_json = user.model_dump_json(by_alias=True)
        await self._db.execute(
            """INSERT INTO session (id, token, user_json, updated_at)
               VALUES (1, ?, ?, ?)
               ON CONFLICT(id) DO UPDATE SET token=?, user_json=?, updated_at=?""",
            (token, user_json, now, token, user_json, now),
        )
        await self._db.commit()

    async def load(self) -> tuple[str, UserRead] | None:
        assert self._db
        cursor = await self._db.execute("SELECT token, user_json FROM session WHERE id = 1")
        row = await cursor.fetchone()
        if row is None:
            return None
        return row["token"], UserRead.model_validate_json(row["user_json"])

    async def clear(self) -> None:
        assert self._db
        await self._db.execute("DELETE FROM session")
        await self._db.commit()
