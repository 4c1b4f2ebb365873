"""
In-memory mirror of the signed-in user's members and tasks.

The server is authoritative. Mutations go to the API first and are applied to
the mirror only from the server's response, so the mirror can lag but never
holds a change the server refused. Every failure is reported to the notifier.
"""

from __future__ import annotations

import uuid
from typing import Callable, Optional

import structlog

from taskboard_shared.schemas.members import MemberCreate, MemberRead
from taskboard_shared.schemas.tasks import TaskCreate, TaskRead, TaskUpdate

from .api import APIError, TaskboardAPI

log = structlog.get_logger()

# (level, message) where level is "success" or "error"
Notifier = Callable[[str, str], None]


def log_notifier(level: str, message: str) -> None:
    if level == "error":
        log.error("notify", message=message)
    else:
        log.info("notify", message=message)


class MemberCache:
    """Members and tasks fetched from the API, refreshed after each mutation."""

    def __init__(self, api: TaskboardAPI, notify: Notifier | None = None):
        self._api = api
        self._notify = notify or log_notifier
        self.members: list[MemberRead] = []
        self._tasks: dict[uuid.UUID, TaskRead] = {}
        self._tasks_loading: dict[uuid.UUID, bool] = {}
        self.members_loading = False

    @property
    def tasks(self) -> list[TaskRead]:
        return list(self._tasks.values())

    def _signed_in(self) -> bool:
        if not self._api.token:
            self._notify("error", "You must be logged in")
            return False
        return True

    def _fail(self, event: str, exc: APIError, fallback: str) -> None:
        log.warning(event, status=exc.status_code, error=exc.message)
        self._notify("error", exc.message or fallback)

    # --- reads ---

    async def load_members(self) -> list[MemberRead]:
        if not self._signed_in():
            return self.members
        self.members_loading = True
        try:
            self.members = await self._api.list_members()
        except APIError as exc:
            self._fail("cache.load_members_failed", exc, "Failed to load members")
        finally:
            self.members_loading = False
        return self.members

    async def fetch_member_tasks(self, member_id: uuid.UUID) -> list[TaskRead]:
        """Replace everything cached for ``member_id`` with the server's list."""
        if not self._signed_in():
            return self.member_tasks(member_id)
        self._tasks_loading[member_id] = True
        try:
            fresh = await self._api.list_tasks(member_id)
        except APIError as exc:
            self._fail("cache.fetch_tasks_failed", exc, "Failed to load tasks")
        else:
            self._tasks = {
                tid: t for tid, t in self._tasks.items() if t.member_id != member_id
            }
            self._tasks.update((t.id, t) for t in fresh)
        finally:
            self._tasks_loading[member_id] = False
        return self.member_tasks(member_id)

    def is_member_tasks_loading(self, member_id: uuid.UUID) -> bool:
        return self._tasks_loading.get(member_id, False)

    def member_tasks(self, member_id: uuid.UUID) -> list[TaskRead]:
        return [t for t in self._tasks.values() if t.member_id == member_id]

    def user_members(self, user_id: uuid.UUID) -> list[MemberRead]:
        return [m for m in self.members if m.user_id == user_id]

    def get_task(self, task_id: uuid.UUID) -> Optional[TaskRead]:
        return self._tasks.get(task_id)

    # --- mutations ---

    async def add_member(self, req: MemberCreate) -> Optional[MemberRead]:
        if not self._signed_in():
            return None
        try:
            member = await self._api.create_member(req)
        except APIError as exc:
            self._fail("cache.add_member_failed", exc, "Failed to add member")
            return None
        self.members.append(member)
        self._notify("success", "Member added successfully")
        return member

    async def add_task(self, member_id: uuid.UUID, req: TaskCreate) -> Optional[TaskRead]:
        if not self._signed_in():
            return None
        try:
            task = await self._api.create_task(member_id, req)
        except APIError as exc:
            self._fail("cache.add_task_failed", exc, "Failed to create task")
            return None
        self._tasks[task.id] = task
        self._notify("success", "Task created successfully")
        return task

    async def update_task(self, task_id: uuid.UUID, req: TaskUpdate) -> Optional[TaskRead]:
        if not self._signed_in():
            return None
        current = self._tasks.get(task_id)
        if current is None:
            self._notify("error", "Task not found")
            return None
        try:
            task = await self._api.update_task(current.member_id, task_id, req)
        except APIError as exc:
            self._fail("cache.update_task_failed", exc, "Failed to update task")
            return None
        self._tasks[task.id] = task
        self._notify("success", "Task updated successfully")
        return task

    async def delete_task(self, task_id: uuid.UUID) -> bool:
        if not self._signed_in():
            return False
        current = self._tasks.get(task_id)
        if current is None:
            self._notify("error", "Task not found")
            return False
        try:
            await self._api.delete_task(current.member_id, task_id)
        except APIError as exc:
            self._fail("cache.delete_task_failed", exc, "Failed to delete task")
            return False
        self._tasks.pop(task_id, None)
        self._notify("success", "Task deleted successfully")
        return True

    def clear(self) -> None:
        self.members = []
        self._tasks = {}
        self._tasks_loading = {}
