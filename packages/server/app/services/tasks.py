"""
Task service layer: business logic for a member's tasks.

Handles:
- Task CRUD scoped to an already-authorized member
- The status / completed_at coupling, applied the same way on create and update
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional, Sequence

import structlog
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.models.member import Member
from app.models.task import Task
from taskboard_shared.schemas.common import TaskStatus, derive_completed_at
from taskboard_shared.schemas.tasks import TaskCreate, TaskUpdate

log = structlog.get_logger()


def _previous_completed_at(task: Task) -> Optional[datetime]:
    if task.status == TaskStatus.COMPLETED.value:
        return task.completed_at
    return None


# ---------------------------------------------------------------------------
# CRUD
# ---------------------------------------------------------------------------


async def list_tasks(session: AsyncSession, member: Member) -> Sequence[Task]:
    result = await session.execute(
        select(Task)
        .where(Task.member_id == member.id)
        .order_by(Task.created_at, Task.id)
    )
    return result.scalars().all()


async def create_task(
    session: AsyncSession,
    member: Member,
    task_in: TaskCreate,
    *,
    now: Optional[datetime] = None,
) -> Task:
    now = now or datetime.now(timezone.utc)
    task = Task(
        member_id=member.id,
        title=task_in.title,
        description=task_in.description,
        status=task_in.status.value,
        priority=task_in.priority.value,
        due_date=task_in.due_date,
        completed_at=derive_completed_at(task_in.status, None, now),
    )
    session.add(task)
    await session.flush()
    log.info("task.created", task_id=str(task.id), member_id=str(member.id), status=task.status)
    return task


async def update_task(
    session: AsyncSession,
    task: Task,
    task_in: TaskUpdate,
    *,
    now: Optional[datetime] = None,
) -> Task:
    """Apply the fields present in ``task_in``. An empty update is a no-op."""
    data = task_in.changes()
    if not data:
        return task

    if "status" in data:
        status: TaskStatus = data.pop("status")
        task.completed_at = derive_completed_at(
            status, _previous_completed_at(task), now or datetime.now(timezone.utc)
        )
        task.status = status.value
    if "priority" in data:
        data["priority"] = data["priority"].value

    for key, value in data.items():
        setattr(task, key, value)

    session.add(task)
    await session.flush()
    log.info("task.updated", task_id=str(task.id), fields=sorted(task_in.changes()))
    return task


async def delete_task(session: AsyncSession, task: Task) -> None:
    await session.delete(task)
    await session.flush()
    log.info("task.deleted", task_id=str(task.id), member_id=str(task.member_id))
