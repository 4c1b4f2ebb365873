"""
Task endpoints: CRUD for one member's tasks.

Statuses: todo, in-progress, review, completed. Any status may follow any other;
completed_at is set when a task becomes completed and cleared otherwise.
Every route resolves the caller -> member (-> task) ownership chain first.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_session
from app.models.member import Member
from app.models.task import Task
from app.services.ownership import get_owned_member, get_owned_task
from app.services.tasks import create_task, delete_task, list_tasks, update_task
from taskboard_shared.schemas.tasks import (
    DeleteResponse,
    TaskCreate,
    TaskListResponse,
    TaskRead,
    TaskUpdate,
)

router = APIRouter()


@router.get("", response_model=TaskListResponse)
async def list_tasks_endpoint(
    member: Member = Depends(get_owned_member),
    session: AsyncSession = Depends(get_session),
):
    """List all tasks of one of the caller's members."""
    tasks = await list_tasks(session, member)
    return TaskListResponse(tasks=[TaskRead.model_validate(t) for t in tasks])


@router.post("", response_model=TaskRead, status_code=201)
async def create_task_endpoint(
    task_in: TaskCreate,
    member: Member = Depends(get_owned_member),
    session: AsyncSession = Depends(get_session),
):
    """Create a task under one of the caller's members."""
    task = await create_task(session, member, task_in)
    await session.commit()
    await session.refresh(task)
    return TaskRead.model_validate(task)


@router.get("/{taskId}", response_model=TaskRead)
async def get_task_endpoint(task: Task = Depends(get_owned_task)):
    """Get a single task."""
    return TaskRead.model_validate(task)


@router.put("/{taskId}", response_model=TaskRead)
async def update_task_endpoint(
    task_in: TaskUpdate,
    task: Task = Depends(get_owned_task),
    session: AsyncSession = Depends(get_session),
):
    """Partially update a task. Fields absent from the body are left untouched."""
    task = await update_task(session, task, task_in)
    await session.commit()
    await session.refresh(task)
    return TaskRead.model_validate(task)


@router.delete("/{taskId}", response_model=DeleteResponse)
async def delete_task_endpoint(
    task: Task = Depends(get_owned_task),
    session: AsyncSession = Depends(get_session),
):
    """Delete a task. Sibling tasks are not affected."""
    await delete_task(session, task)
    await session.commit()
    return DeleteResponse(success=True)
