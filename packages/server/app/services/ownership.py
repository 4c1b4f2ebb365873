"""
Ownership-chain checks: User -> Member -> Task.

A token only proves who the caller is. Every member or task access resolves
the full chain here and fails closed with NotFoundError, so a resource owned
by someone else looks exactly like one that does not exist.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import TokenIdentity, get_current_identity
from app.core.database import get_session
from app.core.errors import NotFoundError
from app.models.member import Member
from app.models.task import Task


@dataclass(frozen=True)
class OwnedResources:
    member: Member
    task: Optional[Task] = None


async def resolve_ownership(
    session: AsyncSession,
    caller_id: uuid.UUID,
    member_id: uuid.UUID,
    task_id: Optional[uuid.UUID] = None,
) -> OwnedResources:
    """Resolve ``member_id`` (and ``task_id``) as owned by ``caller_id``."""
    member = await session.get(Member, member_id)
    if member is None or member.user_id != caller_id:
        raise NotFoundError("Member not found")
    if task_id is None:
        return OwnedResources(member=member)

    task = await session.get(Task, task_id)
    if task is None or task.member_id != member.id:
        raise NotFoundError("Task not found")
    return OwnedResources(member=member, task=task)


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------


def _parse_id(raw: str, not_found: str) -> uuid.UUID:
    # A path segment that is not a UUID cannot name anything the caller owns.
    try:
        return uuid.UUID(raw)
    except ValueError:
        raise NotFoundError(not_found)


async def get_owned_member(
    memberId: str,
    identity: TokenIdentity = Depends(get_current_identity),
    session: AsyncSession = Depends(get_session),
) -> Member:
    member_id = _parse_id(memberId, "Member not found")
    owned = await resolve_ownership(session, identity.user_id, member_id)
    return owned.member


async def get_owned_task(
    memberId: str,
    taskId: str,
    identity: TokenIdentity = Depends(get_current_identity),
    session: AsyncSession = Depends(get_session),
) -> Task:
    member_id = _parse_id(memberId, "Member not found")
    member = (await resolve_ownership(session, identity.user_id, member_id)).member
    task_id = _parse_id(taskId, "Task not found")
    owned = await resolve_ownership(session, identity.user_id, member.id, task_id)
    return owned.task
