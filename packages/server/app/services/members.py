"""
Member directory: members are always scoped to the user who created them.
"""

from __future__ import annotations

import uuid
from typing import Sequence

import structlog
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.models.member import Member
from taskboard_shared.schemas.members import MemberCreate

log = structlog.get_logger()


async def list_members(session: AsyncSession, user_id: uuid.UUID) -> Sequence[Member]:
    """Exactly the members owned by ``user_id``, oldest first."""
    result = await session.execute(
        select(Member)
        .where(Member.user_id == user_id)
        .order_by(Member.created_at, Member.id)
    )
    return result.scalars().all()


async def create_member(
    session: AsyncSession,
    user_id: uuid.UUID,
    member_in: MemberCreate,
) -> Member:
    member = Member(
        user_id=user_id,
        name=member_in.name,
        email=member_in.email,
        role=member_in.role,
    )
    session.add(member)
    await session.flush()
    log.info("member.created", member_id=str(member.id), user_id=str(user_id))
    return member
