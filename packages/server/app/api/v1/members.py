"""
Member endpoints: list and create the caller's members.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import TokenIdentity, get_current_identity
from app.core.database import get_session
from app.models.member import Member
from app.services.members import create_member, list_members
from app.services.ownership import get_owned_member
from taskboard_shared.schemas.members import MemberCreate, MemberListResponse, MemberRead

router = APIRouter()


@router.get("", response_model=MemberListResponse)
async def list_members_endpoint(
    identity: TokenIdentity = Depends(get_current_identity),
    session: AsyncSession = Depends(get_session),
):
    """List the members owned by the caller."""
    members = await list_members(session, identity.user_id)
    return MemberListResponse(members=[MemberRead.model_validate(m) for m in members])


@router.post("", response_model=MemberRead, status_code=201)
async def create_member_endpoint(
    member_in: MemberCreate,
    identity: TokenIdentity = Depends(get_current_identity),
    session: AsyncSession = Depends(get_session),
):
    """Create a member owned by the caller."""
    member = await create_member(session, identity.user_id, member_in)
    await session.commit()
    return MemberRead.model_validate(member)


@router.get("/{memberId}", response_model=MemberRead)
async def get_member_endpoint(member: Member = Depends(get_owned_member)):
    """Get a single member owned by the caller."""
    return MemberRead.model_validate(member)
