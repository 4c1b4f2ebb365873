from typing import List

from pydantic import UUID4, ConfigDict, EmailStr, Field

from .common import CamelModel, UTCDateTime


class MemberCreate(CamelModel):
    name: str = Field(min_length=1, max_length=200)
    email: EmailStr
    role: str = Field(min_length=1, max_length=100)


class MemberRead(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID4
    name: str
    email: str
    role: str
    user_id: UUID4
    created_at: UTCDateTime


class MemberListResponse(CamelModel):
    members: List[MemberRead]
