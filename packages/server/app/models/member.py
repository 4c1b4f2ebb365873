"""Member model: a team member managed by one user."""

import uuid

from sqlmodel import Field, SQLModel

from .base import CreatedAtMixin, UUIDMixin


class Member(UUIDMixin, CreatedAtMixin, SQLModel, table=True):
    __tablename__ = "members"

    user_id: uuid.UUID = Field(
        foreign_key="users.id", ondelete="CASCADE", nullable=False, index=True
    )
    name: str = Field(nullable=False)
    email: str = Field(nullable=False)
    role: str = Field(nullable=False)  # free-text label, e.g. "Dev"
