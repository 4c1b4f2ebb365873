"""Task model."""

from datetime import datetime
from typing import Optional
import uuid

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from .base import TimestampMixin, UUIDMixin


class Task(UUIDMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "tasks"
    __table_args__ = (
        sa.CheckConstraint(
            "status IN ('todo', 'in-progress', 'review', 'completed')", name="ck_tasks_status"
        ),
        sa.CheckConstraint(
            "priority IN ('low', 'medium', 'high', 'urgent')", name="ck_tasks_priority"
        ),
        # Database backstop for the status / completed_at invariant.
        sa.CheckConstraint(
            "(status = 'completed') = (completed_at IS NOT NULL)", name="ck_tasks_completed_at"
        ),
    )

    member_id: uuid.UUID = Field(
        foreign_key="members.id", ondelete="CASCADE", nullable=False, index=True
    )
    title: str = Field(nullable=False)
    description: str = Field(nullable=False, default="")
    status: str = Field(nullable=False, default="todo", index=True)  # todo | in-progress | review | completed
    priority: str = Field(nullable=False, default="medium")  # low | medium | high | urgent
    due_date: datetime = Field(nullable=False, sa_type=sa.DateTime(timezone=True))
    completed_at: Optional[datetime] = Field(default=None, sa_type=sa.DateTime(timezone=True))
