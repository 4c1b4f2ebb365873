"""Task-related Pydantic schemas for shared use across server and client."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Annotated, Any, List, Optional

from dateutil.parser import isoparse
from pydantic import UUID4, BeforeValidator, ConfigDict, Field

from .common import CamelModel, TaskPriority, TaskStatus, UTCDateTime


def parse_due_date(value: Any) -> datetime:
    """Coerce an ISO-8601 date or date-time into an aware datetime.

    Raises ValueError for anything that is not a real calendar date.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        try:
            parsed = isoparse(value.strip())
        except (ValueError, OverflowError):
            raise ValueError("Invalid dueDate")
    else:
        raise ValueError("Invalid dueDate")
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(timezone.utc)
    except OverflowError:
        raise ValueError("Invalid dueDate")


DueDate = Annotated[datetime, BeforeValidator(parse_due_date)]


# ---------------------------------------------------------------------------
# Task CRUD
# ---------------------------------------------------------------------------

class TaskCreate(CamelModel):
    title: str = Field(min_length=1, max_length=300)
    description: str = ""
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: DueDate


class TaskUpdate(CamelModel):
    """Partial update. Absent and null fields are both left untouched."""

    title: Optional[str] = Field(default=None, min_length=1, max_length=300)
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    due_date: Optional[DueDate] = None

    def changes(self) -> dict[str, Any]:
        """Fields to apply, keyed by attribute name."""
        data = self.model_dump(exclude_unset=True)
        return {key: value for key, value in data.items() if value is not None}


class TaskRead(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID4
    member_id: UUID4
    title: str
    description: str
    status: TaskStatus
    priority: TaskPriority
    due_date: UTCDateTime
    completed_at: Optional[UTCDateTime] = None
    created_at: UTCDateTime
    updated_at: UTCDateTime


class TaskListResponse(CamelModel):
    tasks: List[TaskRead]


class DeleteResponse(CamelModel):
    success: bool = True
