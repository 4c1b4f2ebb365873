from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class TaskStatus(str, Enum):
    TODO = "todo"
    IN_PROGRESS = "in-progress"
    REVIEW = "review"
    COMPLETED = "completed"

class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"

# Display order for boards. Any status may move to any other status.
TASK_STATUS_ORDER: list["TaskStatus"] = [
    TaskStatus.TODO,
    TaskStatus.IN_PROGRESS,
    TaskStatus.REVIEW,
    TaskStatus.COMPLETED,
]

class Role(str, Enum):
    USER = "user"


def derive_completed_at(
    new_status: TaskStatus | str,
    previous_completed_at: Optional[datetime],
    now: Optional[datetime] = None,
) -> Optional[datetime]:
    """Return the completion timestamp implied by a task's new status.

    A completed task keeps an existing timestamp or gets stamped with ``now``.
    Every other status clears it, whether or not the status actually changed.
    """
    if TaskStatus(new_status) is TaskStatus.COMPLETED:
        if previous_completed_at is not None:
            return previous_completed_at
        return now or datetime.now(timezone.utc)
    return None


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes (SQLite drops the offset) as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


UTCDateTime = Annotated[datetime, AfterValidator(as_utc)]


class CamelModel(BaseModel):
    """Base for wire schemas: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ErrorResponse(BaseModel):
    error: object
