# SQLModel definitions, imported here so the metadata is populated for Alembic.
from .base import UUIDMixin, CreatedAtMixin, TimestampMixin  # noqa: F401
from .user import User  # noqa: F401
from .member import Member  # noqa: F401
from .task import Task  # noqa: F401
