"""Account schemas: signup, login, and the public user profile."""

from __future__ import annotations

from typing import Optional

from pydantic import UUID4, ConfigDict, EmailStr, Field, field_validator

from .common import CamelModel, UTCDateTime

MIN_PASSWORD_LENGTH = 6
# bcrypt only looks at the first 72 bytes and newer releases refuse longer input.
MAX_PASSWORD_BYTES = 72


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class SignupRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=MIN_PASSWORD_LENGTH)
    name: str = Field(min_length=1, max_length=200)
    country: str = Field(min_length=1, max_length=100)
    grade: Optional[str] = Field(default=None, max_length=50)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
        return value


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class UserRead(CamelModel):
    """Public view of a user. Never carries the password hash."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID4
    email: str
    name: str
    country: str
    grade: Optional[str] = None
    role: str
    created_at: UTCDateTime


class AuthResponse(CamelModel):
    user: UserRead
    token: str


class MeResponse(CamelModel):
    user: UserRead
