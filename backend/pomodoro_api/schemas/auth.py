"""Request and response models for authentication and user profiles."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

# Password bounds shared by register, login and profile update
PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_LENGTH = 128


class AuthRequest(BaseModel):
    """Request body for POST /auth/login and POST /auth/register."""

    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    password: str = Field(min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH)


class UserRead(BaseModel):
    """User as returned to clients. Never carries the password hash."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    email: str
    name: str | None = None
    work_interval: int
    break_interval: int
    intervals_count: int
    created_at: datetime
    updated_at: datetime


class AuthResult(BaseModel):
    """Sanitized user plus a freshly issued token pair."""

    user: UserRead
    access_token: str
    refresh_token: str


class UserUpdate(BaseModel):
    """Request body for PUT /user/profile. Omitted fields stay unchanged."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(None, max_length=255)
    password: str | None = Field(
        None, min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH
    )
    work_interval: int | None = Field(None, ge=1, le=180)
    break_interval: int | None = Field(None, ge=1, le=60)
    intervals_count: int | None = Field(None, ge=1, le=12)
