"""Request and response models for timer sessions and rounds."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class RoundRead(BaseModel):
    """A round inside a timer session."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    position: int
    total_seconds: int
    is_completed: bool
    created_at: datetime
    updated_at: datetime


class SessionRead(BaseModel):
    """A timer session with its rounds in order."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    is_completed: bool
    created_at: datetime
    updated_at: datetime
    rounds: list[RoundRead]


class SessionUpdate(BaseModel):
    """Request body for PUT /user/timer/{id}."""

    model_config = ConfigDict(extra="forbid")

    is_completed: bool


class RoundUpdate(BaseModel):
    """Request body for PUT /user/timer/round/{id}. Omitted fields stay unchanged."""

    model_config = ConfigDict(extra="forbid")

    total_seconds: int | None = Field(None, ge=0, le=24 * 60 * 60)
    is_completed: bool | None = None
