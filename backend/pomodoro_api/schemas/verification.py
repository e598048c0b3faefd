"""Request and response models for email verification."""

from pydantic import BaseModel, ConfigDict, Field


class VerifyRequest(BaseModel):
    """Request body for POST /auth/verification/verify."""

    model_config = ConfigDict(extra="forbid")

    secret: str = Field(min_length=1, max_length=255)


class VerificationResult(BaseModel):
    """Outcome of a verification attempt."""

    verified: bool
