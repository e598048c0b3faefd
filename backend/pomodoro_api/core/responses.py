"""Response envelopes.

Success bodies are ``{"data": ...}``; failures are
``{"error": {"code", "message", "details"}}``.
"""

from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class DataResponse(BaseModel, Generic[T]):
    """Success envelope.

    ``data`` may be null, e.g. GET /user/timer/today before a session was
    started.
    """

    data: T


class ErrorDetail(BaseModel):
    """Body of the error envelope.

    Attributes:
        code: Stable machine-readable code, e.g. "NOT_FOUND".
        message: Text for humans.
        details: Field-level problems for validation failures.
    """

    code: str
    message: str
    details: list[dict] | None = None


class ErrorResponse(BaseModel):
    """Failure envelope rendered by the exception handlers."""

    error: ErrorDetail
