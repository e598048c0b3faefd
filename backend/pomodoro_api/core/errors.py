"""API error classes.

Services raise these; the exception handlers in main render them as the
error envelope with the matching status code.
"""


class APIError(Exception):
    """Base class for errors rendered as an error envelope.

    Attributes:
        code: Stable machine-readable code, e.g. "NOT_FOUND".
        message: Text shown to the client.
        status_code: HTTP status of the response.
        details: Optional per-field details.
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: list[dict] | None = None,
    ) -> None:
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(message)


class ValidationError(APIError):
    """Request body or path failed schema validation (400)."""

    def __init__(
        self,
        message: str = "Request validation failed",
        details: list[dict] | None = None,
    ) -> None:
        super().__init__(
            code="VALIDATION_ERROR",
            message=message,
            status_code=400,
            details=details,
        )


class BadRequestError(APIError):
    """Well-formed request refused by a precondition (400).

    Registering an email that already has an account is the main case.
    """

    def __init__(self, message: str) -> None:
        super().__init__(
            code="BAD_REQUEST",
            message=message,
            status_code=400,
        )


class UnauthorizedError(APIError):
    """Missing or invalid credentials (401).

    Covers a wrong password, a bad bearer token and a bad refresh cookie.
    """

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(
            code="UNAUTHORIZED",
            message=message,
            status_code=401,
        )


class NotFoundError(APIError):
    """Resource not found (404).

    Also raised for rows owned by another user, so callers cannot probe
    for other users' ids.
    """

    def __init__(self, resource: str, resource_id: str | None = None) -> None:
        if resource_id:
            message = f"{resource} with id '{resource_id}' not found"
        else:
            message = f"{resource} not found"
        super().__init__(
            code="NOT_FOUND",
            message=message,
            status_code=404,
        )


class InvalidStateError(APIError):
    """Action not allowed in the current state (422).

    Raised when a user who is already verified verifies or requests a new
    secret again.
    """

    def __init__(self, message: str) -> None:
        super().__init__(
            code="INVALID_STATE_TRANSITION",
            message=message,
            status_code=422,
        )


class InternalError(APIError):
    """Unhandled failure (500). The message never carries internals."""

    def __init__(self, message: str = "An unexpected error occurred") -> None:
        super().__init__(
            code="INTERNAL_ERROR",
            message=message,
            status_code=500,
        )
