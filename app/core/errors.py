"""Domain errors raised by the service layer.

Each error knows the HTTP status it maps to; ``app.main`` turns any
``AppError`` into the ``{"success": false, ...}`` envelope.
"""

from typing import Any


class AppError(Exception):
    status_code = 500
    message = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ValidationError(AppError):
    """Input is missing, malformed or contradictory."""

    status_code = 400
    message = "Validation failed"

    def __init__(
        self, message: str | None = None, errors: list[dict[str, Any]] | None = None
    ) -> None:
        super().__init__(message)
        self.errors = errors or []


class NotFoundError(AppError):
    status_code = 404
    message = "Project not found"


class TransitionError(AppError):
    """Requested status is not reachable from the current one."""

    status_code = 400

    def __init__(self, current: str, requested: str, allowed: list[str]) -> None:
        self.current = current
        self.requested = requested
        self.allowed = allowed
        targets = ", ".join(allowed) if allowed else "none (terminal state)"
        super().__init__(
            f"Cannot transition from '{current}' to '{requested}'. "
            f"Allowed transitions: {targets}"
        )


class MalformedRequestError(AppError):
    status_code = 400
    message = "Invalid JSON in request body"


class InternalError(AppError):
    status_code = 500
    message = "Internal server error"
