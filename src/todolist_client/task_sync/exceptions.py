"""Custom exceptions for task synchronization functionality."""

from .models import ErrorInfo


class TaskSyncError(Exception):
    """Base exception for task synchronization errors.

    Every error carries a human-readable ``message`` and optional ``details``
    so the presentation layer can render it without inspecting the type.
    """

    def __init__(self, message: str, details: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_info(self) -> ErrorInfo:
        """Return the structured ``{message, details}`` pair."""
        return ErrorInfo(message=self.message, details=self.details)


class PreconditionError(TaskSyncError):
    """Exception raised when required input is missing before any network call."""

    pass


class ValidationError(PreconditionError):
    """Exception raised when a task draft fails client-side validation."""

    pass


class RequestError(TaskSyncError):
    """Exception raised for non-success responses from the backend."""

    def __init__(
        self, message: str, details: str | None = None, status_code: int | None = None
    ) -> None:
        super().__init__(message, details)
        self.status_code = status_code


class TransportError(TaskSyncError):
    """Exception raised when the backend could not be reached at all."""

    pass
