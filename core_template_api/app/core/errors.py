"""
Error taxonomy shared by the storage and service layers.

Services raise these exceptions; the endpoint layer translates them
into HTTP responses.  Lower level ``sqlite3`` errors are not wrapped
and propagate unchanged.
"""

from typing import Dict, Optional


class ResourceError(Exception):
    """Base class for all errors raised by resource services."""

    error = "ResourceError"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_detail(self) -> Dict[str, str]:
        return {"error": self.error, "message": self.message}


class InvalidArgument(ResourceError):
    """The request itself is malformed (missing payload, bad paging)."""

    error = "InvalidArgument"


class ValidationFailed(ResourceError):
    """A well formed payload is missing or violates a field rule."""

    error = "ValidationFailed"

    def __init__(self, field: str, message: Optional[str] = None) -> None:
        super().__init__(message or f"{field} is invalid")
        self.field = field

    def to_detail(self) -> Dict[str, str]:
        detail = super().to_detail()
        detail["field"] = self.field
        return detail


class NotFound(ResourceError):
    error = "NotFound"


class Conflict(ResourceError):
    """Optimistic concurrency violation: the stored version moved on."""

    error = "Conflict"


class IdMismatch(ResourceError):
    """The id in the request body disagrees with the id in the path."""

    error = "IdMismatch"
