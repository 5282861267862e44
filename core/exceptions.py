"""Exception hierarchy shared by the store, record operations and API layers."""

from datetime import datetime
from typing import Any

from core.utils.datetime import now, to_iso


class TalentFlowError(Exception):
    """Base application exception.

    Carries the HTTP-like status the mock API answers with and the moment the
    failure was raised.
    """

    status_code: int = 500
    default_message: str = "An unexpected error occurred"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        self.timestamp: datetime = now()
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Error body in the `{error, timestamp}` wire shape."""
        return {"error": self.message, "timestamp": to_iso(self.timestamp)}


class NotFoundError(TalentFlowError):
    """Raised when a requested record does not exist."""

    status_code = 404
    default_message = "Not found"


class SimulatedTransientFailure(TalentFlowError):
    """Injected by the simulated network in place of a real transient fault."""

    status_code = 500
    default_message = "Simulated API failure"


class StorageFailure(TalentFlowError):
    """Raised when the underlying database fails for the current operation."""

    status_code = 500
    default_message = "Storage unavailable"


class InvalidQueryError(TalentFlowError):
    """Raised for listing parameters outside their allowed range."""

    status_code = 400
    default_message = "Invalid query parameters"


__all__ = [
    "InvalidQueryError",
    "NotFoundError",
    "SimulatedTransientFailure",
    "StorageFailure",
    "TalentFlowError",
]
