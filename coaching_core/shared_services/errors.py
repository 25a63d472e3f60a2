"""
Platform Error Taxonomy

Domain exceptions raised by the services and translated into HTTP
responses by the API gateway.
"""

from typing import Any, Optional

from fastapi import status


class PlatformError(Exception):
    """Base class for errors that carry their own response category."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    category: str = "internal"

    def __init__(self, message: str, **context: Any):
        super().__init__(message)
        self.message = message
        self.context = context

    def to_response(self) -> dict[str, Any]:
        """Render the error as a JSON response body."""
        return {"error": self.message, "category": self.category}


class NotFoundError(PlatformError):
    """Institute, batch or user does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    category = "not_found"


class UnauthorizedError(PlatformError):
    """Credentials did not match."""

    status_code = status.HTTP_401_UNAUTHORIZED
    category = "unauthorized"


class InvalidInputError(PlatformError):
    """Malformed content type or missing required field."""

    status_code = status.HTTP_400_BAD_REQUEST
    category = "invalid_input"


class ConflictError(PlatformError):
    """Unique key already taken, or a write lost a race."""

    status_code = status.HTTP_409_CONFLICT
    category = "conflict"


class StaleBatchError(ConflictError):
    """
    Batch revision changed between load and save.

    Raised by the batch repository when a conditional replace matches no
    document; the load-merge-save sequence is retried on this error.
    """

    def __init__(self, batch_id: str, expected_revision: Optional[int] = None):
        super().__init__(
            f"Batch '{batch_id}' was modified concurrently",
            batch_id=batch_id,
            expected_revision=expected_revision,
        )
        self.batch_id = batch_id
        self.expected_revision = expected_revision


class InternalError(PlatformError):
    """Unclassified persistence failure."""
