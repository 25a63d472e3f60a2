"""
Shared Services Module

Common services used across the platform: database access, error taxonomy and logging.
"""

from .database import get_platform_db
from .errors import (
    ConflictError,
    InternalError,
    InvalidInputError,
    NotFoundError,
    PlatformError,
    StaleBatchError,
    UnauthorizedError,
)

__all__ = [
    "get_platform_db",
    "PlatformError",
    "NotFoundError",
    "UnauthorizedError",
    "InvalidInputError",
    "ConflictError",
    "StaleBatchError",
    "InternalError",
]
