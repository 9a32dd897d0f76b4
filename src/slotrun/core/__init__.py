"""
Core primitives shared by every slotrun layer: errors, hashing, logging,
settings and timestamps.
"""

from slotrun.core.errors import (
    CollisionExhaustedError,
    ConfigError,
    ConflictError,
    ErrorCategory,
    ErrorContext,
    InvalidIdentifiersError,
    InvalidSetNameError,
    InvalidSlugError,
    MissingParameterError,
    NotFoundError,
    SetNotFoundError,
    SlotNotFoundError,
    SlotrunError,
    StorageError,
    ValidationError,
)

__all__ = [
    "CollisionExhaustedError",
    "ConfigError",
    "ConflictError",
    "ErrorCategory",
    "ErrorContext",
    "InvalidIdentifiersError",
    "InvalidSetNameError",
    "InvalidSlugError",
    "MissingParameterError",
    "NotFoundError",
    "SetNotFoundError",
    "SlotNotFoundError",
    "SlotrunError",
    "StorageError",
    "ValidationError",
]
