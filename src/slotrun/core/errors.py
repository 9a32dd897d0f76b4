"""
Structured error types for slotrun.

Provides a small hierarchy of typed errors carrying a machine-readable code,
an error category, structured context and an optional chained cause.  Every
fault the runtime raises on purpose is a :class:`SlotrunError`; the ops layer
turns them into failure envelopes and the transports map the ``code`` to an
HTTP status or a CLI exit.

Manifesto:
    - **Typed hierarchy:** One class per failure the caller can act on
    - **Machine-readable codes:** ``SET_NOT_FOUND`` and ``INVALID_IDS`` are
      distinct so clients can tell them apart without parsing messages
    - **Rich context:** Errors carry the set, slot, slug or path involved
    - **Error chaining:** The original ``OSError`` survives as ``cause``

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────────┐
        │                        SlotrunError                              │
        │              (code, category, context, cause)                    │
        ├─────────────────────────────────────────────────────────────────┤
        │                                                                  │
        │  ValidationError        NotFoundError        ConflictError       │
        │  (VALIDATION)           (NOT_FOUND)          (CONFLICT)          │
        │       │                      │                                   │
        │  InvalidSlugError       SetNotFoundError     StorageError        │
        │  InvalidSetNameError    SlotNotFoundError    (STORAGE)           │
        │  InvalidIdentifiersError                                         │
        │  MissingParameterError  ConfigError          CollisionExhausted  │
        │                         (CONFIG)             (RESOURCE)          │
        └─────────────────────────────────────────────────────────────────┘

Examples:
    >>> error = SetNotFoundError("Instruction set 'x.txt' not found")
    >>> error.code
    'SET_NOT_FOUND'
    >>> error.with_context(set_name="x.txt").to_dict()["context"]
    {'set_name': 'x.txt'}

Tags:
    error-handling, exception-hierarchy, error-context, slotrun
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and routing.

    Attributes:
        VALIDATION: Malformed input rejected before any side effect
        NOT_FOUND: Unknown instruction set, slot or artifact
        CONFLICT: Resource already exists
        EXECUTION: A fragment raised while running
        STORAGE: Filesystem permission/space errors (environment faults)
        RESOURCE: A bounded search ran out of attempts
        CONFIG: Missing or invalid settings
        INTERNAL: Bugs, unexpected state
    """

    VALIDATION = "VALIDATION"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    EXECUTION = "EXECUTION"
    STORAGE = "STORAGE"
    RESOURCE = "RESOURCE"
    CONFIG = "CONFIG"
    INTERNAL = "INTERNAL"


@dataclass
class ErrorContext:
    """Structured metadata attached to an error.

    Only fields that are set end up in :meth:`to_dict`; anything without a
    dedicated field goes into ``metadata``.
    """

    set_name: str | None = None
    slot_id: int | None = None
    slug: str | None = None
    path: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["set_name", "slot_id", "slug", "path"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class SlotrunError(Exception):
    """
    Base exception for all slotrun errors.

    Subclasses set ``code`` and ``default_category``; callers normally only
    pass a message, optionally a context and the underlying cause.

    Attributes:
        message: Human-readable description
        code: Machine-readable reason (``SET_NOT_FOUND``, ``INVALID_SLUG`` ...)
        category: :class:`ErrorCategory` for routing
        context: :class:`ErrorContext` with the resources involved
        cause: Chained underlying exception, if any
    """

    code: str = "INTERNAL"
    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> SlotrunError:
        """
        Add context to this error (fluent API).

        Usage:
            raise StorageError("write failed").with_context(path=str(path))
        """
        for key, value in kwargs.items():
            if key != "metadata" and hasattr(self.context, key):
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, code={self.code})"


# =============================================================================
# INPUT VALIDATION
# =============================================================================


class ValidationError(SlotrunError):
    """Input rejected before any side effect."""

    code = "VALIDATION_FAILED"
    default_category = ErrorCategory.VALIDATION


class InvalidSlugError(ValidationError):
    """Slug sanitised to nothing or contains a parent-directory token."""

    code = "INVALID_SLUG"


class InvalidSetNameError(ValidationError):
    """Instruction set name is empty or tries to leave the sets directory."""

    code = "INVALID_SET_NAME"


class InvalidIdentifiersError(ValidationError):
    """Identifier expression resolved to no usable ids."""

    code = "INVALID_IDS"


class MissingParameterError(ValidationError):
    """A required request field was not supplied."""

    code = "MISSING_PARAMETER"


# =============================================================================
# NOT FOUND / CONFLICT
# =============================================================================


class NotFoundError(SlotrunError):
    """Requested resource does not exist."""

    code = "NOT_FOUND"
    default_category = ErrorCategory.NOT_FOUND


class SetNotFoundError(NotFoundError):
    """Unknown instruction set. Fatal for a whole batch."""

    code = "SET_NOT_FOUND"


class SlotNotFoundError(NotFoundError):
    """Unknown slot id within a known set. Local to one result in a batch."""

    code = "SLOT_NOT_FOUND"


class ConflictError(SlotrunError):
    """Resource already exists."""

    code = "CONFLICT"
    default_category = ErrorCategory.CONFLICT


# =============================================================================
# ENVIRONMENT / RESOURCES
# =============================================================================


class StorageError(SlotrunError):
    """Filesystem failure while creating directories or writing content."""

    code = "STORAGE_ERROR"
    default_category = ErrorCategory.STORAGE


class CollisionExhaustedError(SlotrunError):
    """Ingestion could not find a free destination within the retry ceiling."""

    code = "COLLISION_EXHAUSTED"
    default_category = ErrorCategory.RESOURCE


class ConfigError(SlotrunError):
    """Missing or invalid configuration."""

    code = "CONFIG_ERROR"
    default_category = ErrorCategory.CONFIG


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "SlotrunError",
    "ValidationError",
    "InvalidSlugError",
    "InvalidSetNameError",
    "InvalidIdentifiersError",
    "MissingParameterError",
    "NotFoundError",
    "SetNotFoundError",
    "SlotNotFoundError",
    "ConflictError",
    "StorageError",
    "CollisionExhaustedError",
    "ConfigError",
]
