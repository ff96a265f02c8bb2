"""Durable store error types.

Repositories retry transient faults internally. Only after the retry
budget is spent does a fault surface, as ``StoreUnavailableError``
carrying a ``TransientStoreError``. Duplicate-key violations surface
immediately as ``StoreConflictError``.

Both are exceptions because they cross every layer unchanged; the
presentation layer turns them into problem-details responses.
"""

from dataclasses import dataclass

from src.core.errors import DomainError


@dataclass(frozen=True, slots=True, kw_only=True)
class TransientStoreError(DomainError):
    """Retryable store fault that outlived its retry budget.

    Attributes:
        code: ErrorCode.TRANSIENT_STORE_ERROR.
        message: Human-readable message.
        attempts: Attempts made before giving up.
        details: Additional context (operation name).
    """

    attempts: int = 0


class StoreUnavailableError(Exception):
    """Raised when a store operation keeps failing transiently."""

    def __init__(self, error: TransientStoreError) -> None:
        super().__init__(str(error))
        self.error = error


class StoreConflictError(Exception):
    """Raised when a write violates a uniqueness constraint."""

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field
