"""Rate limit error types.

Two distinct failures live here:

- RateLimitExceededError: the caller is over quota. Carries the retry
  delay the presentation layer turns into a ``Retry-After`` header.
- RateLimitError: the counter store itself failed. The limiter fails
  open on these, they are logged and never block a request.

Usage:
    from src.domain.errors import RateLimitExceededError
    from src.core.enums import ErrorCode
    from src.core.result import Failure

    return Failure(
        error=RateLimitExceededError(
            code=ErrorCode.RATE_LIMIT_EXCEEDED,
            message="Too many requests",
            retry_after=42,
        )
    )
"""

from dataclasses import dataclass

from src.core.errors import DomainError


@dataclass(frozen=True, slots=True, kw_only=True)
class RateLimitExceededError(DomainError):
    """Request quota exhausted for the current window.

    Attributes:
        code: ErrorCode.RATE_LIMIT_EXCEEDED.
        message: Human-readable message.
        retry_after: Whole seconds until the window resets (always >= 1).
        details: Additional context (limit key, limit).
    """

    retry_after: int


@dataclass(frozen=True, slots=True, kw_only=True)
class RateLimitError(DomainError):
    """Rate limit store failure (Redis unreachable, reset failed).

    A denied request is NOT this error; denial is a successful check
    that returns ``allowed=False``.
    """

    pass
