"""Common error classes shared by every layer.

Error Types:
- ValidationError: Malformed or missing input, weak or compromised password
- NotFoundError: Unknown user or missing one-time code
- ConflictError: Duplicate email, already verified account
- AuthenticationError: Bad credentials, invalid session
- AuthorizationError: Locked or unverified account
- UnknownError: Fallback for unexpected failures

Usage:
    from src.core.errors import ValidationError
    from src.core.enums import ErrorCode
    from src.core.result import Failure

    return Failure(
        error=ValidationError(
            code=ErrorCode.INVALID_EMAIL,
            message="Invalid email format",
            field="email",
        )
    )
"""

from dataclasses import dataclass

from src.core.errors.domain_error import DomainError


@dataclass(frozen=True, slots=True, kw_only=True)
class ValidationError(DomainError):
    """Input validation failure.

    Attributes:
        code: ErrorCode enum.
        message: Human-readable message.
        field: Field name that failed validation.
        errors: Every violated rule, in evaluation order.
        details: Additional context.
    """

    field: str | None = None
    errors: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True, kw_only=True)
class NotFoundError(DomainError):
    """Resource not found.

    Attributes:
        code: ErrorCode enum.
        message: Human-readable message.
        resource_type: Type of resource (User, VerificationCode, ...).
        resource_id: Identifier that was looked up.
        details: Additional context.
    """

    resource_type: str
    resource_id: str


@dataclass(frozen=True, slots=True, kw_only=True)
class ConflictError(DomainError):
    """Resource conflict (duplicate, state conflict).

    Attributes:
        code: ErrorCode enum.
        message: Human-readable message.
        resource_type: Type of resource in conflict.
        conflicting_field: Field that has conflict (email, verified, ...).
        details: Additional context.
    """

    resource_type: str
    conflicting_field: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class AuthenticationError(DomainError):
    """Authentication failure (invalid credentials, invalid session).

    Attributes:
        code: ErrorCode enum.
        message: Human-readable message.
        details: Additional context.
    """

    pass


@dataclass(frozen=True, slots=True, kw_only=True)
class AuthorizationError(DomainError):
    """Authorization failure (account locked or email unverified).

    Attributes:
        code: ErrorCode enum.
        message: Human-readable message.
        reason: Short machine-readable reason ("locked", "unverified").
        details: Additional context.
    """

    reason: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class UnknownError(DomainError):
    """Unexpected failure with no more specific classification."""

    pass
