"""Audit trail error types.

Audit failures are reported as values so callers can log them, but the
audit adapter never lets one escape into the request flow.

Usage:
    from src.domain.errors import AuditError
    from src.core.enums import ErrorCode
    from src.core.result import Failure

    return Failure(
        error=AuditError(
            code=ErrorCode.AUDIT_RECORD_FAILED,
            message="Failed to record audit entry: database connection lost",
        )
    )
"""

from dataclasses import dataclass

from src.core.errors import DomainError


@dataclass(frozen=True, slots=True, kw_only=True)
class AuditError(DomainError):
    """Audit system failure.

    Attributes:
        code: ErrorCode.AUDIT_RECORD_FAILED.
        message: Human-readable message.
        details: Additional context.
    """

    pass
