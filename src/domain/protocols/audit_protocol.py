"""Audit trail protocol (port) for security events.

Audit logging is best-effort: implementations catch every failure, log
it, and report it as a Failure value. Callers may ignore the result;
an audit outage never aborts the request being audited.

Usage:
    from src.domain.enums import AuditEventType

    await audit.record(
        event_type=AuditEventType.ACCOUNT_LOCKOUT,
        user_id=account.id,
        email=account.email,
        ip_address=ip_address,
        success=False,
        metadata={"failed_attempts": 5},
    )
"""

from typing import Any, Protocol
from uuid import UUID

from src.core.result import Result
from src.domain.enums import AuditEventType
from src.domain.errors import AuditError


class AuditProtocol(Protocol):
    """Append-only security event log.

    Implementations:
        - PostgresAuditAdapter: SQLAlchemy, ttl column for retention
    """

    async def record(
        self,
        *,
        event_type: AuditEventType,
        ip_address: str | None = None,
        user_id: UUID | None = None,
        email: str | None = None,
        success: bool | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> Result[None, AuditError]:
        """Append one event stamped with id, timestamp and retention marker.

        Returns:
            Success(None) when stored, Failure(AuditError) otherwise.
            Never raises.
        """
        ...
