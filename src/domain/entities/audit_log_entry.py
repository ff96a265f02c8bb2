"""AuditLogEntry domain entity.

Immutable security event. Entries are append-only; the only removal is
automatic expiry once ``ttl`` (epoch seconds) has passed.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID

from uuid_extensions import uuid7

from src.domain.enums.audit_event_type import AuditEventType


@dataclass(frozen=True, slots=True, kw_only=True)
class AuditLogEntry:
    """Security audit event.

    Attributes:
        event_id: Unique, time-ordered identifier.
        timestamp: When the event happened (UTC).
        event_type: Event category.
        user_id: Subject user, when known.
        email: Subject email, when known.
        ip_address: Client IP.
        success: Outcome, when the event has one.
        metadata: Event-specific context.
        ttl: Retention marker in epoch seconds (timestamp + retention).
    """

    event_id: UUID
    timestamp: datetime
    event_type: AuditEventType
    ttl: int
    ip_address: str | None = None
    user_id: UUID | None = None
    email: str | None = None
    success: bool | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def create(
        cls,
        *,
        event_type: AuditEventType,
        retention: timedelta,
        ip_address: str | None = None,
        user_id: UUID | None = None,
        email: str | None = None,
        success: bool | None = None,
        metadata: dict[str, Any] | None = None,
        now: datetime | None = None,
    ) -> "AuditLogEntry":
        """Build an entry stamped with a fresh id, timestamp and ttl.

        Example:
            >>> entry = AuditLogEntry.create(
            ...     event_type=AuditEventType.LOGIN_ATTEMPT,
            ...     retention=timedelta(days=90),
            ...     email="user@example.com",
            ...     success=False,
            ... )
            >>> entry.ttl - int(entry.timestamp.timestamp()) == 90 * 86400
            True
        """
        timestamp = now or datetime.now(UTC)
        return cls(
            event_id=uuid7(),
            timestamp=timestamp,
            event_type=event_type,
            ttl=retention_marker(timestamp, retention),
            ip_address=ip_address,
            user_id=user_id,
            email=email,
            success=success,
            metadata=dict(metadata or {}),
        )


def retention_marker(timestamp: datetime, retention: timedelta) -> int:
    """Expiry time in epoch seconds, truncated toward zero."""
    return int((timestamp + retention).timestamp())
