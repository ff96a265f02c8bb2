"""PostgreSQL implementation of AuditProtocol.

Best-effort, append-only security event log:
- Each entry gets a UUIDv7 event id, a UTC timestamp and a retention
  marker (``ttl``, epoch seconds) of timestamp + retention
- Writes are committed immediately on the adapter's own session
- Every failure is logged and returned as Failure(AuditError); nothing
  is raised to the caller

Usage:
    adapter = PostgresAuditAdapter(session, retention=timedelta(days=90))

    result = await adapter.record(
        event_type=AuditEventType.LOGIN_ATTEMPT,
        email="user@example.com",
        ip_address="192.168.1.1",
        success=False,
        metadata={"reason": "invalid_credentials"},
    )
"""

from datetime import UTC, datetime, timedelta
from typing import Any, cast
from uuid import UUID

from sqlalchemy import delete
from sqlalchemy.engine import CursorResult
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.enums import ErrorCode
from src.core.result import Failure, Result, Success
from src.domain.entities.audit_log_entry import AuditLogEntry
from src.domain.enums import AuditEventType
from src.domain.errors import AuditError
from src.domain.protocols.logger_protocol import LoggerProtocol
from src.infrastructure.persistence.models.audit_log import AuditLogModel


class PostgresAuditAdapter:
    """PostgreSQL implementation of AuditProtocol.

    Attributes:
        session: SQLAlchemy async session dedicated to audit writes.

    Thread Safety:
        Not thread-safe (uses the provided session). The container
        creates one per request.
    """

    def __init__(
        self,
        session: AsyncSession,
        *,
        retention: timedelta = timedelta(days=90),
        logger: LoggerProtocol | None = None,
    ) -> None:
        self.session = session
        self._retention = retention
        self._logger = logger

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
        """Append one audit entry.

        Returns:
            Result[None, AuditError]:
                - Success(None) if the entry was committed
                - Failure(AuditError) if anything went wrong (also logged)
        """
        entry = AuditLogEntry.create(
            event_type=event_type,
            retention=self._retention,
            ip_address=ip_address,
            user_id=user_id,
            email=email,
            success=success,
            metadata=metadata,
        )
        try:
            self.session.add(
                AuditLogModel(
                    id=entry.event_id,
                    created_at=entry.timestamp,
                    event_type=entry.event_type.value,
                    user_id=entry.user_id,
                    email=entry.email,
                    ip_address=entry.ip_address,
                    success=entry.success,
                    metadata_=entry.metadata or None,
                    ttl=entry.ttl,
                )
            )
            await self.session.commit()
            return Success(value=None)

        except SQLAlchemyError as e:
            await self.session.rollback()
            return self._failure(entry, e)

        except Exception as e:
            # Audit must never break the request being audited
            return self._failure(entry, e)

    async def purge_expired(self, now: datetime | None = None) -> int:
        """Delete entries whose retention marker has passed.

        Returns:
            Number of entries removed.
        """
        cutoff = int((now or datetime.now(UTC)).timestamp())
        result = cast(
            CursorResult[object],
            await self.session.execute(
                delete(AuditLogModel).where(AuditLogModel.ttl < cutoff)
            ),
        )
        await self.session.commit()
        return result.rowcount

    def _failure(self, entry: AuditLogEntry, exc: Exception) -> Failure[AuditError]:
        if self._logger is not None:
            self._logger.warning(
                "Audit write failed",
                event_type=entry.event_type.value,
                event_id=str(entry.event_id),
                error_type=type(exc).__name__,
            )
        return Failure(
            error=AuditError(
                code=ErrorCode.AUDIT_RECORD_FAILED,
                message=f"Failed to record audit log: {exc}",
                details={
                    "event_type": entry.event_type.value,
                    "error_type": type(exc).__name__,
                },
            )
        )
