"""Periodic purge of expired sessions and audit entries.

PostgreSQL has no row TTL, so expiry of ``sessions.expires_at`` and
``audit_logs.ttl`` is enforced here. Each sweep opens its own sessions
on the shared Database; a failed sweep is logged and the next tick
tries again.

Usage:
    sweeper = RetentionSweeper(database, interval=timedelta(hours=1), logger=logger)
    task = asyncio.create_task(sweeper.run())
    ...
    task.cancel()
"""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from sqlalchemy.exc import SQLAlchemyError

from src.domain.errors import StoreUnavailableError
from src.domain.protocols.logger_protocol import LoggerProtocol
from src.infrastructure.audit.postgres_adapter import PostgresAuditAdapter
from src.infrastructure.persistence.database import Database
from src.infrastructure.persistence.repositories import SessionRepository
from src.infrastructure.persistence.retry import StoreRetrier


@dataclass(frozen=True, kw_only=True)
class SweepReport:
    """Rows removed by one sweep."""

    sessions_removed: int
    audit_entries_removed: int


class RetentionSweeper:
    """Deletes expired rows on a fixed interval.

    Attributes:
        interval: Delay between the end of one sweep and the next.
    """

    def __init__(
        self,
        database: Database,
        *,
        interval: timedelta,
        logger: LoggerProtocol,
        retrier: StoreRetrier | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._database = database
        self.interval = interval
        self._logger = logger
        self._retrier = retrier
        self._sleep = sleep

    async def sweep(self, now: datetime | None = None) -> SweepReport:
        """Run one purge of both tables.

        Raises:
            StoreUnavailableError: Session purge outlived the retry budget.
            SQLAlchemyError: Audit purge failed.
        """
        now = now or datetime.now(UTC)

        async with self._database.get_session() as session:
            sessions_removed = await SessionRepository(
                session, self._retrier
            ).delete_expired(now)

        async with self._database.get_session() as session:
            audit_removed = await PostgresAuditAdapter(session).purge_expired(now)

        report = SweepReport(
            sessions_removed=sessions_removed, audit_entries_removed=audit_removed
        )
        self._logger.info(
            "Retention sweep completed",
            sessions_removed=report.sessions_removed,
            audit_entries_removed=report.audit_entries_removed,
        )
        return report

    async def run(self) -> None:
        """Sweep forever; stops when the task is cancelled."""
        while True:
            try:
                await self.sweep()
            except (StoreUnavailableError, SQLAlchemyError) as e:
                self._logger.error("Retention sweep failed", error=e)
            await self._sleep(self.interval.total_seconds())
