"""Unit tests for RetentionSweeper.

Tests cover:
- One sweep purges sessions then audit entries with the same cutoff
- Failed sweeps are logged and the loop keeps going
- Loop sleeps the configured interval between sweeps
"""

import asyncio
from contextlib import asynccontextmanager
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, Mock, patch

import pytest
from sqlalchemy.exc import OperationalError

from src.core.enums import ErrorCode
from src.domain.errors import StoreUnavailableError, TransientStoreError
from src.infrastructure.jobs import RetentionSweeper, SweepReport

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)
MODULE = "src.infrastructure.jobs.retention_sweeper"


@pytest.fixture
def database():
    db = Mock()
    db.sessions = []

    @asynccontextmanager
    async def get_session():
        session = Mock()
        db.sessions.append(session)
        yield session

    db.get_session = get_session
    return db


@pytest.fixture
def session_repo_cls():
    with patch(f"{MODULE}.SessionRepository") as cls:
        cls.return_value.delete_expired = AsyncMock(return_value=3)
        yield cls


@pytest.fixture
def audit_cls():
    with patch(f"{MODULE}.PostgresAuditAdapter") as cls:
        cls.return_value.purge_expired = AsyncMock(return_value=7)
        yield cls


def make_sweeper(database, mock_logger, sleep=None):
    return RetentionSweeper(
        database,
        interval=timedelta(minutes=60),
        logger=mock_logger,
        sleep=sleep or AsyncMock(),
    )


@pytest.mark.unit
class TestSweep:
    """Test RetentionSweeper.sweep()."""

    async def test_purges_both_tables(
        self, database, session_repo_cls, audit_cls, mock_logger
    ):
        # Act
        report = await make_sweeper(database, mock_logger).sweep(NOW)

        # Assert
        assert report == SweepReport(sessions_removed=3, audit_entries_removed=7)
        session_repo_cls.return_value.delete_expired.assert_awaited_once_with(NOW)
        audit_cls.return_value.purge_expired.assert_awaited_once_with(NOW)
        assert len(database.sessions) == 2
        mock_logger.info.assert_called_once_with(
            "Retention sweep completed",
            sessions_removed=3,
            audit_entries_removed=7,
        )


@pytest.mark.unit
class TestRun:
    """Test the RetentionSweeper.run() loop."""

    async def test_failure_logged_and_loop_continues(
        self, database, session_repo_cls, audit_cls, mock_logger
    ):
        # Arrange
        unavailable = StoreUnavailableError(
            TransientStoreError(
                code=ErrorCode.TRANSIENT_STORE_ERROR, message="down", attempts=4
            )
        )
        session_repo_cls.return_value.delete_expired.side_effect = [unavailable, 1]
        sleep = AsyncMock(side_effect=[None, asyncio.CancelledError()])
        sweeper = make_sweeper(database, mock_logger, sleep)

        # Act
        with pytest.raises(asyncio.CancelledError):
            await sweeper.run()

        # Assert
        mock_logger.error.assert_called_once_with(
            "Retention sweep failed", error=unavailable
        )
        assert session_repo_cls.return_value.delete_expired.await_count == 2
        sleep.assert_awaited_with(3600.0)

    async def test_audit_purge_error_logged(
        self, database, session_repo_cls, audit_cls, mock_logger
    ):
        audit_cls.return_value.purge_expired.side_effect = OperationalError(
            "DELETE", {}, Exception("gone")
        )
        sleep = AsyncMock(side_effect=asyncio.CancelledError())

        with pytest.raises(asyncio.CancelledError):
            await make_sweeper(database, mock_logger, sleep).run()

        mock_logger.error.assert_called_once()
        mock_logger.info.assert_not_called()
