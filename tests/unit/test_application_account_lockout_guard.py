"""Unit tests for AccountLockoutGuard.

Tests cover:
- Failure counting inside the rolling window
- Lock at threshold with ACCOUNT_LOCKOUT audit and notification email
- Counter restart after the window passes
- Auto-unlock of an expired lockout
- Success and explicit unlock clearing state
- Notification failure does not break the flow
"""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock

import pytest

from src.application.services.account_lockout_guard import AccountLockoutGuard
from src.core.enums import ErrorCode
from src.core.result import Failure
from src.domain.enums import AuditEventType
from src.domain.errors import EmailDeliveryError

T0 = datetime(2026, 3, 1, 9, 0, tzinfo=UTC)


@pytest.fixture
def guard(user_repo, mock_audit, mock_email, mock_logger):
    return AccountLockoutGuard(
        user_repo,
        audit=mock_audit,
        email=mock_email,
        max_attempts=5,
        window=timedelta(minutes=15),
        lockout_duration=timedelta(minutes=15),
        logger=mock_logger,
    )


@pytest.fixture
async def account(user_repo, make_account):
    account = make_account(email="locked@example.com")
    await user_repo.add(account)
    return account


@pytest.mark.unit
class TestRecordFailure:
    """Test AccountLockoutGuard.record_failure()."""

    async def test_failures_below_threshold_do_not_lock(
        self, guard, account, mock_audit, mock_email
    ):
        for i in range(4):
            updated = await guard.record_failure(
                account, now=T0 + timedelta(minutes=i)
            )

        assert updated.failed_login_attempts == 4
        assert updated.locked_until is None
        mock_audit.record.assert_not_called()
        mock_email.send.assert_not_called()

    async def test_fifth_failure_locks_audits_and_notifies(
        self, guard, account, mock_audit, mock_email
    ):
        for i in range(5):
            updated = await guard.record_failure(
                account, ip_address="203.0.113.7", now=T0 + timedelta(minutes=i)
            )

        assert updated.failed_login_attempts == 5
        assert updated.locked_until == T0 + timedelta(minutes=4 + 15)
        mock_audit.record.assert_awaited_once()
        kwargs = mock_audit.record.call_args.kwargs
        assert kwargs["event_type"] == AuditEventType.ACCOUNT_LOCKOUT
        assert kwargs["user_id"] == account.id
        assert kwargs["ip_address"] == "203.0.113.7"
        assert kwargs["metadata"]["failed_attempts"] == 5
        mock_email.send.assert_awaited_once()
        to, subject, body = mock_email.send.call_args.args
        assert to == "locked@example.com"
        assert subject == "Account Locked - Security Alert"
        assert "15 minutes" in body

    async def test_window_restart_after_inactivity(self, guard, account):
        """Failures older than the window do not count."""
        for i in range(4):
            await guard.record_failure(account, now=T0 + timedelta(minutes=i))

        updated = await guard.record_failure(account, now=T0 + timedelta(minutes=30))

        assert updated.failed_login_attempts == 1
        assert updated.locked_until is None

    async def test_lock_event_emitted_once(self, guard, account, user_repo, mock_audit):
        """Further failures while locked do not re-audit the lock."""
        for i in range(5):
            await guard.record_failure(account, now=T0 + timedelta(minutes=i))
        locked = await user_repo.find_by_id(account.id)

        await guard.record_failure(locked, now=T0 + timedelta(minutes=6))

        assert mock_audit.record.await_count == 1

    async def test_notification_failure_is_logged(
        self, guard, account, mock_email, mock_logger
    ):
        mock_email.send = AsyncMock(
            return_value=Failure(
                error=EmailDeliveryError(
                    code=ErrorCode.EMAIL_DELIVERY_FAILED, message="SES down"
                )
            )
        )

        for i in range(5):
            updated = await guard.record_failure(
                account, now=T0 + timedelta(minutes=i)
            )

        assert updated.is_locked(T0 + timedelta(minutes=5))
        mock_logger.warning.assert_called_once()

    async def test_unknown_account_returns_input(self, guard, make_account):
        ghost = make_account()

        assert await guard.record_failure(ghost, now=T0) is ghost


@pytest.mark.unit
class TestCheckLocked:
    """Test AccountLockoutGuard.check_locked()."""

    async def test_locked_account(self, guard, account, user_repo):
        account.locked_until = T0 + timedelta(minutes=10)
        user_repo.put(account)

        assert await guard.check_locked(account, T0) is True

    async def test_expired_lockout_auto_unlocks(self, guard, account, user_repo):
        account.failed_login_attempts = 5
        account.last_failed_login_at = T0 - timedelta(minutes=20)
        account.locked_until = T0 - timedelta(minutes=5)
        user_repo.put(account)

        assert await guard.check_locked(account, T0) is False

        stored = await user_repo.find_by_id(account.id)
        assert stored.failed_login_attempts == 0
        assert stored.locked_until is None
        assert account.locked_until is None

    async def test_unlocked_account(self, guard, account):
        assert await guard.check_locked(account, T0) is False


@pytest.mark.unit
class TestClearLockout:
    """Test record_success() and unlock()."""

    async def test_record_success_resets_counter(self, guard, account, user_repo):
        await guard.record_failure(account, now=T0)
        failed = await user_repo.find_by_id(account.id)

        await guard.record_success(failed)

        stored = await user_repo.find_by_id(account.id)
        assert stored.failed_login_attempts == 0
        assert stored.last_failed_login_at is None

    async def test_record_success_without_state_skips_write(
        self, mock_audit, mock_email, make_account
    ):
        users = AsyncMock()
        guard = AccountLockoutGuard(users, audit=mock_audit, email=mock_email)

        await guard.record_success(make_account())

        users.clear_lockout.assert_not_called()

    async def test_unlock_clears_active_lockout(self, guard, account, user_repo):
        for i in range(5):
            await guard.record_failure(account, now=T0 + timedelta(minutes=i))

        await guard.unlock(account.id)

        stored = await user_repo.find_by_id(account.id)
        assert stored.locked_until is None
        assert stored.failed_login_attempts == 0
