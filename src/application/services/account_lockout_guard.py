"""Account lockout guard.

Brute-force defense for password login. Failed attempts accumulate on
the account inside a rolling window; reaching the threshold sets
``locked_until``. While locked, login is refused even with the right
password. A successful login or a completed password reset clears the
state; an expired lockout is cleared the next time it is checked.

The counter update itself is one conditional store operation (see
``UserRepository.record_failed_login``), so concurrent failures from
several workers cannot lose increments.
"""

from datetime import UTC, datetime, timedelta
from uuid import UUID

from src.application.services.email_templates import account_locked_email
from src.core.result import Failure
from src.domain.entities.user_account import UserAccount
from src.domain.enums import AuditEventType
from src.domain.protocols import (
    AuditProtocol,
    EmailServiceProtocol,
    LoggerProtocol,
    UserRepository,
)


class AccountLockoutGuard:
    """Tracks failed logins and enforces temporary lockout.

    Args:
        users: Account repository.
        audit: Audit trail for ACCOUNT_LOCKOUT events.
        email: Dispatcher for the lockout notification.
        max_attempts: Failures that trigger a lockout (5).
        window: Rolling window for counting failures (15 minutes).
        lockout_duration: Lockout length (15 minutes).
        logger: Logger for swallowed notification failures.
    """

    def __init__(
        self,
        users: UserRepository,
        *,
        audit: AuditProtocol,
        email: EmailServiceProtocol,
        max_attempts: int = 5,
        window: timedelta = timedelta(minutes=15),
        lockout_duration: timedelta = timedelta(minutes=15),
        logger: LoggerProtocol | None = None,
    ) -> None:
        self._users = users
        self._audit = audit
        self._email = email
        self._max_attempts = max_attempts
        self._window = window
        self._lockout_duration = lockout_duration
        self._logger = logger

    async def check_locked(
        self, account: UserAccount, now: datetime | None = None
    ) -> bool:
        """True while the account is locked.

        A lockout whose end has passed is cleared (auto-unlock) and the
        account is reported unlocked.
        """
        now = now or datetime.now(UTC)
        if account.is_locked(now):
            return True
        if account.has_expired_lockout(now):
            await self._users.clear_lockout(account.id)
            account.clear_lockout()
        return False

    async def record_failure(
        self,
        account: UserAccount,
        *,
        ip_address: str | None = None,
        now: datetime | None = None,
    ) -> UserAccount:
        """Count one failed login; lock, audit and notify on threshold.

        Returns:
            The account as stored after the increment.
        """
        now = now or datetime.now(UTC)
        was_locked = account.is_locked(now)
        updated = await self._users.record_failed_login(
            account.id,
            now=now,
            window=self._window,
            max_attempts=self._max_attempts,
            lockout_duration=self._lockout_duration,
        )
        if updated is None:
            return account

        if updated.is_locked(now) and not was_locked:
            await self._on_locked(updated, ip_address)
        return updated

    async def unlock(self, user_id: UUID) -> None:
        """Clear failed-attempt counter and lockout."""
        await self._users.clear_lockout(user_id)

    async def record_success(self, account: UserAccount) -> None:
        """Reset counters after a successful login (no write if already clear)."""
        if (
            account.failed_login_attempts
            or account.locked_until is not None
            or account.last_failed_login_at is not None
        ):
            await self._users.clear_lockout(account.id)
            account.clear_lockout()

    async def _on_locked(self, account: UserAccount, ip_address: str | None) -> None:
        await self._audit.record(
            event_type=AuditEventType.ACCOUNT_LOCKOUT,
            user_id=account.id,
            email=account.email,
            ip_address=ip_address,
            success=False,
            metadata={
                "failed_attempts": account.failed_login_attempts,
                "locked_until": account.locked_until.isoformat()
                if account.locked_until
                else None,
            },
        )

        message = account_locked_email(self._lockout_duration)
        sent = await self._email.send(account.email, message.subject, message.body)
        if isinstance(sent, Failure) and self._logger is not None:
            self._logger.warning(
                "Lockout notification not delivered",
                user_id=str(account.id),
                error_code=sent.error.code.value,
            )
