"""UserRepository protocol for account persistence.

Port (interface) for hexagonal architecture. Infrastructure implements
it against the durable store, including transient-fault retry.

Every write touches only the columns its operation owns. Failed-login
counting and code consumption are single conditional store operations;
callers never read-modify-write account state in memory.
"""

from datetime import datetime, timedelta
from typing import Protocol
from uuid import UUID

from src.domain.entities.user_account import UserAccount


class UserRepository(Protocol):
    """User account repository protocol (port).

    Raises:
        StoreUnavailableError: Transient faults outlived the retry budget.
        StoreConflictError: ``add`` hit the unique email constraint.
    """

    async def find_by_id(self, user_id: UUID) -> UserAccount | None:
        """Find account by id."""
        ...

    async def find_by_email(self, email: str) -> UserAccount | None:
        """Find account by email (case-insensitive)."""
        ...

    async def exists_by_email(self, email: str) -> bool:
        """True if an account with this email exists."""
        ...

    async def add(self, account: UserAccount) -> None:
        """Insert a new account."""
        ...

    async def set_verification_code(
        self, user_id: UUID, envelope: str, expires_at: datetime, *, now: datetime
    ) -> None:
        """Store a verification code envelope, replacing any previous one."""
        ...

    async def set_password_reset_code(
        self, user_id: UUID, envelope: str, expires_at: datetime, *, now: datetime
    ) -> None:
        """Store a password reset code envelope, replacing any previous one."""
        ...

    async def mark_verified(
        self, user_id: UUID, *, expected_code: str, now: datetime
    ) -> bool:
        """Set verified and clear the code, only if ``expected_code`` is still stored.

        Returns:
            False when the stored envelope changed (reissued or consumed).
        """
        ...

    async def consume_password_reset_code(
        self,
        user_id: UUID,
        *,
        expected_code: str,
        new_password_hash: str | None,
        now: datetime,
    ) -> bool:
        """Clear the reset code (and store the new hash) if it is still stored.

        Returns:
            False when another request consumed or replaced the code first.
        """
        ...

    async def record_failed_login(
        self,
        user_id: UUID,
        *,
        now: datetime,
        window: timedelta,
        max_attempts: int,
        lockout_duration: timedelta,
    ) -> UserAccount | None:
        """Atomically count a failed login and lock on threshold.

        In one conditional update: if ``last_failed_login_at`` is older
        than ``window`` (or unset) the counter restarts at 1, otherwise it
        is incremented; ``last_failed_login_at`` becomes ``now``; when the
        new count reaches ``max_attempts`` ``locked_until`` becomes
        ``now + lockout_duration``.

        Returns:
            The account as stored after the update, None if it is gone.
        """
        ...

    async def clear_lockout(self, user_id: UUID) -> None:
        """Reset failed-login counter, last failure time and lockout end."""
        ...
