"""UserAccount domain entity.

Identity and credential record for one email address. Pure business
logic, no framework dependencies.

Confidential fields (``password_hash``, ``verification_code``,
``password_reset_code``) hold encryption envelopes, never plaintext.
Decryption happens in the application services that own each field.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID


@dataclass
class UserAccount:
    """User account with verification, reset and lockout state.

    Business Rules:
        - Email is the natural key and is stored lower-cased
        - Login requires ``verified`` to be True
        - One-time codes are single-use: cleared on consumption,
          overwritten on reissue
        - ``locked_until`` in the future blocks login regardless of password

    Attributes:
        id: Opaque unique identifier.
        email: Normalized email address (globally unique).
        password_hash: Encrypted envelope of the bcrypt hash.
        verified: Email verification status.
        verification_code: Encrypted envelope of the pending verification code.
        verification_code_expiry: When the pending verification code expires.
        password_reset_code: Encrypted envelope of the pending reset code.
        password_reset_code_expiry: When the pending reset code expires.
        failed_login_attempts: Failed logins inside the current lockout window.
        last_failed_login_at: Time of the most recent failed login.
        locked_until: Lockout end, None when not locked.
        created_at: Registration timestamp.
        updated_at: Last modification timestamp.
    """

    id: UUID
    email: str
    password_hash: str
    verified: bool
    created_at: datetime
    updated_at: datetime
    verification_code: str | None = None
    verification_code_expiry: datetime | None = None
    password_reset_code: str | None = None
    password_reset_code_expiry: datetime | None = None
    failed_login_attempts: int = 0
    last_failed_login_at: datetime | None = None
    locked_until: datetime | None = None

    def is_locked(self, now: datetime | None = None) -> bool:
        """Check whether the lockout window is still running.

        Args:
            now: Evaluation time (defaults to current UTC time).

        Returns:
            bool: True while ``locked_until`` is in the future.

        Example:
            >>> account.locked_until = datetime.now(UTC) + timedelta(minutes=10)
            >>> account.is_locked()
            True
        """
        if self.locked_until is None:
            return False
        return (now or datetime.now(UTC)) < self.locked_until

    def has_expired_lockout(self, now: datetime | None = None) -> bool:
        """True when a lockout was set and its end time has passed."""
        if self.locked_until is None:
            return False
        return (now or datetime.now(UTC)) >= self.locked_until

    def clear_lockout(self) -> None:
        """Reset failed-login counter and lockout fields."""
        self.failed_login_attempts = 0
        self.last_failed_login_at = None
        self.locked_until = None

    def set_verification_code(self, envelope: str, expires_at: datetime) -> None:
        """Store a new verification code, superseding any previous one."""
        self.verification_code = envelope
        self.verification_code_expiry = expires_at

    def clear_verification_code(self) -> None:
        """Consume the pending verification code."""
        self.verification_code = None
        self.verification_code_expiry = None

    def set_password_reset_code(self, envelope: str, expires_at: datetime) -> None:
        """Store a new reset code, superseding any previous one."""
        self.password_reset_code = envelope
        self.password_reset_code_expiry = expires_at

    def clear_password_reset_code(self) -> None:
        """Consume the pending password reset code."""
        self.password_reset_code = None
        self.password_reset_code_expiry = None

    def mark_verified(self) -> None:
        """Mark the email as verified and drop the verification code."""
        self.verified = True
        self.clear_verification_code()
