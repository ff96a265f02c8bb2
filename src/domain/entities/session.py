"""Session domain entity.

An authenticated context bound to one user and one client. Sessions have
dual expiry: a sliding inactivity timeout and an absolute maximum
lifetime. ``expires_at`` is always the earlier of the two bounds.

State machine:
    Created -> Active (self-transition on each validated use)
    Active -> Expired | Terminated (both terminal, record deleted)
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from uuid import UUID


def compute_expiry(
    *,
    created_at: datetime,
    last_activity_at: datetime,
    inactivity_timeout: timedelta,
    max_lifetime: timedelta,
) -> datetime:
    """Earliest of the inactivity bound and the absolute lifetime bound.

    Example:
        >>> compute_expiry(
        ...     created_at=t0,
        ...     last_activity_at=t0 + timedelta(hours=23, minutes=50),
        ...     inactivity_timeout=timedelta(minutes=30),
        ...     max_lifetime=timedelta(hours=24),
        ... ) == t0 + timedelta(hours=24)
        True
    """
    return min(last_activity_at + inactivity_timeout, created_at + max_lifetime)


@dataclass
class Session:
    """Session record as persisted.

    The plaintext token is never part of the entity. ``lookup_key`` is a
    keyed digest of the token and is what the store indexes on;
    ``encrypted_token`` is an encryption envelope kept for audit display.

    Attributes:
        lookup_key: Keyed digest of the session token (unique).
        user_id: Owning user.
        created_at: Issue time.
        last_activity_at: Time of the last successful validation.
        expires_at: min(last_activity_at + inactivity, created_at + lifetime).
        ip_address: Client IP at issue time.
        user_agent: Client user agent at issue time.
        encrypted_token: Encryption envelope of the token (optional).
    """

    lookup_key: str
    user_id: UUID
    created_at: datetime
    last_activity_at: datetime
    expires_at: datetime
    ip_address: str | None = None
    user_agent: str | None = None
    encrypted_token: str | None = None

    def is_expired(
        self,
        now: datetime,
        *,
        inactivity_timeout: timedelta,
        max_lifetime: timedelta,
    ) -> bool:
        """Check all three expiry conditions.

        A session is expired when ``now`` is past ``expires_at``, when the
        idle time exceeds the inactivity timeout, or when its age exceeds
        the maximum lifetime. The last two guard against a stale
        ``expires_at`` written under different settings.
        """
        if now > self.expires_at:
            return True
        if now - self.last_activity_at > inactivity_timeout:
            return True
        return now - self.created_at > max_lifetime

    def touch(
        self,
        now: datetime,
        *,
        inactivity_timeout: timedelta,
        max_lifetime: timedelta,
    ) -> None:
        """Record activity at ``now`` and recompute ``expires_at``."""
        self.last_activity_at = now
        self.expires_at = compute_expiry(
            created_at=self.created_at,
            last_activity_at=now,
            inactivity_timeout=inactivity_timeout,
            max_lifetime=max_lifetime,
        )
