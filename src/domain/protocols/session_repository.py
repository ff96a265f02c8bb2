"""SessionRepository protocol for session persistence.

Sessions are addressed by ``lookup_key`` (a keyed digest of the token),
never by the plaintext token.
"""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from src.domain.entities.session import Session


class SessionRepository(Protocol):
    """Session repository protocol (port).

    Raises:
        StoreUnavailableError: Transient faults outlived the retry budget.
    """

    async def add(self, session: Session) -> None:
        """Insert a new session."""
        ...

    async def find_by_lookup_key(self, lookup_key: str) -> Session | None:
        """Find a session by its token digest."""
        ...

    async def find_by_user_id(self, user_id: UUID) -> list[Session]:
        """All sessions belonging to a user, newest first."""
        ...

    async def update_activity(
        self,
        lookup_key: str,
        *,
        last_activity_at: datetime,
        expires_at: datetime,
    ) -> None:
        """Write the refreshed activity time and expiry (last write wins)."""
        ...

    async def delete(self, lookup_key: str) -> bool:
        """Delete one session. Returns True if a row was removed."""
        ...

    async def delete_all_for_user(self, user_id: UUID) -> int:
        """Delete every session of a user. Returns the number removed."""
        ...

    async def delete_expired(self, now: datetime) -> int:
        """Delete sessions with ``expires_at`` before ``now``. Returns the count."""
        ...
