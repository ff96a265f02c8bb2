"""Authentication DTOs (Data Transfer Objects).

Response dataclasses carried from command handlers back to the
presentation layer.

DTOs:
    - IssuedSession: Result of login and email verification
"""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True, kw_only=True)
class IssuedSession:
    """A freshly created session.

    The plaintext token exists only here; the store keeps its digest and
    an encrypted copy.

    Attributes:
        session_token: Opaque bearer token for the client.
        expires_at: Current expiry (earlier of inactivity and lifetime bound).
        user_id: Session owner.
    """

    session_token: str
    expires_at: datetime
    user_id: UUID
