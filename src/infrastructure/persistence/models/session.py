"""Session database model.

Rows are addressed by ``lookup_key``, an HMAC of the bearer token. The
token itself is only present as an encryption envelope.
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.persistence.base import BaseMutableModel


class SessionModel(BaseMutableModel):
    """Authenticated session.

    Fields:
        id: Surrogate UUID key (from BaseMutableModel)
        created_at: Issue time, set from the domain entity
        lookup_key: HMAC-SHA256 hex of the token (unique)
        user_id: Owner (cascade delete)
        last_activity_at: Last successful validation
        expires_at: min(last activity + inactivity, created + lifetime)
        ip_address / user_agent: Client at issue time
        encrypted_token: Encryption envelope of the token

    Indexes:
        - ix_sessions_lookup_key: unique, token lookups
        - ix_sessions_user_id: logout-everywhere
        - ix_sessions_expires_at: cleanup
    """

    __tablename__ = "sessions"

    lookup_key: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        unique=True,
        index=True,
        comment="HMAC-SHA256 hex digest of the session token",
    )

    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    last_activity_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )

    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True
    )

    ip_address: Mapped[str | None] = mapped_column(String(45), nullable=True)
    user_agent: Mapped[str | None] = mapped_column(String(500), nullable=True)

    encrypted_token: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (Index("idx_sessions_user_expires", "user_id", "expires_at"),)

    def __repr__(self) -> str:
        return (
            f"<SessionModel(id={self.id}, user_id={self.user_id}, "
            f"expires_at={self.expires_at})>"
        )
