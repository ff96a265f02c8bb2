"""Audit log database model.

Append-only. ``ttl`` is an epoch-seconds retention marker; a scheduled
purge (or a store-native TTL) removes rows once it is in the past.
"""

from typing import Any
from uuid import UUID

from sqlalchemy import JSON, BigInteger, Boolean, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.persistence.base import BaseModel


class AuditLogModel(BaseModel):
    """Security audit event - append-only.

    Fields:
        id: Event id, a UUIDv7 from the domain entry (from BaseModel)
        created_at: Event timestamp (from BaseModel)
        event_type: AuditEventType value
        user_id / email / ip_address: Subject and origin, when known
        success: Outcome flag, when meaningful
        metadata_: Free-form context (column ``metadata``)
        ttl: Retention marker, epoch seconds

    Note:
        Inherits BaseModel (not BaseMutableModel): entries never change.
    """

    __tablename__ = "audit_logs"

    event_type: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        index=True,
    )

    user_id: Mapped[UUID | None] = mapped_column(nullable=True, index=True)

    email: Mapped[str | None] = mapped_column(String(255), nullable=True)

    ip_address: Mapped[str | None] = mapped_column(String(45), nullable=True)

    success: Mapped[bool | None] = mapped_column(Boolean, nullable=True)

    # "metadata" is reserved on declarative classes
    metadata_: Mapped[dict[str, Any] | None] = mapped_column(
        "metadata",
        JSON,
        nullable=True,
        default=None,
    )

    ttl: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        index=True,
        comment="Epoch seconds after which the entry may be purged",
    )

    __table_args__ = (Index("idx_audit_user_event", "user_id", "event_type"),)

    def __repr__(self) -> str:
        return (
            f"<AuditLogModel(id={self.id}, event_type={self.event_type}, "
            f"user_id={self.user_id})>"
        )
