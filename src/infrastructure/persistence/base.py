"""Declarative base shared by the auth tables.

- BaseModel: UUID primary key and creation time (append-only rows)
- BaseMutableModel: adds ``updated_at`` for rows that change

Domain entities never inherit from these; repositories map between the
two.

    BaseModel (id, created_at)
        ├── AuditLogModel
        └── BaseMutableModel (+ updated_at)
            ├── UserAccountModel
            └── SessionModel
"""

from datetime import datetime
from uuid import UUID as PythonUUID

from sqlalchemy import DateTime, Uuid, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from uuid_extensions import uuid7


class BaseModel(DeclarativeBase):
    """Base class for every table.

    Repositories set ``id`` and ``created_at`` from the domain entity;
    the defaults only cover raw inserts (migrations, psql).
    """

    __abstract__ = True

    id: Mapped[PythonUUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid7,
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(id={self.id})>"


class BaseMutableModel(BaseModel):
    """Base class for rows updated in place (accounts, sessions)."""

    __abstract__ = True

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
