"""User account database model.

Security:
    - password_hash: encryption envelope wrapping a bcrypt hash
    - verification_code / password_reset_code: encryption envelopes
    - failed_login_attempts / last_failed_login_at / locked_until:
      lockout state, mutated by a single conditional UPDATE
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.persistence.base import BaseMutableModel


class UserAccountModel(BaseMutableModel):
    """Registered account.

    Fields:
        id: UUID primary key (from BaseMutableModel)
        created_at / updated_at: from BaseMutableModel
        email: Unique, stored lowercase
        password_hash: Encrypted adaptive hash
        is_verified: Email verification status (blocks login if False)
        verification_code / verification_code_expiry: Pending email code
        password_reset_code / password_reset_code_expiry: Pending reset code
        failed_login_attempts: Failures in the current window
        last_failed_login_at: Time of the most recent failure
        locked_until: End of the current lockout (nullable)

    Indexes:
        - ix_users_email: unique, for login and registration checks
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
        comment="Login email (lowercase)",
    )

    password_hash: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Encryption envelope of the bcrypt hash",
    )

    is_verified: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
    )

    verification_code: Mapped[str | None] = mapped_column(Text, nullable=True)
    verification_code_expiry: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    password_reset_code: Mapped[str | None] = mapped_column(Text, nullable=True)
    password_reset_code_expiry: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    failed_login_attempts: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default="0",
    )

    last_failed_login_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    locked_until: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        comment="Account is locked while now < locked_until",
    )

    def __repr__(self) -> str:
        return (
            f"<UserAccountModel(id={self.id}, email={self.email!r}, "
            f"verified={self.is_verified})>"
        )
