"""UserRepository - SQLAlchemy implementation of UserRepository protocol.

Adapter for hexagonal architecture.
Maps between domain UserAccount entities and database UserAccountModel.
Every operation runs under the store retrier and commits its own write.
"""

from datetime import datetime, timedelta
from uuid import UUID

from sqlalchemy import case, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.entities.user_account import UserAccount
from src.domain.errors import StoreConflictError
from src.infrastructure.persistence.models.user_account import UserAccountModel
from src.infrastructure.persistence.retry import StoreRetrier


class UserRepository:
    """SQLAlchemy implementation of UserRepository protocol.

    This class does NOT inherit from UserRepository protocol (Protocol uses
    structural typing).

    Attributes:
        session: SQLAlchemy async session for database operations.

    Example:
        >>> async with database.get_session() as session:
        ...     repo = UserRepository(session)
        ...     account = await repo.find_by_email("user@example.com")
    """

    def __init__(
        self, session: AsyncSession, retrier: StoreRetrier | None = None
    ) -> None:
        self.session = session
        self._retrier = retrier or StoreRetrier()

    async def find_by_id(self, user_id: UUID) -> UserAccount | None:
        """Find account by ID."""

        async def _query() -> UserAccountModel | None:
            result = await self.session.execute(
                select(UserAccountModel).where(UserAccountModel.id == user_id)
            )
            return result.scalar_one_or_none()

        model = await self._retrier.run(
            "users.find_by_id", _query, session=self.session
        )
        return self._to_domain(model) if model is not None else None

    async def find_by_email(self, email: str) -> UserAccount | None:
        """Find account by email address.

        Emails are stored lower-cased, so the lookup lower-cases its input.
        """

        async def _query() -> UserAccountModel | None:
            result = await self.session.execute(
                select(UserAccountModel).where(
                    UserAccountModel.email == email.strip().lower()
                )
            )
            return result.scalar_one_or_none()

        model = await self._retrier.run(
            "users.find_by_email", _query, session=self.session
        )
        return self._to_domain(model) if model is not None else None

    async def exists_by_email(self, email: str) -> bool:
        """Check if an account with email exists."""

        async def _query() -> bool:
            result = await self.session.execute(
                select(UserAccountModel.id).where(
                    UserAccountModel.email == email.strip().lower()
                )
            )
            return result.scalar_one_or_none() is not None

        return await self._retrier.run(
            "users.exists_by_email", _query, session=self.session
        )

    async def add(self, account: UserAccount) -> None:
        """Insert a new account.

        Raises:
            StoreConflictError: Email already registered.
        """

        async def _insert() -> None:
            self.session.add(self._to_model(account))
            await self.session.commit()

        try:
            await self._retrier.run("users.add", _insert, session=self.session)
        except IntegrityError as exc:
            await self.session.rollback()
            raise StoreConflictError(
                "An account with this email already exists", field="email"
            ) from exc

    async def set_verification_code(
        self, user_id: UUID, envelope: str, expires_at: datetime, *, now: datetime
    ) -> None:
        """Store a verification code; touches only the code columns."""
        await self._write(
            "users.set_verification_code",
            update(UserAccountModel)
            .where(UserAccountModel.id == user_id)
            .values(
                verification_code=envelope,
                verification_code_expiry=expires_at,
                updated_at=now,
            ),
        )

    async def set_password_reset_code(
        self, user_id: UUID, envelope: str, expires_at: datetime, *, now: datetime
    ) -> None:
        """Store a password reset code; touches only the code columns."""
        await self._write(
            "users.set_password_reset_code",
            update(UserAccountModel)
            .where(UserAccountModel.id == user_id)
            .values(
                password_reset_code=envelope,
                password_reset_code_expiry=expires_at,
                updated_at=now,
            ),
        )

    async def mark_verified(
        self, user_id: UUID, *, expected_code: str, now: datetime
    ) -> bool:
        """UPDATE ... WHERE verification_code = :expected RETURNING id."""
        stmt = (
            update(UserAccountModel)
            .where(
                UserAccountModel.id == user_id,
                UserAccountModel.verification_code == expected_code,
            )
            .values(
                is_verified=True,
                verification_code=None,
                verification_code_expiry=None,
                updated_at=now,
            )
            .returning(UserAccountModel.id)
        )
        return await self._write("users.mark_verified", stmt) is not None

    async def consume_password_reset_code(
        self,
        user_id: UUID,
        *,
        expected_code: str,
        new_password_hash: str | None,
        now: datetime,
    ) -> bool:
        """UPDATE ... WHERE password_reset_code = :expected RETURNING id.

        Of two requests holding the same code only one matches the row.
        """
        values: dict[str, object] = {
            "password_reset_code": None,
            "password_reset_code_expiry": None,
            "updated_at": now,
        }
        if new_password_hash is not None:
            values["password_hash"] = new_password_hash
        stmt = (
            update(UserAccountModel)
            .where(
                UserAccountModel.id == user_id,
                UserAccountModel.password_reset_code == expected_code,
            )
            .values(**values)
            .returning(UserAccountModel.id)
        )
        return (
            await self._write("users.consume_password_reset_code", stmt) is not None
        )

    async def record_failed_login(
        self,
        user_id: UUID,
        *,
        now: datetime,
        window: timedelta,
        max_attempts: int,
        lockout_duration: timedelta,
    ) -> UserAccount | None:
        """Count a failed login in one conditional UPDATE ... RETURNING.

        SET expressions see the pre-update row, so the new count is
        computed once and reused for the lockout decision.
        """
        window_start = now - window
        new_count = case(
            (
                or_(
                    UserAccountModel.last_failed_login_at.is_(None),
                    UserAccountModel.last_failed_login_at < window_start,
                ),
                1,
            ),
            else_=UserAccountModel.failed_login_attempts + 1,
        )
        stmt = (
            update(UserAccountModel)
            .where(UserAccountModel.id == user_id)
            .values(
                failed_login_attempts=new_count,
                last_failed_login_at=now,
                locked_until=case(
                    (new_count >= max_attempts, now + lockout_duration),
                    else_=UserAccountModel.locked_until,
                ),
                updated_at=now,
            )
            .returning(UserAccountModel)
            .execution_options(populate_existing=True, synchronize_session=False)
        )

        async def _update() -> UserAccountModel | None:
            result = await self.session.execute(stmt)
            model = result.scalar_one_or_none()
            await self.session.commit()
            return model

        model = await self._retrier.run(
            "users.record_failed_login", _update, session=self.session
        )
        return self._to_domain(model) if model is not None else None

    async def clear_lockout(self, user_id: UUID) -> None:
        """Reset failed-login counter, last failure time and lockout end."""
        stmt = (
            update(UserAccountModel)
            .where(UserAccountModel.id == user_id)
            .values(
                failed_login_attempts=0,
                last_failed_login_at=None,
                locked_until=None,
            )
            .execution_options(synchronize_session=False)
        )

        async def _update() -> None:
            await self.session.execute(stmt)
            await self.session.commit()

        await self._retrier.run("users.clear_lockout", _update, session=self.session)

    async def _write(self, operation: str, stmt) -> UUID | None:
        """Execute one UPDATE and commit; returns the RETURNING id if any."""
        stmt = stmt.execution_options(synchronize_session=False)

        async def _update() -> UUID | None:
            result = await self.session.execute(stmt)
            returned = result.scalar_one_or_none() if result.returns_rows else None
            await self.session.commit()
            return returned

        return await self._retrier.run(operation, _update, session=self.session)

    def _to_domain(self, model: UserAccountModel) -> UserAccount:
        return UserAccount(
            id=model.id,
            email=model.email,
            password_hash=model.password_hash,
            verified=model.is_verified,
            created_at=model.created_at,
            updated_at=model.updated_at,
            verification_code=model.verification_code,
            verification_code_expiry=model.verification_code_expiry,
            password_reset_code=model.password_reset_code,
            password_reset_code_expiry=model.password_reset_code_expiry,
            failed_login_attempts=model.failed_login_attempts,
            last_failed_login_at=model.last_failed_login_at,
            locked_until=model.locked_until,
        )

    def _to_model(self, account: UserAccount) -> UserAccountModel:
        return UserAccountModel(
            id=account.id,
            email=account.email,
            password_hash=account.password_hash,
            is_verified=account.verified,
            created_at=account.created_at,
            updated_at=account.updated_at,
            verification_code=account.verification_code,
            verification_code_expiry=account.verification_code_expiry,
            password_reset_code=account.password_reset_code,
            password_reset_code_expiry=account.password_reset_code_expiry,
            failed_login_attempts=account.failed_login_attempts,
            last_failed_login_at=account.last_failed_login_at,
            locked_until=account.locked_until,
        )
