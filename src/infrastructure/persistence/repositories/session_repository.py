"""SessionRepository - SQLAlchemy implementation of SessionRepository protocol.

Adapter for hexagonal architecture.
Maps between domain Session entities and database SessionModel rows.

Lookups go through ``lookup_key`` (token digest). Activity updates are
plain last-write-wins UPDATEs; two concurrent validations of the same
session both move ``last_activity_at`` forward, which is harmless.
"""

from datetime import datetime
from typing import cast
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.engine import CursorResult
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.entities.session import Session
from src.infrastructure.persistence.models.session import SessionModel
from src.infrastructure.persistence.retry import StoreRetrier


class SessionRepository:
    """SQLAlchemy implementation of SessionRepository protocol.

    This class does NOT inherit from SessionRepository protocol
    (Protocol uses structural typing).

    Example:
        >>> async with database.get_session() as db_session:
        ...     repo = SessionRepository(db_session)
        ...     stored = await repo.find_by_lookup_key(lookup_key)
    """

    def __init__(
        self, session: AsyncSession, retrier: StoreRetrier | None = None
    ) -> None:
        self._session = session
        self._retrier = retrier or StoreRetrier()

    async def add(self, session: Session) -> None:
        """Insert a new session row."""

        async def _insert() -> None:
            self._session.add(self._to_model(session))
            await self._session.commit()

        await self._retrier.run("sessions.add", _insert, session=self._session)

    async def find_by_lookup_key(self, lookup_key: str) -> Session | None:
        """Find a session by token digest."""

        async def _query() -> SessionModel | None:
            result = await self._session.execute(
                select(SessionModel).where(SessionModel.lookup_key == lookup_key)
            )
            return result.scalar_one_or_none()

        model = await self._retrier.run(
            "sessions.find_by_lookup_key", _query, session=self._session
        )
        return self._to_domain(model) if model is not None else None

    async def find_by_user_id(self, user_id: UUID) -> list[Session]:
        """All sessions of a user, newest first."""

        async def _query() -> list[SessionModel]:
            result = await self._session.execute(
                select(SessionModel)
                .where(SessionModel.user_id == user_id)
                .order_by(SessionModel.created_at.desc())
            )
            return list(result.scalars().all())

        models = await self._retrier.run(
            "sessions.find_by_user_id", _query, session=self._session
        )
        return [self._to_domain(m) for m in models]

    async def update_activity(
        self,
        lookup_key: str,
        *,
        last_activity_at: datetime,
        expires_at: datetime,
    ) -> None:
        """Write refreshed activity time and expiry."""
        stmt = (
            update(SessionModel)
            .where(SessionModel.lookup_key == lookup_key)
            .values(last_activity_at=last_activity_at, expires_at=expires_at)
            .execution_options(synchronize_session=False)
        )

        async def _update() -> None:
            await self._session.execute(stmt)
            await self._session.commit()

        await self._retrier.run(
            "sessions.update_activity", _update, session=self._session
        )

    async def delete(self, lookup_key: str) -> bool:
        """Delete one session. Idempotent: returns False if already gone."""
        stmt = delete(SessionModel).where(SessionModel.lookup_key == lookup_key)

        async def _delete() -> int:
            result = cast(CursorResult[object], await self._session.execute(stmt))
            await self._session.commit()
            return result.rowcount

        removed = await self._retrier.run(
            "sessions.delete", _delete, session=self._session
        )
        return removed > 0

    async def delete_all_for_user(self, user_id: UUID) -> int:
        """Delete every session of a user."""
        stmt = delete(SessionModel).where(SessionModel.user_id == user_id)

        async def _delete() -> int:
            result = cast(CursorResult[object], await self._session.execute(stmt))
            await self._session.commit()
            return result.rowcount

        return await self._retrier.run(
            "sessions.delete_all_for_user", _delete, session=self._session
        )

    async def delete_expired(self, now: datetime) -> int:
        """Delete sessions whose expiry has passed.

        Sessions that are never presented again are only removed here.

        Returns:
            Number of sessions removed.
        """
        stmt = delete(SessionModel).where(SessionModel.expires_at < now)

        async def _delete() -> int:
            result = cast(CursorResult[object], await self._session.execute(stmt))
            await self._session.commit()
            return result.rowcount

        return await self._retrier.run(
            "sessions.delete_expired", _delete, session=self._session
        )

    def _to_domain(self, model: SessionModel) -> Session:
        return Session(
            lookup_key=model.lookup_key,
            user_id=model.user_id,
            created_at=model.created_at,
            last_activity_at=model.last_activity_at,
            expires_at=model.expires_at,
            ip_address=model.ip_address,
            user_agent=model.user_agent,
            encrypted_token=model.encrypted_token,
        )

    def _to_model(self, session: Session) -> SessionModel:
        return SessionModel(
            lookup_key=session.lookup_key,
            user_id=session.user_id,
            created_at=session.created_at,
            last_activity_at=session.last_activity_at,
            expires_at=session.expires_at,
            ip_address=session.ip_address,
            user_agent=session.user_agent,
            encrypted_token=session.encrypted_token,
        )
