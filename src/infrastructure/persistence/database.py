"""PostgreSQL engine and session factory for the users, sessions and
audit_logs tables.

One ``Database`` is built by ``get_database()`` and shared by the process.
Sessions come from it three ways:
- ``get_db_session()``: per request, for UserRepository and SessionRepository
- ``get_audit_session()``: per request, separate so audit rows survive a
  rolled-back request
- ``RetentionSweeper``: one short session per purge

Repositories commit each write themselves (every write is a single
statement under the store retrier), so the commit on exit here is
usually a no-op.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)


class Database:
    """Database connection and session management.

    Usage:
        db = Database(settings.database_url, echo=settings.db_echo)
        async with db.get_session() as session:
            repo = UserRepository(session, get_store_retrier())
            await repo.set_password_reset_code(
                account.id, envelope, expires_at, now=now
            )
    """

    def __init__(
        self,
        database_url: str,
        echo: bool = False,
        pool_size: int = 20,
        max_overflow: int = 0,
    ) -> None:
        """Initialize database with connection parameters.

        Args:
            database_url: Database connection URL (e.g., postgresql+asyncpg://...)
            echo: If True, log all SQL statements.
            pool_size: Number of connections to maintain in pool.
            max_overflow: Maximum overflow connections above pool_size.
        """
        self.engine: AsyncEngine = create_async_engine(
            database_url,
            echo=echo,
            pool_pre_ping=True,
            pool_size=pool_size,
            max_overflow=max_overflow,
            connect_args={
                "server_settings": {"jit": "off"},
                "command_timeout": 60,
                "timeout": 30,
            }
            if "postgresql" in database_url
            else {},
        )

        self.async_session = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide a database session.

        Commits on successful exit, rolls back on exception, always closes.

        Yields:
            AsyncSession: Database session for operations.
        """
        async with self.async_session() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    async def create_all(self) -> None:
        """Create all tables defined in the models.

        Warning: For tests only. Deployed databases use Alembic migrations.
        """
        from src.infrastructure.persistence.base import BaseModel
        import src.infrastructure.persistence.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(BaseModel.metadata.create_all)

    async def drop_all(self) -> None:
        """Drop all tables defined in the models (tests only)."""
        from src.infrastructure.persistence.base import BaseModel

        async with self.engine.begin() as conn:
            await conn.run_sync(BaseModel.metadata.drop_all)

    async def close(self) -> None:
        """Dispose of the pool. Called on application shutdown."""
        await self.engine.dispose()
