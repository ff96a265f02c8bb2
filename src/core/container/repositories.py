"""Repository dependency factories.

Request-scoped repository instances. Each request gets fresh repositories
sharing the request's database session and the app-scoped retry policy.
"""

from typing import TYPE_CHECKING

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.container.infrastructure import get_db_session, get_store_retrier

if TYPE_CHECKING:
    from src.infrastructure.persistence.repositories import (
        SessionRepository,
        UserRepository,
    )


# ============================================================================
# Repository Factories (Request-Scoped)
# ============================================================================


async def get_user_repository(
    session: AsyncSession = Depends(get_db_session),
) -> "UserRepository":
    """Get user account repository (request-scoped).

    Args:
        session: Database session for request duration.
            Injected via Depends(get_db_session).

    Usage:
        @router.get("/me")
        async def me(users: UserRepository = Depends(get_user_repository)):
            account = await users.find_by_id(user_id)
    """
    from src.infrastructure.persistence.repositories import UserRepository

    return UserRepository(session=session, retrier=get_store_retrier())


async def get_session_repository(
    session: AsyncSession = Depends(get_db_session),
) -> "SessionRepository":
    """Get session repository (request-scoped)."""
    from src.infrastructure.persistence.repositories import SessionRepository

    return SessionRepository(session=session, retrier=get_store_retrier())
