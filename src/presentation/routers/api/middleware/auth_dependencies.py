"""Session authentication dependencies.

FastAPI dependencies that turn a bearer session token into a validated
session. Validation slides the inactivity window (and persists it).

Usage:
    @router.get("/protected")
    async def protected_route(
        current: CurrentSession = Depends(get_current_session),
    ):
        return {"user_id": str(current.user_id)}
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Annotated
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.application.services import SessionManager
from src.core.container import get_session_manager
from src.core.result import Failure

# auto_error=False so a missing header gets the same problem-details 401
bearer_scheme = HTTPBearer(auto_error=False)

_UNAUTHORIZED_HEADERS = {"WWW-Authenticate": "Bearer"}


@dataclass(frozen=True, slots=True, kw_only=True)
class CurrentSession:
    """Authenticated session available to protected routes.

    Attributes:
        user_id: Owner of the session.
        session_token: Presented bearer token (never logged).
        expires_at: Expiry after this request's sliding refresh.
        last_activity_at: Activity time recorded by this request.
    """

    user_id: UUID
    session_token: str
    expires_at: datetime
    last_activity_at: datetime


async def get_current_session(
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(bearer_scheme)
    ],
    session_manager: Annotated[SessionManager, Depends(get_session_manager)],
) -> CurrentSession:
    """Validate the bearer session token.

    Raises:
        HTTPException 401: Token missing, unknown or expired.
    """
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers=_UNAUTHORIZED_HEADERS,
        )

    token = credentials.credentials
    result = await session_manager.validate(token)
    if isinstance(result, Failure) or result.value is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Session is invalid or has expired",
            headers=_UNAUTHORIZED_HEADERS,
        )

    session = result.value
    return CurrentSession(
        user_id=session.user_id,
        session_token=token,
        expires_at=session.expires_at,
        last_activity_at=session.last_activity_at,
    )
