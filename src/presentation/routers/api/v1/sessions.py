"""Sessions resource router.

Endpoints:
    GET /api/v1/sessions/current - The caller's validated session
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from src.presentation.routers.api.middleware.auth_dependencies import (
    CurrentSession,
    get_current_session,
)
from src.presentation.routers.api.v1.errors import ProblemDetails
from src.schemas.session_schemas import CurrentSessionResponse

router = APIRouter(prefix="/sessions", tags=["Sessions"])


@router.get(
    "/current",
    response_model=CurrentSessionResponse,
    responses={401: {"model": ProblemDetails}},
    summary="Current session",
    description="Validate the bearer token, slide its expiry and return it.",
)
async def get_current(
    current: Annotated[CurrentSession, Depends(get_current_session)],
) -> CurrentSessionResponse:
    return CurrentSessionResponse(
        user_id=current.user_id,
        expires_at=current.expires_at,
        last_activity_at=current.last_activity_at,
    )
