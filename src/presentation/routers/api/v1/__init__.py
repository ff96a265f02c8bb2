"""API v1 routers.

Resources:
    /api/v1/auth       - Credential lifecycle (register, verify, login, reset)
    /api/v1/sessions   - Session introspection
"""

from fastapi import APIRouter

from src.presentation.routers.api.v1.auth import router as auth_router
from src.presentation.routers.api.v1.sessions import router as sessions_router

v1_router = APIRouter(prefix="/api/v1")
v1_router.include_router(auth_router)
v1_router.include_router(sessions_router)

__all__ = [
    "v1_router",
]
