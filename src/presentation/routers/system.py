"""System router for non-versioned application endpoints.

Root and health endpoints. Both bypass rate limiting and need no
session.
"""

from fastapi import APIRouter

from src.core.config import settings

system_router = APIRouter(tags=["System"])


@system_router.get("/")
async def root() -> dict[str, str]:
    """Basic status with service name and version."""
    return {
        "message": f"{settings.app_name} API",
        "status": "operational",
        "version": settings.app_version,
    }


@system_router.get("/health")
async def health() -> dict[str, str]:
    """Liveness probe for load balancers."""
    return {"status": "healthy"}
