"""Main FastAPI application entry point.

Middleware order (outermost first): trace, security headers, rate
limit. Trace runs first so rate-limit rejections already carry a trace
id; security headers wrap everything so 429 responses get them too.
"""

import asyncio
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager, suppress

from fastapi import FastAPI

from src.core.config import settings
from src.core.container import (
    get_database,
    get_logger,
    get_redis,
    get_retention_sweeper,
)
from src.presentation.routers import system_router, v1_router
from src.presentation.routers.api.middleware.rate_limit_middleware import (
    RateLimitMiddleware,
)
from src.presentation.routers.api.middleware.security_headers_middleware import (
    SecurityHeadersMiddleware,
)
from src.presentation.routers.api.middleware.trace_middleware import TraceMiddleware
from src.presentation.routers.api.v1.errors import register_exception_handlers


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan.

    - Startup: log configuration summary, start the retention sweep
    - Shutdown: stop the sweep, dispose of the database pool and Redis
    """
    logger = get_logger()
    logger.info(
        "Application starting",
        environment=settings.environment.value,
        secrets_backend=settings.secrets_backend,
        email_backend=settings.email_backend,
    )

    sweep_task = None
    if settings.retention_sweep_interval_minutes > 0:
        sweep_task = asyncio.create_task(get_retention_sweeper().run())

    yield

    if sweep_task is not None:
        sweep_task.cancel()
        with suppress(asyncio.CancelledError):
            await sweep_task
    await get_database().close()
    await get_redis().aclose()
    logger.info("Application stopped")


app = FastAPI(
    title=settings.app_name,
    description="Multi-tenant task tracker: authentication and session security",
    version=settings.app_version,
    docs_url="/docs",
    redoc_url="/redoc",
    debug=settings.debug,
    lifespan=lifespan,
)

# add_middleware prepends, so the last one added runs first
app.add_middleware(RateLimitMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(TraceMiddleware)

# RFC 9457 error responses
register_exception_handlers(app)

app.include_router(system_router)
app.include_router(v1_router)
