"""Rate limit middleware for FastAPI.

Every request (except health and docs) is counted before it reaches a
route:

- IP scope, always. Authentication endpoints (register, login, verify,
  password reset, resend) use the stricter auth rule on the same
  ``ip:<addr>`` counter.
- USER scope, additionally, when the request carries a bearer token
  that resolves to a live session.

A denied request gets HTTP 429 with RFC 9457 body, ``Retry-After`` and
``X-RateLimit-*`` headers, and a RATE_LIMIT_EXCEEDED audit event.
Allowed responses carry the ``X-RateLimit-*`` headers of the IP rule.

Fail-Open Design:
    Store failures are handled inside RateLimiter (allow and log).
    Failures resolving the session owner or writing the audit event are
    logged here and never block the request.

Usage:
    from src.presentation.routers.api.middleware.rate_limit_middleware import (
        RateLimitMiddleware,
    )

    app.add_middleware(RateLimitMiddleware)
"""

from collections.abc import Awaitable, Callable
from datetime import timedelta
from typing import TYPE_CHECKING, Any
from uuid import UUID

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from src.application.services.rate_limiter import is_auth_endpoint
from src.core.config import settings
from src.core.enums import ErrorCode
from src.domain.enums import AuditEventType, RateLimitScope
from src.domain.value_objects import RateLimitDecision

if TYPE_CHECKING:
    from src.application.services.rate_limiter import RateLimiter
    from src.domain.protocols import LoggerProtocol

UserResolver = Callable[[str], Awaitable[UUID | None]]
AuditRecorder = Callable[..., Awaitable[Any]]

_SKIP_PATHS = ("/", "/health")
_SKIP_PREFIXES = ("/health", "/docs", "/redoc", "/openapi.json", "/favicon.ico")


def get_client_ip(request: Request) -> str:
    """Client address: first X-Forwarded-For entry, X-Real-IP, socket peer."""
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        first = forwarded_for.split(",")[0].strip()
        if first:
            return first

    real_ip = request.headers.get("X-Real-IP")
    if real_ip and real_ip.strip():
        return real_ip.strip()

    if request.client:
        return request.client.host
    return "unknown"


def get_bearer_token(request: Request) -> str | None:
    """Token from ``Authorization: Bearer <token>``, if present."""
    auth_header = request.headers.get("Authorization", "")
    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def _resolve_user_from_store(token: str) -> UUID | None:
    """Owner of the session behind ``token``, read-only."""
    from src.application.services import SessionManager
    from src.core.container import (
        get_database,
        get_encryption_service,
        get_logger,
        get_store_retrier,
    )
    from src.infrastructure.persistence.repositories import SessionRepository

    async with get_database().get_session() as session:
        manager = SessionManager(
            SessionRepository(session=session, retrier=get_store_retrier()),
            get_encryption_service(),
            inactivity_timeout=settings.session_inactivity_timeout,
            max_lifetime=settings.session_max_lifetime,
            logger=get_logger(),
        )
        return await manager.resolve_user_id(token)


async def _record_audit_to_store(**event: Any) -> None:
    """Write one audit event on its own session."""
    from src.core.container import get_database, get_logger
    from src.infrastructure.audit.postgres_adapter import PostgresAuditAdapter

    async with get_database().get_session() as session:
        adapter = PostgresAuditAdapter(
            session,
            retention=timedelta(days=settings.audit_retention_days),
            logger=get_logger(),
        )
        await adapter.record(**event)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Starlette middleware enforcing fixed-window rate limits.

    Args:
        app: The ASGI application to wrap.
        rate_limiter: Limiter to use; defaults to the container singleton.
        user_resolver: Maps a bearer token to its user id.
        audit_recorder: Records the RATE_LIMIT_EXCEEDED event.
        logger: Logger for fail-open events.
    """

    def __init__(
        self,
        app: ASGIApp,
        *,
        rate_limiter: "RateLimiter | None" = None,
        user_resolver: UserResolver | None = None,
        audit_recorder: AuditRecorder | None = None,
        logger: "LoggerProtocol | None" = None,
    ) -> None:
        super().__init__(app)
        self._rate_limiter = rate_limiter
        self._user_resolver = user_resolver
        self._audit_recorder = audit_recorder
        self._logger = logger

    # Defaults are looked up per request so container overrides apply
    def _get_rate_limiter(self) -> "RateLimiter":
        if self._rate_limiter is not None:
            return self._rate_limiter
        from src.core.container import get_rate_limiter

        return get_rate_limiter()

    def _get_logger(self) -> "LoggerProtocol":
        if self._logger is not None:
            return self._logger
        from src.core.container import get_logger

        return get_logger()

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        path = request.url.path
        if path in _SKIP_PATHS or path.startswith(_SKIP_PREFIXES):
            return await call_next(request)

        limiter = self._get_rate_limiter()
        client_ip = get_client_ip(request)
        strict = is_auth_endpoint(path)

        ip_decision = await limiter.hit(RateLimitScope.IP, client_ip, is_strict=strict)
        if not ip_decision.allowed:
            return await self._reject(
                request, ip_decision, client_ip, None, "ip_auth" if strict else "ip"
            )

        user_id = await self._resolve_user(request)
        if user_id is not None:
            user_decision = await limiter.hit(RateLimitScope.USER, str(user_id))
            if not user_decision.allowed:
                return await self._reject(
                    request, user_decision, client_ip, user_id, "user"
                )

        response = await call_next(request)
        self._apply_headers(response, ip_decision)
        return response

    async def _resolve_user(self, request: Request) -> UUID | None:
        token = get_bearer_token(request)
        if token is None:
            return None
        try:
            resolver = self._user_resolver or _resolve_user_from_store
            return await resolver(token)
        except Exception as exc:
            self._get_logger().warning(
                "Rate limit user lookup failed, using IP scope only",
                path=request.url.path,
                error_type=type(exc).__name__,
            )
            return None

    async def _reject(
        self,
        request: Request,
        decision: RateLimitDecision,
        client_ip: str,
        user_id: UUID | None,
        limit_type: str,
    ) -> JSONResponse:
        path = request.url.path
        recorder = self._audit_recorder or _record_audit_to_store
        try:
            await recorder(
                event_type=AuditEventType.RATE_LIMIT_EXCEEDED,
                user_id=user_id,
                ip_address=client_ip,
                success=False,
                metadata={
                    "endpoint": path,
                    "limit_type": limit_type,
                    "is_auth_endpoint": is_auth_endpoint(path),
                    "request_count": decision.request_count,
                },
            )
        except Exception as exc:
            self._get_logger().warning(
                "Rate limit audit failed",
                path=path,
                error_type=type(exc).__name__,
            )

        self._get_logger().info(
            "Rate limit exceeded",
            path=path,
            limit_type=limit_type,
            retry_after=decision.retry_after,
        )
        return self._build_429_response(request, decision)

    @staticmethod
    def _apply_headers(response: Response, decision: RateLimitDecision) -> None:
        response.headers["X-RateLimit-Limit"] = str(decision.limit)
        response.headers["X-RateLimit-Remaining"] = str(decision.remaining)
        response.headers["X-RateLimit-Reset"] = str(decision.reset_seconds)

    @staticmethod
    def _build_429_response(
        request: Request, decision: RateLimitDecision
    ) -> JSONResponse:
        retry_after = decision.retry_after or decision.reset_seconds
        content = {
            "type": f"{settings.api_base_url}/errors/{ErrorCode.RATE_LIMIT_EXCEEDED.value}",
            "title": "Too Many Requests",
            "status": 429,
            "detail": f"Too many requests. Please try again in {retry_after} seconds.",
            "instance": request.url.path,
            "retry_after": retry_after,
        }
        trace_id = getattr(request.state, "trace_id", None)
        if trace_id:
            content["trace_id"] = trace_id

        response = JSONResponse(
            status_code=429,
            content=content,
            headers={"Retry-After": str(retry_after)},
        )
        RateLimitMiddleware._apply_headers(response, decision)
        return response
