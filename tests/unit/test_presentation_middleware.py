"""Unit tests for HTTP middleware (trace, security headers, rate limit).

Tests cover:
- Trace id echoed or generated, exposed on request.state
- Security headers on every response without clobbering route headers
- Rate limiting: IP rule, stricter auth rule, per-user rule via bearer
- 429 problem details body, Retry-After and X-RateLimit-* headers
- Audit event on rejection; resolver and recorder failures fail open
- Client IP and bearer token extraction

Architecture:
- A small FastAPI app wired with injected limiter, resolver and recorder
- In-memory counter store with a fixed clock
"""

from unittest.mock import AsyncMock, Mock

import pytest
from fastapi import FastAPI, Request, Response
from fastapi.testclient import TestClient
from uuid_extensions import uuid7

from src.application.services.rate_limiter import RateLimiter
from src.core.config import settings
from src.core.constants import SECURITY_HEADERS
from src.domain.enums import AuditEventType, RateLimitScope
from src.domain.value_objects import RateLimitRule
from src.presentation.routers.api.middleware.rate_limit_middleware import (
    RateLimitMiddleware,
    get_bearer_token,
    get_client_ip,
)
from src.presentation.routers.api.middleware.security_headers_middleware import (
    SecurityHeadersMiddleware,
)
from src.presentation.routers.api.middleware.trace_middleware import (
    TRACE_HEADER,
    TraceMiddleware,
    get_trace_id,
)
from tests.fakes import InMemoryCounterStore

# One second into a 60-second-aligned window
NOW_MS = 1_772_000_040_000 + 1_000

IP_RULE = RateLimitRule(name="ip", scope=RateLimitScope.IP, limit=3, window_seconds=60)
AUTH_RULE = RateLimitRule(
    name="ip_auth", scope=RateLimitScope.IP, limit=2, window_seconds=60
)
USER_RULE = RateLimitRule(
    name="user", scope=RateLimitScope.USER, limit=1, window_seconds=60
)


def build_app(limiter, *, user_resolver=None, audit_recorder=None, logger=None):
    app = FastAPI()

    @app.get("/health")
    async def health():
        return {"status": "healthy"}

    @app.get("/api/v1/tasks")
    async def tasks(request: Request):
        return {"trace_id": request.state.trace_id, "current": get_trace_id()}

    @app.post("/api/v1/auth/login")
    async def login():
        return {"ok": True}

    @app.get("/framed")
    async def framed(response: Response):
        response.headers["X-Frame-Options"] = "SAMEORIGIN"
        return {}

    app.add_middleware(
        RateLimitMiddleware,
        rate_limiter=limiter,
        user_resolver=user_resolver,
        audit_recorder=audit_recorder or AsyncMock(),
        logger=logger or Mock(),
    )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(TraceMiddleware)
    return app


@pytest.fixture
def limiter(mock_logger):
    return RateLimiter(
        InMemoryCounterStore(),
        ip_rule=IP_RULE,
        auth_rule=AUTH_RULE,
        user_rule=USER_RULE,
        logger=mock_logger,
        clock_ms=lambda: NOW_MS,
    )


@pytest.fixture
def recorder():
    return AsyncMock()


@pytest.fixture
def client(limiter, recorder, mock_logger):
    return TestClient(
        build_app(limiter, audit_recorder=recorder, logger=mock_logger)
    )


@pytest.mark.unit
class TestTraceMiddleware:
    """Test TraceMiddleware."""

    def test_generates_trace_id(self, client):
        response = client.get("/api/v1/tasks")

        trace_id = response.headers[TRACE_HEADER]
        assert trace_id
        assert response.json() == {"trace_id": trace_id, "current": trace_id}

    def test_echoes_incoming_trace_id(self, client):
        response = client.get("/api/v1/tasks", headers={TRACE_HEADER: "abc-123"})

        assert response.headers[TRACE_HEADER] == "abc-123"
        assert response.json()["trace_id"] == "abc-123"

    def test_no_trace_id_outside_request(self):
        assert get_trace_id() is None


@pytest.mark.unit
class TestSecurityHeadersMiddleware:
    """Test SecurityHeadersMiddleware."""

    def test_headers_present(self, client):
        response = client.get("/health")

        for name, value in SECURITY_HEADERS.items():
            assert response.headers[name] == value

    def test_route_header_not_overwritten(self, client):
        response = client.get("/framed")

        assert response.headers["X-Frame-Options"] == "SAMEORIGIN"
        assert response.headers["X-Content-Type-Options"] == "nosniff"


@pytest.mark.unit
class TestRateLimitMiddleware:
    """Test RateLimitMiddleware."""

    def test_allowed_response_carries_rate_limit_headers(self, client):
        response = client.get("/api/v1/tasks")

        assert response.status_code == 200
        assert response.headers["X-RateLimit-Limit"] == "3"
        assert response.headers["X-RateLimit-Remaining"] == "2"
        assert response.headers["X-RateLimit-Reset"] == "59"

    def test_ip_limit_exceeded(self, client, recorder):
        # Arrange
        for _ in range(3):
            assert client.get("/api/v1/tasks").status_code == 200

        # Act
        response = client.get("/api/v1/tasks", headers={TRACE_HEADER: "t-429"})

        # Assert
        assert response.status_code == 429
        assert response.headers["Retry-After"] == "59"
        assert response.headers["X-RateLimit-Remaining"] == "0"
        assert response.headers[TRACE_HEADER] == "t-429"
        assert response.headers["X-Frame-Options"] == "DENY"
        assert response.json() == {
            "type": f"{settings.api_base_url}/errors/rate_limit_exceeded",
            "title": "Too Many Requests",
            "status": 429,
            "detail": "Too many requests. Please try again in 59 seconds.",
            "instance": "/api/v1/tasks",
            "retry_after": 59,
            "trace_id": "t-429",
        }
        recorder.assert_awaited_once_with(
            event_type=AuditEventType.RATE_LIMIT_EXCEEDED,
            user_id=None,
            ip_address="testclient",
            success=False,
            metadata={
                "endpoint": "/api/v1/tasks",
                "limit_type": "ip",
                "is_auth_endpoint": False,
                "request_count": 3,
            },
        )

    def test_auth_endpoint_uses_stricter_rule(self, client, recorder):
        client.post("/api/v1/auth/login")
        client.post("/api/v1/auth/login")

        response = client.post("/api/v1/auth/login")

        assert response.status_code == 429
        metadata = recorder.call_args.kwargs["metadata"]
        assert metadata["limit_type"] == "ip_auth"
        assert metadata["is_auth_endpoint"] is True

    def test_health_is_never_limited(self, client):
        for _ in range(5):
            response = client.get("/health")

        assert response.status_code == 200
        assert "X-RateLimit-Limit" not in response.headers

    def test_forwarded_for_counts_separately(self, client):
        for _ in range(3):
            client.get("/api/v1/tasks", headers={"X-Forwarded-For": "198.51.100.1"})

        blocked = client.get(
            "/api/v1/tasks", headers={"X-Forwarded-For": "198.51.100.1"}
        )
        other = client.get("/api/v1/tasks", headers={"X-Forwarded-For": "198.51.100.2"})

        assert blocked.status_code == 429
        assert other.status_code == 200

    def test_user_limit_via_bearer(self, limiter, recorder, mock_logger):
        # Arrange
        user_id = uuid7()
        resolver = AsyncMock(return_value=user_id)
        client = TestClient(
            build_app(
                limiter,
                user_resolver=resolver,
                audit_recorder=recorder,
                logger=mock_logger,
            )
        )
        headers = {"Authorization": "Bearer tok-1"}

        # Act
        first = client.get("/api/v1/tasks", headers=headers)
        second = client.get("/api/v1/tasks", headers=headers)

        # Assert
        assert first.status_code == 200
        assert second.status_code == 429
        resolver.assert_awaited_with("tok-1")
        assert recorder.call_args.kwargs["user_id"] == user_id
        assert recorder.call_args.kwargs["metadata"]["limit_type"] == "user"

    def test_resolver_failure_falls_back_to_ip(self, limiter, mock_logger):
        resolver = AsyncMock(side_effect=ConnectionError("db down"))
        client = TestClient(
            build_app(limiter, user_resolver=resolver, logger=mock_logger)
        )

        response = client.get("/api/v1/tasks", headers={"Authorization": "Bearer x"})

        assert response.status_code == 200
        assert mock_logger.warning.call_args.args == (
            "Rate limit user lookup failed, using IP scope only",
        )

    def test_audit_failure_still_rejects(self, limiter, mock_logger):
        recorder = AsyncMock(side_effect=RuntimeError("audit down"))
        client = TestClient(
            build_app(limiter, audit_recorder=recorder, logger=mock_logger)
        )
        for _ in range(3):
            client.get("/api/v1/tasks")

        response = client.get("/api/v1/tasks")

        assert response.status_code == 429
        assert mock_logger.warning.call_args.args == ("Rate limit audit failed",)


@pytest.mark.unit
class TestRequestHelpers:
    """Test get_client_ip() and get_bearer_token()."""

    def make_request(self, headers: dict[str, str], host: str | None = "10.0.0.9"):
        request = Mock()
        request.headers = headers
        request.client = Mock(host=host) if host else None
        return request

    @pytest.mark.parametrize(
        "headers,expected",
        [
            ({"X-Forwarded-For": "203.0.113.7, 10.0.0.1"}, "203.0.113.7"),
            ({"X-Real-IP": " 203.0.113.8 "}, "203.0.113.8"),
            ({"X-Forwarded-For": " , ", "X-Real-IP": "203.0.113.9"}, "203.0.113.9"),
            ({}, "10.0.0.9"),
        ],
    )
    def test_client_ip(self, headers, expected):
        assert get_client_ip(self.make_request(headers)) == expected

    def test_client_ip_unknown(self):
        assert get_client_ip(self.make_request({}, host=None)) == "unknown"

    @pytest.mark.parametrize(
        "header,expected",
        [
            ("Bearer abc", "abc"),
            ("bearer  abc ", "abc"),
            ("Basic abc", None),
            ("Bearer ", None),
            ("", None),
        ],
    )
    def test_bearer_token(self, header, expected):
        assert get_bearer_token(self.make_request({"Authorization": header})) == expected
