"""Unit tests for the fixed-window RateLimiter.

Tests cover:
- Limit enforcement and window rollover
- Retry-After bounds
- Stricter auth rule sharing the ip counter
- Per-user rule
- Fail-open on store errors
- Auth endpoint detection
"""

from unittest.mock import AsyncMock

import pytest

from src.application.services.rate_limiter import (
    DEFAULT_AUTH_RULE,
    DEFAULT_IP_RULE,
    DEFAULT_USER_RULE,
    RateLimiter,
    is_auth_endpoint,
)
from src.core.enums import ErrorCode
from src.core.result import Failure
from src.domain.enums import RateLimitScope
from src.domain.errors import RateLimitError
from src.domain.value_objects import RateLimitRule

# Aligned to a 60 s window boundary.
WINDOW_START_MS = 1_772_000_040_000


@pytest.fixture
def limiter(counter_store, mock_logger):
    return RateLimiter(
        counter_store,
        ip_rule=RateLimitRule(
            name="ip", scope=RateLimitScope.IP, limit=5, window_seconds=60
        ),
        auth_rule=RateLimitRule(
            name="ip_auth", scope=RateLimitScope.IP, limit=2, window_seconds=60
        ),
        user_rule=RateLimitRule(
            name="user", scope=RateLimitScope.USER, limit=3, window_seconds=3600
        ),
        logger=mock_logger,
        clock_ms=lambda: WINDOW_START_MS,
    )


@pytest.mark.unit
class TestRateLimiterHit:
    """Test RateLimiter.hit()."""

    async def test_allows_up_to_limit_then_denies(self, limiter):
        decisions = [
            await limiter.hit(RateLimitScope.IP, "10.0.0.1", now_ms=WINDOW_START_MS + i)
            for i in range(6)
        ]

        assert [d.allowed for d in decisions] == [True] * 5 + [False]
        assert [d.remaining for d in decisions[:5]] == [4, 3, 2, 1, 0]
        assert decisions[-1].retry_after is not None

    async def test_denied_requests_are_not_counted(self, limiter, counter_store):
        for _ in range(8):
            await limiter.hit(RateLimitScope.IP, "10.0.0.1", now_ms=WINDOW_START_MS)

        [counter] = counter_store.counters.values()
        assert counter.request_count == 5

    async def test_next_window_is_allowed(self, limiter):
        for _ in range(6):
            await limiter.hit(RateLimitScope.IP, "10.0.0.1", now_ms=WINDOW_START_MS)

        decision = await limiter.hit(
            RateLimitScope.IP, "10.0.0.1", now_ms=WINDOW_START_MS + 60_000
        )

        assert decision.allowed is True
        assert decision.request_count == 1

    @pytest.mark.parametrize(
        "offset_ms,expected",
        [(0, 60), (1, 60), (59_000, 1), (59_999, 1), (30_500, 30)],
    )
    async def test_retry_after_within_window(self, limiter, offset_ms, expected):
        for _ in range(5):
            await limiter.hit(RateLimitScope.IP, "10.0.0.1", now_ms=WINDOW_START_MS)

        decision = await limiter.hit(
            RateLimitScope.IP, "10.0.0.1", now_ms=WINDOW_START_MS + offset_ms
        )

        assert decision.allowed is False
        assert decision.retry_after == expected
        assert 0 < decision.retry_after <= 60

    async def test_separate_identifiers_have_separate_counters(self, limiter):
        for _ in range(5):
            await limiter.hit(RateLimitScope.IP, "10.0.0.1")

        decision = await limiter.hit(RateLimitScope.IP, "10.0.0.2")

        assert decision.allowed is True

    async def test_auth_rule_is_stricter_on_same_counter(self, limiter, counter_store):
        for _ in range(2):
            await limiter.hit(RateLimitScope.IP, "10.0.0.1", is_strict=True)

        denied = await limiter.hit(RateLimitScope.IP, "10.0.0.1", is_strict=True)
        general = await limiter.hit(RateLimitScope.IP, "10.0.0.1")

        assert denied.allowed is False
        assert denied.limit == 2
        assert general.allowed is True
        assert list(counter_store.counters) == [("ip:10.0.0.1", WINDOW_START_MS)]

    async def test_user_rule(self, limiter, counter_store):
        for _ in range(3):
            await limiter.hit(RateLimitScope.USER, "user-1")

        decision = await limiter.hit(RateLimitScope.USER, "user-1")

        assert decision.allowed is False
        assert decision.limit == 3
        [(key, _)] = counter_store.counters
        assert key == "user:user-1"


@pytest.mark.unit
class TestRateLimiterFailOpen:
    """Store failures allow the request and log a warning."""

    @pytest.fixture
    def broken_store(self):
        error = RateLimitError(
            code=ErrorCode.RATE_LIMIT_CHECK_FAILED, message="redis down"
        )
        store = AsyncMock()
        store.get_counter = AsyncMock(return_value=Failure(error=error))
        store.increment = AsyncMock(return_value=Failure(error=error))
        return store

    async def test_check_fails_open(self, broken_store, mock_logger):
        limiter = RateLimiter(broken_store, logger=mock_logger)

        decision = await limiter.check(RateLimitScope.IP, "10.0.0.1")

        assert decision.allowed is True
        assert decision.remaining == DEFAULT_IP_RULE.limit
        mock_logger.warning.assert_called_once()
        kwargs = mock_logger.warning.call_args.kwargs
        assert kwargs["operation"] == "check"
        assert kwargs["limit_key"] == "ip:10.0.0.1"
        assert kwargs["error_code"] == "rate_limit_check_failed"

    async def test_record_failure_returns_none(self, broken_store, mock_logger):
        limiter = RateLimiter(broken_store, logger=mock_logger)

        assert await limiter.record(RateLimitScope.IP, "10.0.0.1") is None

    async def test_hit_fails_open(self, broken_store, mock_logger):
        limiter = RateLimiter(broken_store, logger=mock_logger)

        decision = await limiter.hit(RateLimitScope.USER, "user-1")

        assert decision.allowed is True
        assert mock_logger.warning.call_count == 2


@pytest.mark.unit
class TestRateLimiterHelpers:
    """Test rule selection, keys, reset and endpoint detection."""

    def test_defaults(self):
        limiter = RateLimiter(AsyncMock())

        assert limiter.rule_for(RateLimitScope.IP) is DEFAULT_IP_RULE
        assert limiter.rule_for(RateLimitScope.IP, is_strict=True) is DEFAULT_AUTH_RULE
        assert limiter.rule_for(RateLimitScope.USER) is DEFAULT_USER_RULE
        assert (DEFAULT_IP_RULE.limit, DEFAULT_IP_RULE.window_seconds) == (100, 60)
        assert (DEFAULT_AUTH_RULE.limit, DEFAULT_AUTH_RULE.window_seconds) == (10, 60)
        assert (DEFAULT_USER_RULE.limit, DEFAULT_USER_RULE.window_seconds) == (
            1000,
            3600,
        )

    def test_limit_key(self):
        assert RateLimiter.limit_key(RateLimitScope.IP, "1.2.3.4") == "ip:1.2.3.4"
        assert RateLimiter.limit_key(RateLimitScope.USER, "abc") == "user:abc"

    async def test_reset_clears_all_windows(self, limiter, counter_store):
        await limiter.hit(RateLimitScope.IP, "10.0.0.1", now_ms=WINDOW_START_MS)
        await limiter.hit(RateLimitScope.IP, "10.0.0.1", now_ms=WINDOW_START_MS + 60_000)

        result = await limiter.reset("ip:10.0.0.1")

        assert result.value == 2
        assert counter_store.counters == {}

    @pytest.mark.parametrize(
        "path,expected",
        [
            ("/api/v1/auth/login", True),
            ("/api/v1/auth/register/", True),
            ("/api/v1/auth/password-reset-request", True),
            ("/api/v1/auth/password-reset", True),
            ("/api/v1/auth/verify", True),
            ("/api/v1/auth/resend-verification", True),
            ("/api/v1/auth/logout", False),
            ("/api/v1/sessions/current", False),
        ],
    )
    def test_is_auth_endpoint(self, path, expected):
        assert is_auth_endpoint(path) is expected
