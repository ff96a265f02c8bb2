"""Fixed-window rate limiter.

    window_start = floor(now_ms / window_ms) * window_ms
    retry_after  = ceil((window_start + window_ms - now_ms) / 1000)

Rules:
    - IP, general endpoints: 100 requests / 60 s
    - IP, authentication endpoints: 10 requests / 60 s (same ``ip:`` counter,
      stricter limit)
    - USER: 1000 requests / 3600 s

Counters are kept by a RateLimitStoreProtocol implementation that does
the increment atomically. Store failures fail open: the request is
allowed and the failure is logged.

Fixed windows allow a burst of up to twice the limit across a window
boundary. One counter per key per window is the price paid for that.
"""

import math
import time
from collections.abc import Callable

from src.core.constants import AUTH_ENDPOINTS, RATE_LIMIT_CLEANUP_GRACE_SECONDS
from src.core.result import Failure, Result
from src.domain.entities.rate_limit_counter import window_start_for
from src.domain.enums import RateLimitScope
from src.domain.errors import RateLimitError
from src.domain.protocols import LoggerProtocol, RateLimitStoreProtocol
from src.domain.value_objects import RateLimitDecision, RateLimitRule

DEFAULT_IP_RULE = RateLimitRule(
    name="ip", scope=RateLimitScope.IP, limit=100, window_seconds=60
)
DEFAULT_AUTH_RULE = RateLimitRule(
    name="ip_auth", scope=RateLimitScope.IP, limit=10, window_seconds=60
)
DEFAULT_USER_RULE = RateLimitRule(
    name="user", scope=RateLimitScope.USER, limit=1000, window_seconds=3600
)


def is_auth_endpoint(path: str) -> bool:
    """True for credential endpoints that get the stricter IP limit."""
    trimmed = path.rstrip("/")
    return any(trimmed.endswith(suffix) for suffix in AUTH_ENDPOINTS)


def _now_ms() -> int:
    return int(time.time() * 1000)


class RateLimiter:
    """Checks and records fixed-window counters per scope.

    Args:
        store: Atomic counter store.
        ip_rule: General per-IP rule.
        auth_rule: Per-IP rule for authentication endpoints.
        user_rule: Per-user rule.
        logger: Logger for fail-open decisions.
        clock_ms: Epoch-millisecond clock, replaced in tests.
    """

    def __init__(
        self,
        store: RateLimitStoreProtocol,
        *,
        ip_rule: RateLimitRule = DEFAULT_IP_RULE,
        auth_rule: RateLimitRule = DEFAULT_AUTH_RULE,
        user_rule: RateLimitRule = DEFAULT_USER_RULE,
        logger: LoggerProtocol | None = None,
        clock_ms: Callable[[], int] = _now_ms,
    ) -> None:
        self._store = store
        self._ip_rule = ip_rule
        self._auth_rule = auth_rule
        self._user_rule = user_rule
        self._logger = logger
        self._clock_ms = clock_ms

    @staticmethod
    def limit_key(scope: RateLimitScope, identifier: str) -> str:
        """Counter key, e.g. ``ip:10.0.0.1`` or ``user:<uuid>``."""
        return scope.limit_key(identifier)

    def rule_for(self, scope: RateLimitScope, *, is_strict: bool = False) -> RateLimitRule:
        """Rule for a scope; ``is_strict`` selects the auth-endpoint IP rule."""
        if scope is RateLimitScope.USER:
            return self._user_rule
        return self._auth_rule if is_strict else self._ip_rule

    async def check(
        self,
        scope: RateLimitScope,
        identifier: str,
        *,
        is_strict: bool = False,
        now_ms: int | None = None,
    ) -> RateLimitDecision:
        """Decide whether one more request fits in the current window.

        Reads only; nothing is counted.
        """
        rule = self.rule_for(scope, is_strict=is_strict)
        now_ms = self._clock_ms() if now_ms is None else now_ms
        window_start = window_start_for(now_ms, rule.window_ms)
        limit_key = self.limit_key(scope, identifier)

        result = await self._store.get_counter(limit_key, window_start)
        if isinstance(result, Failure):
            self._log_fail_open("check", limit_key, result.error)
            return self._decision(rule, window_start, now_ms, count=0)

        count = result.value.request_count if result.value is not None else 0
        return self._decision(rule, window_start, now_ms, count=count)

    async def record(
        self,
        scope: RateLimitScope,
        identifier: str,
        *,
        is_strict: bool = False,
        now_ms: int | None = None,
    ) -> int | None:
        """Count one request in the current window.

        Returns:
            The new request count, or None if the store failed.
        """
        rule = self.rule_for(scope, is_strict=is_strict)
        now_ms = self._clock_ms() if now_ms is None else now_ms
        window_start = window_start_for(now_ms, rule.window_ms)
        limit_key = self.limit_key(scope, identifier)
        expires_at = (
            window_start + rule.window_ms + RATE_LIMIT_CLEANUP_GRACE_SECONDS * 1000
        )

        result = await self._store.increment(limit_key, window_start, expires_at)
        if isinstance(result, Failure):
            self._log_fail_open("record", limit_key, result.error)
            return None
        return result.value.request_count

    async def hit(
        self,
        scope: RateLimitScope,
        identifier: str,
        *,
        is_strict: bool = False,
        now_ms: int | None = None,
    ) -> RateLimitDecision:
        """Check, and when allowed record, one request.

        Denied requests are not counted. The returned decision reflects
        the count after recording.
        """
        now_ms = self._clock_ms() if now_ms is None else now_ms
        decision = await self.check(
            scope, identifier, is_strict=is_strict, now_ms=now_ms
        )
        if not decision.allowed:
            return decision

        count = await self.record(scope, identifier, is_strict=is_strict, now_ms=now_ms)
        if count is None:
            return decision
        rule = self.rule_for(scope, is_strict=is_strict)
        return RateLimitDecision(
            allowed=True,
            limit=rule.limit,
            remaining=max(0, rule.limit - count),
            reset_seconds=decision.reset_seconds,
            request_count=count,
        )

    async def reset(self, limit_key: str) -> Result[int, RateLimitError]:
        """Remove every window counter for a key (admin / tests)."""
        return await self._store.reset(limit_key)

    def _decision(
        self, rule: RateLimitRule, window_start: int, now_ms: int, *, count: int
    ) -> RateLimitDecision:
        reset_seconds = max(
            1, math.ceil((window_start + rule.window_ms - now_ms) / 1000)
        )
        if count >= rule.limit:
            return RateLimitDecision(
                allowed=False,
                limit=rule.limit,
                remaining=0,
                reset_seconds=reset_seconds,
                retry_after=reset_seconds,
                request_count=count,
            )
        return RateLimitDecision(
            allowed=True,
            limit=rule.limit,
            remaining=rule.limit - count,
            reset_seconds=reset_seconds,
            request_count=count,
        )

    def _log_fail_open(self, operation: str, limit_key: str, error: RateLimitError) -> None:
        if self._logger is not None:
            self._logger.warning(
                "Rate limit store unavailable, failing open",
                operation=operation,
                limit_key=limit_key,
                error_code=error.code.value,
            )
