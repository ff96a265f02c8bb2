"""Redis-backed fixed-window counter store.

Each ``(limit_key, window_start)`` pair is one Redis hash:

    rate_limit:{limit_key}:{window_start} -> {count, expires_at}

``increment`` runs HINCRBY + HSET + PEXPIREAT inside one MULTI/EXEC
pipeline, so concurrent workers never race on a read-then-write and the
counter is created on first use. PEXPIREAT is set past the window end
so Redis purges the key itself.

Failure policy:
    Every method returns Failure(RateLimitError) on Redis errors. The
    rate limiter above this store decides to fail open.
"""

from typing import Any

from redis.asyncio import Redis
from redis.exceptions import RedisError

from src.core.constants import RATE_LIMIT_KEY_PREFIX
from src.core.enums import ErrorCode
from src.core.result import Failure, Result, Success
from src.domain.entities.rate_limit_counter import RateLimitCounter
from src.domain.errors import RateLimitError

_COUNT_FIELD = "count"
_EXPIRES_FIELD = "expires_at"


def counter_key(limit_key: str, window_start: int) -> str:
    """Redis key for one window of one limit key."""
    return f"{RATE_LIMIT_KEY_PREFIX}:{limit_key}:{window_start}"


def _as_int(raw: Any) -> int:
    return int(raw.decode("utf-8") if isinstance(raw, bytes) else raw)


class RedisCounterStore:
    """Redis implementation of RateLimitStoreProtocol.

    Args:
        redis_client: An async Redis client (redis.asyncio.Redis compatible).
    """

    def __init__(self, *, redis_client: Redis) -> None:  # type: ignore[type-arg]
        self.redis = redis_client

    async def get_counter(
        self, limit_key: str, window_start: int
    ) -> Result[RateLimitCounter | None, RateLimitError]:
        """Read one window counter without modifying it."""
        try:
            raw = await self.redis.hgetall(counter_key(limit_key, window_start))
        except RedisError as exc:
            return self._failure(ErrorCode.RATE_LIMIT_CHECK_FAILED, limit_key, exc)

        if not raw:
            return Success(value=None)
        fields = {
            (k.decode("utf-8") if isinstance(k, bytes) else k): v
            for k, v in raw.items()
        }
        return Success(
            value=RateLimitCounter(
                limit_key=limit_key,
                window_start=window_start,
                request_count=_as_int(fields.get(_COUNT_FIELD, 0)),
                expires_at=_as_int(fields.get(_EXPIRES_FIELD, 0)),
            )
        )

    async def increment(
        self, limit_key: str, window_start: int, expires_at: int
    ) -> Result[RateLimitCounter, RateLimitError]:
        """Atomically add one request to the window counter."""
        key = counter_key(limit_key, window_start)
        try:
            pipe = self.redis.pipeline(transaction=True)
            pipe.hincrby(key, _COUNT_FIELD, 1)
            pipe.hset(key, _EXPIRES_FIELD, expires_at)
            pipe.pexpireat(key, expires_at)
            count, _, _ = await pipe.execute()
        except RedisError as exc:
            return self._failure(ErrorCode.RATE_LIMIT_CHECK_FAILED, limit_key, exc)

        return Success(
            value=RateLimitCounter(
                limit_key=limit_key,
                window_start=window_start,
                request_count=int(count),
                expires_at=expires_at,
            )
        )

    async def reset(self, limit_key: str) -> Result[int, RateLimitError]:
        """Delete all window counters for a key.

        Unlike checks, reset reports real errors to callers.
        """
        try:
            keys = [
                key
                async for key in self.redis.scan_iter(
                    match=f"{RATE_LIMIT_KEY_PREFIX}:{limit_key}:*"
                )
            ]
            if not keys:
                return Success(value=0)
            removed = await self.redis.delete(*keys)
            return Success(value=int(removed))
        except RedisError as exc:
            return self._failure(ErrorCode.RATE_LIMIT_RESET_FAILED, limit_key, exc)

    def _failure(
        self, code: ErrorCode, limit_key: str, exc: Exception
    ) -> Failure[RateLimitError]:
        return Failure(
            error=RateLimitError(
                code=code,
                message=f"Rate limit store error for '{limit_key}': {exc}",
                details={"limit_key": limit_key, "error_type": type(exc).__name__},
            )
        )
