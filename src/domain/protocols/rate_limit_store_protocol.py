"""Rate limit counter store protocol.

Fixed-window counters keyed by ``(limit_key, window_start)``. The
increment is an atomic initialize-if-absent-else-add operation in the
store; concurrent workers never race on a read-then-write.
"""

from typing import Protocol

from src.core.result import Result
from src.domain.entities.rate_limit_counter import RateLimitCounter
from src.domain.errors import RateLimitError


class RateLimitStoreProtocol(Protocol):
    """Durable counter storage for the rate limiter.

    Implementations:
        - RedisCounterStore: INCR + PEXPIREAT in one transaction
    """

    async def get_counter(
        self, limit_key: str, window_start: int
    ) -> Result[RateLimitCounter | None, RateLimitError]:
        """Read the counter for one window (None if nothing recorded)."""
        ...

    async def increment(
        self, limit_key: str, window_start: int, expires_at: int
    ) -> Result[RateLimitCounter, RateLimitError]:
        """Atomically add one request and set the cleanup marker.

        Args:
            limit_key: Scope and identifier, e.g. ``ip:10.0.0.1``.
            window_start: Window start (epoch ms).
            expires_at: Cleanup marker (epoch ms), past the window end.
        """
        ...

    async def reset(self, limit_key: str) -> Result[int, RateLimitError]:
        """Delete every window counter for a key. Returns counters removed."""
        ...
