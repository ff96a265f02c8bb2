"""RateLimitCounter domain entity.

One counter per ``(limit_key, window_start)`` pair. Times are epoch
milliseconds so window arithmetic stays in integers.
"""

from dataclasses import dataclass


def window_start_for(now_ms: int, window_ms: int) -> int:
    """Clock-aligned start of the fixed window containing ``now_ms``."""
    return (now_ms // window_ms) * window_ms


@dataclass(frozen=True, slots=True, kw_only=True)
class RateLimitCounter:
    """Request counter for one fixed window.

    Attributes:
        limit_key: Scope and identifier, e.g. ``ip:10.0.0.1`` or ``user:<id>``.
        window_start: Window start in epoch milliseconds.
        request_count: Requests recorded in this window.
        expires_at: Cleanup marker in epoch milliseconds (after window end).
    """

    limit_key: str
    window_start: int
    request_count: int
    expires_at: int
