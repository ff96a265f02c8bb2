"""Rate limit rule and decision value objects.

Fixed-window limiting: at most ``limit`` requests per clock-aligned
window of ``window_seconds``. A burst straddling a window boundary can
reach ``2 * limit`` requests within one window length; this is accepted
in exchange for one counter per key per window.

Usage:
    from src.domain.value_objects import RateLimitRule
    from src.domain.enums import RateLimitScope

    rule = RateLimitRule(
        name="ip_auth",
        scope=RateLimitScope.IP,
        limit=10,
        window_seconds=60,
    )
"""

from dataclasses import dataclass

from src.domain.enums.rate_limit_scope import RateLimitScope


@dataclass(frozen=True, slots=True, kw_only=True)
class RateLimitRule:
    """One fixed-window quota.

    Attributes:
        name: Rule label used in logs and audit metadata.
        scope: Identifier family the counter is keyed on.
        limit: Requests allowed per window.
        window_seconds: Window length in seconds.

    Raises:
        ValueError: If limit or window_seconds is not positive.
    """

    name: str
    scope: RateLimitScope
    limit: int
    window_seconds: int

    def __post_init__(self) -> None:
        if self.limit <= 0:
            raise ValueError(f"limit must be positive, got {self.limit}")
        if self.window_seconds <= 0:
            raise ValueError(
                f"window_seconds must be positive, got {self.window_seconds}"
            )

    @property
    def window_ms(self) -> int:
        """Window length in milliseconds."""
        return self.window_seconds * 1000


@dataclass(frozen=True, slots=True, kw_only=True)
class RateLimitDecision:
    """Outcome of a rate limit check.

    Attributes:
        allowed: Whether the request may proceed.
        limit: Requests allowed in the window.
        remaining: Requests left in the window before this one.
        reset_seconds: Seconds until the current window ends.
        retry_after: Seconds to wait when denied, None when allowed.
        request_count: Requests already recorded in the window.
    """

    allowed: bool
    limit: int
    remaining: int
    reset_seconds: int
    retry_after: int | None = None
    request_count: int = 0
