"""Rate limit scope types.

A scope decides which identifier a fixed-window counter is keyed on.

Key Formats:
    IP: ip:{address}
    USER: user:{user_id}

Usage:
    from src.domain.enums import RateLimitScope

    limit_key = RateLimitScope.IP.limit_key("10.0.0.1")  # "ip:10.0.0.1"
"""

from enum import Enum


class RateLimitScope(str, Enum):
    """Identifier families used for rate limit counters."""

    IP = "ip"
    """Client IP address. Used for every request, stricter on auth endpoints."""

    USER = "user"
    """Authenticated user id. Used when a valid session is presented."""

    def limit_key(self, identifier: str) -> str:
        """Build the counter key for an identifier in this scope."""
        return f"{self.value}:{identifier}"
