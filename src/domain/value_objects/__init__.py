"""Domain value objects.

Immutable value objects that enforce business constraints.
"""

from src.domain.value_objects.rate_limit_rule import RateLimitDecision, RateLimitRule

__all__ = [
    "RateLimitDecision",
    "RateLimitRule",
]
