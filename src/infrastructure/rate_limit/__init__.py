"""Rate limit counter storage."""

from src.infrastructure.rate_limit.redis_counter_store import RedisCounterStore

__all__ = ["RedisCounterStore"]
