"""Transient-fault retry for durable store operations.

Repositories wrap each logical operation in ``StoreRetrier.run``. Faults
that a fresh attempt can plausibly fix (dropped connections, pool
timeouts, serialization failures and deadlocks) are retried with capped
exponential backoff plus jitter:

    delay_ms = min(base_ms * 2**attempt, max_ms)
    sleep    = delay_ms + uniform(0, delay_ms)

Everything else propagates at once. Unique-constraint violations are
turned into ``StoreConflictError`` by the repository, never retried.

When the budget is spent a ``StoreUnavailableError`` is raised carrying
a ``TransientStoreError`` with the attempt count.
"""

import asyncio
import random
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

from sqlalchemy.exc import DBAPIError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.constants import (
    STORE_MAX_RETRIES,
    STORE_RETRY_BASE_MS,
    STORE_RETRY_MAX_MS,
)
from src.core.enums import ErrorCode
from src.domain.errors import StoreUnavailableError, TransientStoreError
from src.domain.protocols.logger_protocol import LoggerProtocol

T = TypeVar("T")

# PostgreSQL serialization_failure / deadlock_detected
_RETRYABLE_SQLSTATES = frozenset({"40001", "40P01"})


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """Retry budget and backoff shape.

    Attributes:
        max_retries: Retries after the first attempt.
        base_delay_ms: Delay before the first retry (before jitter).
        max_delay_ms: Cap on a single delay (before jitter).
    """

    max_retries: int = STORE_MAX_RETRIES
    base_delay_ms: int = STORE_RETRY_BASE_MS
    max_delay_ms: int = STORE_RETRY_MAX_MS

    def delay_ms(self, attempt: int, jitter: float) -> float:
        """Backoff for the given 0-based retry with jitter in [0, 1)."""
        delay = min(self.base_delay_ms * (2**attempt), self.max_delay_ms)
        return delay + jitter * delay


def is_transient(exc: BaseException) -> bool:
    """True if a fresh attempt could succeed."""
    if isinstance(exc, (PoolTimeoutError, OperationalError)):
        return True
    if isinstance(exc, DBAPIError):
        if exc.connection_invalidated:
            return True
        sqlstate = getattr(exc.orig, "sqlstate", None) or getattr(
            exc.orig, "pgcode", None
        )
        return sqlstate in _RETRYABLE_SQLSTATES
    return isinstance(exc, (ConnectionError, TimeoutError))


class StoreRetrier:
    """Runs store operations under a RetryPolicy.

    Args:
        policy: Retry budget (defaults from core constants).
        logger: Optional logger for retry warnings.
        sleep: Awaitable sleep, replaced in tests.
        jitter: Source of uniform [0, 1) jitter, replaced in tests.
    """

    def __init__(
        self,
        policy: RetryPolicy | None = None,
        *,
        logger: LoggerProtocol | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        jitter: Callable[[], float] = random.random,
    ) -> None:
        self._policy = policy or RetryPolicy()
        self._logger = logger
        self._sleep = sleep
        self._jitter = jitter

    @property
    def policy(self) -> RetryPolicy:
        return self._policy

    async def run(
        self,
        operation: str,
        func: Callable[[], Awaitable[T]],
        *,
        session: AsyncSession | None = None,
    ) -> T:
        """Run ``func`` and retry transient faults.

        Args:
            operation: Name used in logs and the final error.
            func: Zero-argument coroutine factory; called once per attempt.
            session: SQLAlchemy session to roll back between attempts.

        Raises:
            StoreUnavailableError: Every attempt failed transiently.
        """
        attempt = 0
        while True:
            try:
                return await func()
            except Exception as exc:
                if not is_transient(exc):
                    raise
                if session is not None:
                    await session.rollback()
                if attempt >= self._policy.max_retries:
                    raise StoreUnavailableError(
                        TransientStoreError(
                            code=ErrorCode.TRANSIENT_STORE_ERROR,
                            message=f"Store operation '{operation}' failed after "
                            f"{attempt + 1} attempts",
                            attempts=attempt + 1,
                            details={"operation": operation},
                        )
                    ) from exc
                delay_ms = self._policy.delay_ms(attempt, self._jitter())
                if self._logger is not None:
                    self._logger.warning(
                        "Transient store fault, retrying",
                        operation=operation,
                        attempt=attempt + 1,
                        delay_ms=round(delay_ms),
                        error_type=type(exc).__name__,
                    )
                await self._sleep(delay_ms / 1000)
                attempt += 1
