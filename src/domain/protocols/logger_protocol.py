"""LoggerProtocol definition for structured logging.

Backend-agnostic structured logging port. Implementations emit a message
plus key-value context and MUST NOT receive secrets: passwords, session
tokens, one-time codes and key material are never passed as context.

Levels:
    - DEBUG: Diagnostic detail (development only)
    - INFO: Normal security events (login, session issued)
    - WARNING: Degraded behavior (fail-open, swallowed audit failure)
    - ERROR: Operation failed, process continues
    - CRITICAL: Key material unavailable, nothing can be decrypted

Usage:
    from src.core.container import get_logger

    logger = get_logger()
    logger.info("Session created", user_id=str(user_id))

    request_logger = logger.bind(trace_id=trace_id)
    request_logger.warning("Audit write failed", event_type="LOGIN_ATTEMPT")
"""

from __future__ import annotations

from typing import Any, Protocol


class LoggerProtocol(Protocol):
    """Protocol for structured logging adapters."""

    def debug(self, message: str, /, **context: Any) -> None:
        """Log a debug-level message."""
        ...

    def info(self, message: str, /, **context: Any) -> None:
        """Log an info-level message."""
        ...

    def warning(self, message: str, /, **context: Any) -> None:
        """Log a warning-level message."""
        ...

    def error(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log an error-level message.

        Args:
            message: Human-readable message (avoid f-strings; use context).
            error: Optional exception; adapters add error_type and error_message.
            **context: Structured key-value context fields.
        """
        ...

    def critical(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log a critical-level message for failures needing immediate attention."""
        ...

    def bind(self, **context: Any) -> LoggerProtocol:
        """Return a new logger with context included in every call.

        The original logger is unchanged.

        Example:
            request_logger = logger.bind(trace_id=trace_id, path=request.url.path)
            request_logger.info("Login rejected")
        """
        ...

    def with_context(self, **context: Any) -> LoggerProtocol:
        """Alias for bind()."""
        ...
