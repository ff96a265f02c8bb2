"""Security audit event types.

Values are persisted in the audit log, so they are part of the stored
data format.

Usage:
    from src.domain.enums import AuditEventType

    await audit.record(
        event_type=AuditEventType.LOGIN_ATTEMPT,
        email="user@example.com",
        ip_address="203.0.113.7",
        success=False,
        metadata={"reason": "invalid_credentials"},
    )
"""

from enum import Enum


class AuditEventType(str, Enum):
    """Security events recorded by the audit logger."""

    LOGIN_ATTEMPT = "LOGIN_ATTEMPT"
    """Any login outcome (success, bad password, locked, unverified)."""

    PASSWORD_CHANGE = "PASSWORD_CHANGE"
    """Password replaced through the reset flow."""

    PASSWORD_RESET_REQUEST = "PASSWORD_RESET_REQUEST"
    """Reset code requested (recorded whether or not the email exists)."""

    ACCOUNT_LOCKOUT = "ACCOUNT_LOCKOUT"
    """Account locked after too many failed logins."""

    SESSION_CREATED = "SESSION_CREATED"
    """Session issued after login or email verification."""

    SESSION_TERMINATED = "SESSION_TERMINATED"
    """Session ended by logout or password reset."""

    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"
    """Request rejected by the rate limiter."""
