"""Domain enums.

Usage:
    from src.domain.enums import AuditEventType, RateLimitScope
"""

from src.domain.enums.audit_event_type import AuditEventType
from src.domain.enums.rate_limit_scope import RateLimitScope

__all__ = [
    "AuditEventType",
    "RateLimitScope",
]
