"""Domain entities.

Pure dataclasses with business rules and no infrastructure imports.
"""

from src.domain.entities.audit_log_entry import AuditLogEntry
from src.domain.entities.rate_limit_counter import RateLimitCounter
from src.domain.entities.session import Session
from src.domain.entities.user_account import UserAccount

__all__ = [
    "AuditLogEntry",
    "RateLimitCounter",
    "Session",
    "UserAccount",
]
