"""Database models for persistence layer.

SQLAlchemy models mapped to tables. Infrastructure only; the domain layer
never imports them.

Models Organization:
    - user_account.py: Accounts, credentials, codes and lockout state
    - session.py: Sessions keyed by token digest
    - audit_log.py: Append-only security events with retention marker

Note:
    Domain entities (dataclasses) live in src/domain/entities/ and are
    mapped to these models by the repositories.
"""

from src.infrastructure.persistence.models.audit_log import AuditLogModel
from src.infrastructure.persistence.models.session import SessionModel
from src.infrastructure.persistence.models.user_account import UserAccountModel

__all__ = [
    "AuditLogModel",
    "SessionModel",
    "UserAccountModel",
]
