"""Domain errors package.

Exports all domain-level error classes for convenient importing.

Usage:
    from src.domain.errors import AuditError, RateLimitExceededError
"""

from src.domain.errors.audit_error import AuditError
from src.domain.errors.email_error import EmailDeliveryError
from src.domain.errors.encryption_error import (
    EncryptionError,
    EncryptionIntegrityError,
)
from src.domain.errors.rate_limit_error import RateLimitError, RateLimitExceededError
from src.domain.errors.secrets_error import SecretsError
from src.domain.errors.store_error import (
    StoreConflictError,
    StoreUnavailableError,
    TransientStoreError,
)

__all__ = [
    "AuditError",
    "EmailDeliveryError",
    "EncryptionError",
    "EncryptionIntegrityError",
    "RateLimitError",
    "RateLimitExceededError",
    "SecretsError",
    "StoreConflictError",
    "StoreUnavailableError",
    "TransientStoreError",
]
