"""Domain protocols (ports) package.

This package contains protocol definitions that the domain layer needs.
Infrastructure adapters implement these protocols without inheritance.

IMPORTANT: Re-exports are ONLY for protocols defined in this package.

Usage:
    from src.domain.protocols import PasswordHashingProtocol, UserRepository
"""

# Service protocols
from src.domain.protocols.audit_protocol import AuditProtocol
from src.domain.protocols.captcha_protocol import CaptchaVerifierProtocol
from src.domain.protocols.compromised_password_protocol import (
    CompromisedPasswordProtocol,
)
from src.domain.protocols.email_service_protocol import EmailServiceProtocol
from src.domain.protocols.encryption_protocol import EncryptionProtocol
from src.domain.protocols.logger_protocol import LoggerProtocol
from src.domain.protocols.password_hashing_protocol import PasswordHashingProtocol
from src.domain.protocols.rate_limit_store_protocol import RateLimitStoreProtocol
from src.domain.protocols.secrets_protocol import SecretsProtocol

# Repository protocols
from src.domain.protocols.session_repository import SessionRepository
from src.domain.protocols.user_repository import UserRepository

__all__ = [
    # Service protocols
    "AuditProtocol",
    "CaptchaVerifierProtocol",
    "CompromisedPasswordProtocol",
    "EmailServiceProtocol",
    "EncryptionProtocol",
    "LoggerProtocol",
    "PasswordHashingProtocol",
    "RateLimitStoreProtocol",
    "SecretsProtocol",
    # Repository protocols
    "SessionRepository",
    "UserRepository",
]
