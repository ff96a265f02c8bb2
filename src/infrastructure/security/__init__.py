"""Security infrastructure adapters.

- BcryptPasswordService: adaptive password hashing
- EncryptionService: AES-256-GCM envelope encryption and keyed digests
- StaticCompromisedPasswordChecker: known-weak password list
"""

from src.infrastructure.security.bcrypt_password_service import BcryptPasswordService
from src.infrastructure.security.compromised_password_checker import (
    StaticCompromisedPasswordChecker,
)
from src.infrastructure.security.encryption_service import (
    EncryptionService,
    parse_key_material,
)

__all__ = [
    "BcryptPasswordService",
    "EncryptionService",
    "StaticCompromisedPasswordChecker",
    "parse_key_material",
]
