"""Encryption error types.

EncryptionIntegrityError is the integrity failure of authenticated
encryption: a tampered envelope, a truncated tag or the wrong key. Any
operation that receives one must abort rather than continue with
partial data.
"""

from dataclasses import dataclass

from src.core.errors import DomainError


@dataclass(frozen=True, slots=True, kw_only=True)
class EncryptionError(DomainError):
    """Encryption failed (bad key material, empty plaintext, key fetch failure)."""

    pass


@dataclass(frozen=True, slots=True, kw_only=True)
class EncryptionIntegrityError(DomainError):
    """Authentication tag check failed or envelope is malformed."""

    pass
