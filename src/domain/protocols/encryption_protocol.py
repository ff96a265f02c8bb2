"""Encryption protocol (port) for field-level envelope encryption.

Every confidential field (password hashes, one-time codes, session
tokens) passes through this port before it reaches the store.

Envelope format:
    JSON text ``{"ciphertext": ..., "iv": ..., "authTag": ...}`` with
    base64 values. A fresh IV is used for every call, so encrypting the
    same plaintext twice yields different envelopes. Use ``digest`` for
    anything that must be looked up by value.
"""

from typing import Protocol

from src.core.result import Result
from src.domain.errors import EncryptionError, EncryptionIntegrityError


class EncryptionProtocol(Protocol):
    """Authenticated symmetric encryption with a secret-store managed key."""

    async def encrypt(self, plaintext: str) -> Result[str, EncryptionError]:
        """Encrypt a non-empty string into a serialized envelope."""
        ...

    async def decrypt(
        self, envelope: str
    ) -> Result[str, EncryptionError | EncryptionIntegrityError]:
        """Decrypt an envelope after verifying its authentication tag.

        Returns:
            Success(plaintext) on a valid envelope.
            Failure(EncryptionIntegrityError) on tampering, wrong key or
            malformed envelope. Failure(EncryptionError) when the key
            cannot be obtained.
        """
        ...

    async def digest(self, value: str) -> Result[str, EncryptionError]:
        """Deterministic keyed digest (hex) usable as a lookup key."""
        ...
