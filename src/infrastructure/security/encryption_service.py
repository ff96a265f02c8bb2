"""Envelope encryption service for confidential fields.

AES-256-GCM with a data key fetched from the secret store. Each call to
``encrypt`` uses a fresh random IV, so envelopes are non-deterministic;
``digest`` provides the deterministic keyed hash used for lookups.

Security Properties:
    - Confidentiality: Only holder of the data key can decrypt
    - Integrity: Tampering is detected via the GCM authentication tag
    - Uniqueness: Random IV per encryption prevents pattern analysis

Envelope:
    JSON text {"ciphertext": b64, "iv": b64, "authTag": b64}

Key material:
    The secret is either the raw key text or a JSON object with ``key``
    or ``encryptionKey``. A 64-character value is hex, anything else is
    base64. The decoded key must be exactly 32 bytes. Decoded keys are
    cached per secret id for a bounded TTL (default 5 minutes).
"""

import asyncio
import base64
import binascii
import hashlib
import hmac
import json
import os
import time
from collections.abc import Callable
from dataclasses import dataclass

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

from src.core.constants import (
    AES_GCM_IV_LENGTH,
    AES_GCM_TAG_LENGTH,
    AES_KEY_LENGTH,
    HEX_KEY_LENGTH,
    SESSION_LOOKUP_KEY_INFO,
)
from src.core.enums import ErrorCode
from src.core.result import Failure, Result, Success
from src.domain.errors import EncryptionError, EncryptionIntegrityError
from src.domain.protocols.secrets_protocol import SecretsProtocol


@dataclass(frozen=True, slots=True)
class _CachedKey:
    """Decoded data key plus its derived lookup key."""

    data_key: bytes
    lookup_key: bytes
    fetched_at: float


def parse_key_material(secret_value: str) -> Result[bytes, EncryptionError]:
    """Decode a data key from its secret-store representation.

    Example:
        >>> parse_key_material("00" * 32)
        Success(value=b'\\x00' * 32)
        >>> parse_key_material('{"key": "' + "ab" * 32 + '"}')
        Success(value=b'\\xab' * 32)
    """
    raw = secret_value.strip()
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        parsed = None
    if isinstance(parsed, dict):
        raw = str(parsed.get("key") or parsed.get("encryptionKey") or "").strip()

    try:
        if len(raw) == HEX_KEY_LENGTH:
            key = bytes.fromhex(raw)
        else:
            key = base64.b64decode(raw, validate=True)
    except (ValueError, binascii.Error):
        return Failure(
            error=EncryptionError(
                code=ErrorCode.ENCRYPTION_KEY_INVALID,
                message="Encryption key is neither hex nor base64",
            )
        )

    if len(key) != AES_KEY_LENGTH:
        return Failure(
            error=EncryptionError(
                code=ErrorCode.ENCRYPTION_KEY_INVALID,
                message=(
                    f"Encryption key must be exactly {AES_KEY_LENGTH} bytes "
                    f"(256 bits), got {len(key)} bytes"
                ),
                details={
                    "expected_length": AES_KEY_LENGTH,
                    "actual_length": len(key),
                },
            )
        )
    return Success(value=key)


class EncryptionService:
    """AES-256-GCM envelope encryption with a cached secret-store key.

    The service holds no mutable state besides the read-mostly key cache;
    one instance is shared by every request in the process.

    Usage:
        >>> service = EncryptionService(
        ...     secrets=get_secrets(),
        ...     key_secret_id="security/encryption_key",
        ... )
        >>> match await service.encrypt("123456"):
        ...     case Success(value=envelope):
        ...         account.verification_code = envelope
        ...     case Failure(error=error):
        ...         ...

    Thread Safety:
        AESGCM instances are safe to share; cache writes replace whole
        entries.
    """

    IV_SIZE = AES_GCM_IV_LENGTH
    TAG_SIZE = AES_GCM_TAG_LENGTH

    def __init__(
        self,
        secrets: SecretsProtocol,
        *,
        key_secret_id: str,
        cache_ttl_seconds: float = 300,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the service.

        Args:
            secrets: Secret store holding the data key.
            key_secret_id: Secret identifier of the data key.
            cache_ttl_seconds: How long a decoded key is reused.
            clock: Monotonic time source in seconds.
        """
        self._secrets = secrets
        self._key_secret_id = key_secret_id
        self._cache_ttl = cache_ttl_seconds
        self._clock = clock
        self._cache: dict[str, _CachedKey] = {}

    @staticmethod
    def generate_key() -> str:
        """Generate a new random data key as 64 hex characters."""
        return os.urandom(AES_KEY_LENGTH).hex()

    def clear_cache(self) -> None:
        """Forget cached keys so the next call refetches from the store."""
        self._cache.clear()

    async def _get_key(self) -> Result[_CachedKey, EncryptionError]:
        """Return the cached key for the configured secret, refetching on expiry."""
        cached = self._cache.get(self._key_secret_id)
        if cached is not None and self._clock() - cached.fetched_at < self._cache_ttl:
            return Success(value=cached)

        secret_result = await asyncio.to_thread(
            self._secrets.get_secret, self._key_secret_id
        )
        match secret_result:
            case Failure(error=secret_error):
                return Failure(
                    error=EncryptionError(
                        code=ErrorCode.ENCRYPTION_KEY_INVALID,
                        message="Encryption key unavailable from secret store",
                        details={
                            "secret_id": self._key_secret_id,
                            "cause": secret_error.code.value,
                        },
                    )
                )
            case Success(value=secret_value):
                pass

        match parse_key_material(secret_value):
            case Failure(error=key_error):
                return Failure(error=key_error)
            case Success(value=data_key):
                lookup_key = HKDF(
                    algorithm=hashes.SHA256(),
                    length=AES_KEY_LENGTH,
                    salt=None,
                    info=SESSION_LOOKUP_KEY_INFO,
                ).derive(data_key)
                entry = _CachedKey(
                    data_key=data_key,
                    lookup_key=lookup_key,
                    fetched_at=self._clock(),
                )
                self._cache[self._key_secret_id] = entry
                return Success(value=entry)

    async def encrypt(self, plaintext: str) -> Result[str, EncryptionError]:
        """Encrypt a non-empty string into a serialized envelope.

        Returns:
            Success(envelope_json) on success.
            Failure(EncryptionError) on empty input or key failure.
        """
        if not isinstance(plaintext, str) or plaintext == "":
            return Failure(
                error=EncryptionError(
                    code=ErrorCode.INVALID_INPUT,
                    message="Plaintext must be a non-empty string",
                )
            )

        match await self._get_key():
            case Failure(error=error):
                return Failure(error=error)
            case Success(value=key):
                pass

        iv = os.urandom(self.IV_SIZE)
        sealed = AESGCM(key.data_key).encrypt(
            iv, plaintext.encode("utf-8"), associated_data=None
        )
        ciphertext, auth_tag = sealed[: -self.TAG_SIZE], sealed[-self.TAG_SIZE :]

        envelope = {
            "ciphertext": base64.b64encode(ciphertext).decode("ascii"),
            "iv": base64.b64encode(iv).decode("ascii"),
            "authTag": base64.b64encode(auth_tag).decode("ascii"),
        }
        return Success(value=json.dumps(envelope, separators=(",", ":")))

    async def decrypt(
        self, envelope: str
    ) -> Result[str, EncryptionError | EncryptionIntegrityError]:
        """Verify and decrypt a serialized envelope.

        Returns:
            Success(plaintext) on a valid envelope.
            Failure(EncryptionIntegrityError) if the envelope is malformed,
            the tag does not verify, or the key is wrong.
            Failure(EncryptionError) if the key cannot be obtained.
        """
        try:
            parts = json.loads(envelope)
            ciphertext = base64.b64decode(parts["ciphertext"], validate=True)
            iv = base64.b64decode(parts["iv"], validate=True)
            auth_tag = base64.b64decode(parts["authTag"], validate=True)
        except (TypeError, KeyError, ValueError, binascii.Error):
            return Failure(
                error=EncryptionIntegrityError(
                    code=ErrorCode.DECRYPTION_FAILED,
                    message="Encrypted value is not a valid envelope",
                )
            )

        if len(iv) != self.IV_SIZE or len(auth_tag) != self.TAG_SIZE:
            return Failure(
                error=EncryptionIntegrityError(
                    code=ErrorCode.DECRYPTION_FAILED,
                    message="Envelope has invalid IV or authentication tag length",
                )
            )

        match await self._get_key():
            case Failure(error=error):
                return Failure(error=error)
            case Success(value=key):
                pass

        try:
            plaintext = AESGCM(key.data_key).decrypt(
                iv, ciphertext + auth_tag, associated_data=None
            )
        except InvalidTag:
            return Failure(
                error=EncryptionIntegrityError(
                    code=ErrorCode.DECRYPTION_FAILED,
                    message="Decryption failed: invalid key or tampered data",
                )
            )

        try:
            return Success(value=plaintext.decode("utf-8"))
        except UnicodeDecodeError:
            return Failure(
                error=EncryptionIntegrityError(
                    code=ErrorCode.DECRYPTION_FAILED,
                    message="Decrypted value is not valid UTF-8",
                )
            )

    async def digest(self, value: str) -> Result[str, EncryptionError]:
        """HMAC-SHA256 (hex) of a value under a key derived from the data key.

        Deterministic for a given data key, which makes it usable as a
        store lookup key where ``encrypt`` is not.
        """
        match await self._get_key():
            case Failure(error=error):
                return Failure(error=error)
            case Success(value=key):
                return Success(
                    value=hmac.new(
                        key.lookup_key, value.encode("utf-8"), hashlib.sha256
                    ).hexdigest()
                )
