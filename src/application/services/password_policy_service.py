"""Password policy service.

Combines the complexity rules, the compromised-password oracle and the
adaptive hash. Stored hashes are additionally wrapped in an encryption
envelope, so ``hash`` and ``verify`` go through the encryption port.

bcrypt is CPU-bound; hashing and verification run in a worker thread so
concurrent requests keep being served.

Usage:
    policy = PasswordPolicyService(hasher, checker, encryption)

    match policy.check("password1"):
        case Failure(error=error):
            error.errors  # every violated rule, plus the compromised notice
        case Success():
            ...

    stored = (await policy.hash(password)).value
    matches = (await policy.verify(password, stored)).value
"""

import asyncio

from src.core.enums import ErrorCode
from src.core.errors import ValidationError
from src.core.result import Failure, Result, Success
from src.domain.errors import EncryptionError, EncryptionIntegrityError
from src.domain.protocols import (
    CompromisedPasswordProtocol,
    EncryptionProtocol,
    PasswordHashingProtocol,
)
from src.domain.validators import PasswordValidation, validate_password

PASSWORD_COMPROMISED_MESSAGE = (
    "This password is too common or has been exposed in a data breach"
)


class PasswordPolicyService:
    """Password validation and at-rest hashing."""

    def __init__(
        self,
        hasher: PasswordHashingProtocol,
        compromised_checker: CompromisedPasswordProtocol,
        encryption: EncryptionProtocol,
    ) -> None:
        self._hasher = hasher
        self._checker = compromised_checker
        self._encryption = encryption

    def validate(self, password: object) -> PasswordValidation:
        """Evaluate every complexity rule. Never raises."""
        return validate_password(password)

    def is_compromised(self, password: object) -> bool:
        """Case-insensitive weak-password check. Non-strings are never compromised."""
        if not isinstance(password, str) or not password:
            return False
        return self._checker.is_compromised(password)

    def check(
        self, password: object, *, field: str = "password"
    ) -> Result[None, ValidationError]:
        """Complexity and compromised checks as one validation result.

        Returns:
            Success(None) when the password is acceptable.
            Failure(ValidationError) listing all violated rules. The code
            is PASSWORD_TOO_WEAK if any complexity rule failed, otherwise
            PASSWORD_COMPROMISED.
        """
        validation = self.validate(password)
        errors = list(validation.errors)
        compromised = self.is_compromised(password)
        if compromised:
            errors.append(PASSWORD_COMPROMISED_MESSAGE)

        if not errors:
            return Success(value=None)

        code = (
            ErrorCode.PASSWORD_TOO_WEAK
            if not validation.valid
            else ErrorCode.PASSWORD_COMPROMISED
        )
        return Failure(
            error=ValidationError(
                code=code,
                message="Password does not meet security requirements",
                field=field,
                errors=tuple(errors),
            )
        )

    async def hash(self, password: str) -> Result[str, EncryptionError]:
        """bcrypt-hash the password and encrypt the hash for storage."""
        password_hash = await asyncio.to_thread(self._hasher.hash_password, password)
        return await self._encryption.encrypt(password_hash)

    async def verify(
        self, password: str, stored: str
    ) -> Result[bool, EncryptionError | EncryptionIntegrityError]:
        """Decrypt the stored hash and compare the password against it.

        A decryption failure is returned as-is; it is never reported as
        a simple mismatch.
        """
        decrypted = await self._encryption.decrypt(stored)
        if isinstance(decrypted, Failure):
            return Failure(error=decrypted.error)

        matches = await asyncio.to_thread(
            self._hasher.verify_password, password, decrypted.value
        )
        return Success(value=matches)
