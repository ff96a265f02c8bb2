"""Password hashing protocol for domain layer.

Adaptive one-way hashing with a fixed work factor. Infrastructure
provides the bcrypt adapter.
"""

from typing import Protocol


class PasswordHashingProtocol(Protocol):
    """Password hashing and verification interface.

    Implementations:
        - BcryptPasswordService: bcrypt, cost factor 12

    Usage:
        password_hash = hasher.hash_password("Correct-Horse-9!")
        hasher.verify_password("Correct-Horse-9!", password_hash)  # True
    """

    def hash_password(self, password: str) -> str:
        """Hash a plaintext password (random salt, bcrypt ``$2b$`` format)."""
        ...

    def verify_password(self, password: str, password_hash: str) -> bool:
        """Verify a plaintext password against a hash.

        Returns:
            True on match. False on mismatch or malformed hash, never raises.
        """
        ...
