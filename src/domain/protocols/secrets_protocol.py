"""Secrets management protocol (port).

Read-only access to an external secret store. Provisioning and rotation
are operator tasks outside this service.

Implementations:
    - EnvAdapter: Local development (environment variables)
    - AWSAdapter: Production (AWS Secrets Manager)
"""

from typing import Protocol

from src.core.result import Result
from src.domain.errors import SecretsError


class SecretsProtocol(Protocol):
    """Protocol for secret store backends.

    Calls are synchronous (boto3 is blocking). Async callers run them in a
    worker thread.
    """

    def get_secret(self, secret_path: str) -> Result[str, SecretsError]:
        """Get a single secret value.

        Args:
            secret_path: Path like 'security/encryption_key'.

        Returns:
            Success(secret_value) if found.
            Failure(SecretsError) if not found or access denied.
        """
        ...

    def get_secret_json(self, secret_path: str) -> Result[dict[str, str], SecretsError]:
        """Get a secret parsed as a JSON object.

        Returns:
            Success(parsed_json) if valid JSON object.
            Failure(SecretsError) if not found, access denied, or invalid JSON.
        """
        ...

    def refresh_cache(self) -> None:
        """Drop any values the adapter cached, so rotations are picked up."""
        ...
