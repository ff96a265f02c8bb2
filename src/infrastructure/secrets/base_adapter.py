"""Base secrets adapter with shared functionality.

Provides the JSON parsing path once for every backend.
"""

import json
from typing import Any

from src.core.enums import ErrorCode
from src.core.result import Failure, Result, Success
from src.domain.errors import SecretsError


class BaseSecretsAdapter:
    """Base adapter with shared secrets functionality.

    Subclasses must implement:
        - get_secret(secret_path: str) -> Result[str, SecretsError]
        - refresh_cache() -> None
    """

    def get_secret(self, secret_path: str) -> Result[str, SecretsError]:
        """Get secret value (must be implemented by subclass)."""
        raise NotImplementedError("Subclass must implement get_secret()")

    def get_secret_json(self, secret_path: str) -> Result[dict[str, Any], SecretsError]:
        """Get secret as a parsed JSON object.

        Returns:
            Success(parsed_dict) if the secret is a JSON object.
            Failure(SecretsError) if not found, access denied, or not a JSON object.
        """
        match self.get_secret(secret_path):
            case Success(value=secret_value):
                try:
                    parsed = json.loads(secret_value)
                except json.JSONDecodeError:
                    parsed = None
                if not isinstance(parsed, dict):
                    return Failure(
                        error=SecretsError(
                            code=ErrorCode.SECRET_INVALID_JSON,
                            message=f"Secret is not a JSON object: {secret_path}",
                        )
                    )
                return Success(value=parsed)
            case Failure(error=error):
                return Failure(error=error)

    def refresh_cache(self) -> None:
        """Clear cache (must be implemented by subclass)."""
        raise NotImplementedError("Subclass must implement refresh_cache()")
