"""Environment variables adapter for local development secrets.

Implements SecretsProtocol using the process environment.
"""

import os

from src.core.enums import ErrorCode
from src.core.result import Failure, Result, Success
from src.domain.errors import SecretsError
from src.infrastructure.secrets.base_adapter import BaseSecretsAdapter


class EnvAdapter(BaseSecretsAdapter):
    """Local development secrets from environment variables.

    Converts secret paths to environment variable names:
        - 'security/encryption_key' -> SECURITY_ENCRYPTION_KEY

    Explicit ``overrides`` win over the environment, which lets the
    container feed values already loaded by Settings.
    """

    def __init__(self, overrides: dict[str, str] | None = None) -> None:
        """Initialize environment adapter.

        Args:
            overrides: Secret path to value map checked before the environment.
        """
        self._overrides = dict(overrides or {})

    def get_secret(self, secret_path: str) -> Result[str, SecretsError]:
        """Get secret from overrides or environment variable.

        Example:
            >>> adapter = EnvAdapter()
            >>> adapter.get_secret("security/encryption_key")
            >>> # Success("...") if SECURITY_ENCRYPTION_KEY is set
        """
        if secret_path in self._overrides:
            return Success(value=self._overrides[secret_path])

        env_var_name = secret_path.replace("/", "_").upper()
        secret_value = os.getenv(env_var_name)

        if secret_value is None:
            return Failure(
                error=SecretsError(
                    code=ErrorCode.SECRET_NOT_FOUND,
                    message=f"Environment variable not found: {env_var_name}",
                    details={"secret_path": secret_path},
                )
            )

        return Success(value=secret_value)

    def refresh_cache(self) -> None:
        """No-op: the environment is read on every call."""
        pass
