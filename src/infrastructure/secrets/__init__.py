"""Secrets infrastructure package.

Adapters implementing SecretsProtocol, selected by the container from
``SECRETS_BACKEND``:

- EnvAdapter: Local development (environment variables)
- AWSAdapter: Production (AWS Secrets Manager)

Secret naming: /tasklane/{env}/{category}/{name}
"""

from src.infrastructure.secrets.aws_adapter import AWSAdapter
from src.infrastructure.secrets.base_adapter import BaseSecretsAdapter
from src.infrastructure.secrets.env_adapter import EnvAdapter

__all__ = [
    "BaseSecretsAdapter",
    "EnvAdapter",
    "AWSAdapter",
]
