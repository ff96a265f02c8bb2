"""AWS Secrets Manager adapter for production secrets.

Implements SecretsProtocol on top of boto3. Secret ids follow
``/tasklane/{environment}/{secret_path}``.

Caching of decoded key material is done by the consumer (the encryption
service keeps a TTL cache keyed by secret id), so this adapter always
asks AWS.
"""

import base64

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from src.core.enums import ErrorCode
from src.core.result import Failure, Result, Success
from src.domain.errors import SecretsError
from src.infrastructure.secrets.base_adapter import BaseSecretsAdapter


class AWSAdapter(BaseSecretsAdapter):
    """Production secrets from AWS Secrets Manager.

    Features:
        - Hierarchical naming: /tasklane/{env}/{category}/{name}
        - Binary secrets returned base64 encoded
        - boto3 standard retry mode for throttling
    """

    def __init__(
        self,
        environment: str,
        region: str = "us-east-1",
        client: object | None = None,
    ) -> None:
        """Initialize AWS Secrets Manager client.

        Args:
            environment: Deployment environment segment of the secret id.
            region: AWS region for secrets.
            client: Pre-built secretsmanager client (tests).
        """
        self.client = client or boto3.client("secretsmanager", region_name=region)
        self.environment = environment

    def secret_id(self, secret_path: str) -> str:
        """Full secret id for a path."""
        return f"/tasklane/{self.environment}/{secret_path}"

    def get_secret(self, secret_path: str) -> Result[str, SecretsError]:
        """Get secret from AWS Secrets Manager.

        Example:
            >>> adapter = AWSAdapter(environment="production")
            >>> adapter.get_secret("security/encryption_key")
            >>> # Fetches /tasklane/production/security/encryption_key
        """
        secret_id = self.secret_id(secret_path)

        try:
            response = self.client.get_secret_value(SecretId=secret_id)
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "")
            if error_code == "ResourceNotFoundException":
                return Failure(
                    error=SecretsError(
                        code=ErrorCode.SECRET_NOT_FOUND,
                        message=f"Secret not found in AWS: {secret_id}",
                    )
                )
            return Failure(
                error=SecretsError(
                    code=ErrorCode.SECRET_ACCESS_DENIED,
                    message=f"Failed to access AWS secret: {secret_id}",
                    details={"aws_error_code": error_code},
                )
            )
        except BotoCoreError as e:
            return Failure(
                error=SecretsError(
                    code=ErrorCode.SECRET_ACCESS_DENIED,
                    message=f"Failed to access AWS secret: {secret_id}",
                    details={"error": str(e)},
                )
            )

        if "SecretString" in response:
            return Success(value=response["SecretString"])
        return Success(value=base64.b64encode(response["SecretBinary"]).decode("ascii"))

    def refresh_cache(self) -> None:
        """No-op: values are not cached by this adapter."""
        pass
