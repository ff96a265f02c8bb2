"""AWS SES email service.

boto3 is synchronous; the SES call runs in a worker thread so the event
loop is not blocked.

Usage:
    service = SESEmailService(sender="no-reply@tasklane.io", region="us-east-1")
    result = await service.send("user@example.com", "Subject", "Body")
"""

import asyncio
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from src.core.enums import ErrorCode
from src.core.result import Failure, Result, Success
from src.domain.errors import EmailDeliveryError
from src.domain.protocols.logger_protocol import LoggerProtocol


class SESEmailService:
    """EmailServiceProtocol implementation backed by AWS SES.

    Attributes:
        sender: Verified SES source address.
        client: boto3 SES client.
    """

    def __init__(
        self,
        *,
        sender: str,
        region: str = "us-east-1",
        client: Any | None = None,
        logger: LoggerProtocol | None = None,
    ) -> None:
        self.sender = sender
        self.client = client or boto3.client("ses", region_name=region)
        self._logger = logger

    async def send(
        self, to: str, subject: str, body: str
    ) -> Result[None, EmailDeliveryError]:
        """Send a plain-text email through SES.

        Returns:
            Success(None) with the message accepted by SES, or
            Failure(EmailDeliveryError) carrying the SES error code.
        """
        try:
            response = await asyncio.to_thread(
                self.client.send_email,
                Source=self.sender,
                Destination={"ToAddresses": [to]},
                Message={
                    "Subject": {"Charset": "UTF-8", "Data": subject},
                    "Body": {"Text": {"Charset": "UTF-8", "Data": body}},
                },
            )
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            return self._failure(to, f"SES rejected message: {error_code}", error_code)
        except BotoCoreError as e:
            return self._failure(to, f"SES unreachable: {e}", type(e).__name__)

        if self._logger is not None:
            self._logger.info(
                "Email sent",
                to=to,
                subject=subject,
                message_id=response.get("MessageId", "unknown"),
            )
        return Success(value=None)

    def _failure(
        self, to: str, message: str, provider_code: str
    ) -> Failure[EmailDeliveryError]:
        if self._logger is not None:
            self._logger.warning("Email delivery failed", to=to, provider_code=provider_code)
        return Failure(
            error=EmailDeliveryError(
                code=ErrorCode.EMAIL_DELIVERY_FAILED,
                message=message,
                details={"provider_code": provider_code},
            )
        )
