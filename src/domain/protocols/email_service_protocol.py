"""EmailServiceProtocol - outbound email dispatcher port.

Message composition lives in the application layer; adapters only
deliver a subject and plain-text body to one recipient.

Implementations:
    - StubEmailService: logs the message (development/tests)
    - SESEmailService: AWS SES (production)
"""

from typing import Protocol

from src.core.result import Result
from src.domain.errors import EmailDeliveryError


class EmailServiceProtocol(Protocol):
    """Protocol for email delivery."""

    async def send(
        self,
        to: str,
        subject: str,
        body: str,
    ) -> Result[None, EmailDeliveryError]:
        """Send a plain-text email.

        Args:
            to: Recipient address.
            subject: Subject line.
            body: Plain-text body.

        Returns:
            Success(None) once the channel accepted the message.
            Failure(EmailDeliveryError) otherwise.
        """
        ...
