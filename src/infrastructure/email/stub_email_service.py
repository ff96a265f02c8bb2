"""Stub email service for development and tests.

Nothing leaves the process. Messages are appended to ``outbox`` and the
recipient and subject are logged; bodies carry one-time codes and are
never logged.
"""

from dataclasses import dataclass

from src.core.result import Result, Success
from src.domain.errors import EmailDeliveryError
from src.domain.protocols.logger_protocol import LoggerProtocol


@dataclass(frozen=True, slots=True)
class SentEmail:
    """Message captured by the stub."""

    to: str
    subject: str
    body: str


class StubEmailService:
    """EmailServiceProtocol implementation that only records messages."""

    def __init__(self, logger: LoggerProtocol | None = None) -> None:
        self._logger = logger
        self.outbox: list[SentEmail] = []

    async def send(
        self, to: str, subject: str, body: str
    ) -> Result[None, EmailDeliveryError]:
        self.outbox.append(SentEmail(to=to, subject=subject, body=body))
        if self._logger is not None:
            self._logger.info("Email captured (stub)", to=to, subject=subject)
        return Success(value=None)
