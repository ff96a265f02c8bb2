"""Email delivery error types."""

from dataclasses import dataclass

from src.core.errors import DomainError


@dataclass(frozen=True, slots=True, kw_only=True)
class EmailDeliveryError(DomainError):
    """Outbound email could not be handed to the delivery channel.

    Attributes:
        code: ErrorCode.EMAIL_DELIVERY_FAILED.
        message: Human-readable message.
        details: Additional context (provider error code).
    """

    pass
