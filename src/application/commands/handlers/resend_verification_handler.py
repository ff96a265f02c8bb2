"""Resend verification code handler.

Flow:
1. Validate email format
2. Load account (NotFoundError if unknown)
3. Refuse if already verified (ConflictError ALREADY_VERIFIED)
4. Issue a new code, superseding the previous one
5. Email it and return Success(None)
"""

from src.application.commands.auth_commands import ResendVerification
from src.application.services.email_templates import verification_email
from src.application.services.verification_code_issuer import VerificationCodeIssuer
from src.core.enums import ErrorCode
from src.core.errors import (
    ConflictError,
    DomainError,
    NotFoundError,
    UnknownError,
    ValidationError,
)
from src.core.result import Failure, Result, Success
from src.domain.protocols import EmailServiceProtocol, UserRepository
from src.domain.validators import is_valid_email, normalize_email


class ResendVerificationHandler:
    """Handler for the ResendVerification command."""

    def __init__(
        self,
        user_repo: UserRepository,
        code_issuer: VerificationCodeIssuer,
        email_service: EmailServiceProtocol,
        *,
        app_name: str = "Tasklane",
    ) -> None:
        self._user_repo = user_repo
        self._code_issuer = code_issuer
        self._email_service = email_service
        self._app_name = app_name

    async def handle(self, cmd: ResendVerification) -> Result[None, DomainError]:
        if not is_valid_email(cmd.email):
            return Failure(
                error=ValidationError(
                    code=ErrorCode.INVALID_EMAIL,
                    message="Invalid email format",
                    field="email",
                )
            )
        email = normalize_email(cmd.email)

        account = await self._user_repo.find_by_email(email)
        if account is None:
            return Failure(
                error=NotFoundError(
                    code=ErrorCode.USER_NOT_FOUND,
                    message="User not found",
                    resource_type="User",
                    resource_id=email,
                )
            )
        if account.verified:
            return Failure(
                error=ConflictError(
                    code=ErrorCode.ALREADY_VERIFIED,
                    message="Email already verified. Please login.",
                    resource_type="User",
                    conflicting_field="verified",
                )
            )

        code = await self._code_issuer.issue_verification(account)
        if isinstance(code, Failure):
            return Failure(error=code.error)

        message = verification_email(
            code.value, self._code_issuer.verification_ttl, self._app_name
        )
        sent = await self._email_service.send(email, message.subject, message.body)
        if isinstance(sent, Failure):
            return Failure(
                error=UnknownError(
                    code=ErrorCode.EMAIL_DELIVERY_FAILED,
                    message="Failed to send verification email",
                )
            )
        return Success(value=None)
