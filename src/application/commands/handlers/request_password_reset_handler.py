"""Password reset request handler.

Flow:
1. Normalize email and look up the account
2. Issue a reset code (1 h) and email it, if the account exists
3. Audit PASSWORD_RESET_REQUEST either way
4. Return Success(None)

Security:
- ALWAYS returns success so callers cannot probe which emails exist
- Malformed emails, unknown accounts and delivery failures are only
  visible in the audit log and application logs
"""

from uuid import UUID

from src.application.commands.auth_commands import RequestPasswordReset
from src.application.services.email_templates import password_reset_email
from src.application.services.verification_code_issuer import VerificationCodeIssuer
from src.core.errors import DomainError
from src.core.result import Failure, Result, Success
from src.domain.enums import AuditEventType
from src.domain.protocols import (
    AuditProtocol,
    EmailServiceProtocol,
    LoggerProtocol,
    UserRepository,
)
from src.domain.validators import is_valid_email, normalize_email


class RequestPasswordResetHandler:
    """Handler for the RequestPasswordReset command."""

    def __init__(
        self,
        user_repo: UserRepository,
        code_issuer: VerificationCodeIssuer,
        email_service: EmailServiceProtocol,
        audit: AuditProtocol,
        *,
        logger: LoggerProtocol | None = None,
    ) -> None:
        self._user_repo = user_repo
        self._code_issuer = code_issuer
        self._email_service = email_service
        self._audit = audit
        self._logger = logger

    async def handle(self, cmd: RequestPasswordReset) -> Result[None, DomainError]:
        if not is_valid_email(cmd.email):
            await self._audit_request(cmd.email, cmd.ip_address, "invalid_email_format")
            return Success(value=None)
        email = normalize_email(cmd.email)

        account = await self._user_repo.find_by_email(email)
        if account is None:
            await self._audit_request(email, cmd.ip_address, "user_not_found")
            return Success(value=None)

        code = await self._code_issuer.issue_reset(account)
        if isinstance(code, Failure):
            self._warn("Reset code not issued", account.id, code.error.code.value)
            await self._audit_request(
                email, cmd.ip_address, "code_issue_failed", user_id=account.id
            )
            return Success(value=None)

        message = password_reset_email(code.value, self._code_issuer.reset_ttl)
        sent = await self._email_service.send(email, message.subject, message.body)
        if isinstance(sent, Failure):
            self._warn("Reset email not delivered", account.id, sent.error.code.value)
            await self._audit_request(
                email, cmd.ip_address, "email_delivery_failed", user_id=account.id
            )
            return Success(value=None)

        await self._audit.record(
            event_type=AuditEventType.PASSWORD_RESET_REQUEST,
            user_id=account.id,
            email=email,
            ip_address=cmd.ip_address,
            success=True,
        )
        return Success(value=None)

    async def _audit_request(
        self,
        email: str,
        ip_address: str | None,
        reason: str,
        *,
        user_id: UUID | None = None,
    ) -> None:
        await self._audit.record(
            event_type=AuditEventType.PASSWORD_RESET_REQUEST,
            user_id=user_id,
            email=email,
            ip_address=ip_address,
            success=False,
            metadata={"reason": reason},
        )

    def _warn(self, message: str, user_id: UUID, error_code: str) -> None:
        if self._logger is not None:
            self._logger.warning(message, user_id=str(user_id), error_code=error_code)
