"""Email verification handler.

Flow:
1. Validate email format
2. Consume the verification code (already verified accounts pass)
3. Create a session for the account
4. Audit LOGIN_ATTEMPT(action=verification) and SESSION_CREATED
5. Return Success(IssuedSession)

Errors:
- NotFoundError: unknown account or no pending code
- ValidationError: CODE_EXPIRED (code left in place) or CODE_INVALID
"""

from src.application.commands.auth_commands import VerifyEmail
from src.application.dtos import IssuedSession
from src.application.services.session_manager import SessionManager
from src.application.services.verification_code_issuer import VerificationCodeIssuer
from src.core.enums import ErrorCode
from src.core.errors import DomainError, ValidationError
from src.core.result import Failure, Result, Success
from src.domain.enums import AuditEventType
from src.domain.protocols import AuditProtocol
from src.domain.validators import is_valid_email, normalize_email

_FAILURE_REASONS = {
    ErrorCode.CODE_EXPIRED: "code_expired",
    ErrorCode.CODE_INVALID: "invalid_code",
    ErrorCode.CODE_NOT_FOUND: "no_code",
    ErrorCode.USER_NOT_FOUND: "user_not_found",
}


class VerifyEmailHandler:
    """Handler for the VerifyEmail command."""

    def __init__(
        self,
        code_issuer: VerificationCodeIssuer,
        session_manager: SessionManager,
        audit: AuditProtocol,
    ) -> None:
        self._code_issuer = code_issuer
        self._session_manager = session_manager
        self._audit = audit

    async def handle(self, cmd: VerifyEmail) -> Result[IssuedSession, DomainError]:
        if not is_valid_email(cmd.email):
            return Failure(
                error=ValidationError(
                    code=ErrorCode.INVALID_EMAIL,
                    message="Invalid email format",
                    field="email",
                )
            )
        email = normalize_email(cmd.email)

        verified = await self._code_issuer.verify_code(email, cmd.code)
        if isinstance(verified, Failure):
            await self._audit.record(
                event_type=AuditEventType.LOGIN_ATTEMPT,
                email=email,
                ip_address=cmd.ip_address,
                success=False,
                metadata={
                    "action": "verification",
                    "reason": _FAILURE_REASONS.get(verified.error.code, "error"),
                },
            )
            return Failure(error=verified.error)

        account = verified.value
        issued = await self._session_manager.create(
            account.id, cmd.ip_address, cmd.user_agent
        )
        if isinstance(issued, Failure):
            return Failure(error=issued.error)

        await self._audit.record(
            event_type=AuditEventType.LOGIN_ATTEMPT,
            user_id=account.id,
            email=email,
            ip_address=cmd.ip_address,
            success=True,
            metadata={"action": "verification"},
        )
        await self._audit.record(
            event_type=AuditEventType.SESSION_CREATED,
            user_id=account.id,
            ip_address=cmd.ip_address,
            success=True,
        )
        return Success(value=issued.value)
