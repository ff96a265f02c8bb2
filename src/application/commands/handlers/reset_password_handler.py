"""Password reset handler.

Flow:
1. Validate email format
2. Check the reset code (exists, not expired, matches) without consuming it
3. Check new password complexity and compromised list
4. Hash and encrypt the new password
5. Store the hash and clear the reset code in one write
6. Unlock the account (clears failed-login counter)
7. Invalidate every session of the user
8. Audit PASSWORD_CHANGE and SESSION_TERMINATED

The code survives a weak-password rejection so the user can retry with
a stronger password.
"""

from src.application.commands.auth_commands import ResetPassword
from src.application.services.account_lockout_guard import AccountLockoutGuard
from src.application.services.password_policy_service import PasswordPolicyService
from src.application.services.session_manager import SessionManager
from src.application.services.verification_code_issuer import VerificationCodeIssuer
from src.core.enums import ErrorCode
from src.core.errors import DomainError, ValidationError
from src.core.result import Failure, Result, Success
from src.domain.enums import AuditEventType
from src.domain.protocols import AuditProtocol
from src.domain.validators import is_valid_email, normalize_email


class ResetPasswordHandler:
    """Handler for the ResetPassword command."""

    def __init__(
        self,
        code_issuer: VerificationCodeIssuer,
        password_policy: PasswordPolicyService,
        lockout_guard: AccountLockoutGuard,
        session_manager: SessionManager,
        audit: AuditProtocol,
    ) -> None:
        self._code_issuer = code_issuer
        self._password_policy = password_policy
        self._lockout_guard = lockout_guard
        self._session_manager = session_manager
        self._audit = audit

    async def handle(self, cmd: ResetPassword) -> Result[None, DomainError]:
        """Handle password reset.

        Returns:
            Success(None) once the password is replaced.
            Failure(NotFoundError) for unknown accounts or no pending code.
            Failure(ValidationError) for bad, expired or weak input.
        """
        if not is_valid_email(cmd.email):
            return Failure(
                error=ValidationError(
                    code=ErrorCode.INVALID_EMAIL,
                    message="Invalid email format",
                    field="email",
                )
            )
        email = normalize_email(cmd.email)

        checked = await self._code_issuer.check_reset_code(email, cmd.code)
        if isinstance(checked, Failure):
            await self._audit_failure(email, cmd.ip_address, checked.error.code.value)
            return Failure(error=checked.error)

        policy = self._password_policy.check(cmd.new_password, field="new_password")
        if isinstance(policy, Failure):
            await self._audit_failure(email, cmd.ip_address, policy.error.code.value)
            return Failure(error=policy.error)

        password_hash = await self._password_policy.hash(cmd.new_password)
        if isinstance(password_hash, Failure):
            return Failure(error=password_hash.error)

        # Conditional on the stored envelope; a concurrent reset gets CODE_INVALID
        consumed = await self._code_issuer.consume_reset_code(
            email, cmd.code, new_password_hash=password_hash.value
        )
        if isinstance(consumed, Failure):
            await self._audit_failure(email, cmd.ip_address, consumed.error.code.value)
            return Failure(error=consumed.error)
        account = consumed.value

        await self._lockout_guard.unlock(account.id)
        removed = await self._session_manager.invalidate_all(account.id)

        await self._audit.record(
            event_type=AuditEventType.PASSWORD_CHANGE,
            user_id=account.id,
            email=email,
            ip_address=cmd.ip_address,
            success=True,
            metadata={"method": "reset_code"},
        )
        if removed:
            await self._audit.record(
                event_type=AuditEventType.SESSION_TERMINATED,
                user_id=account.id,
                ip_address=cmd.ip_address,
                success=True,
                metadata={"reason": "password_reset", "count": removed},
            )
        return Success(value=None)

    async def _audit_failure(
        self, email: str, ip_address: str | None, reason: str
    ) -> None:
        await self._audit.record(
            event_type=AuditEventType.PASSWORD_CHANGE,
            email=email,
            ip_address=ip_address,
            success=False,
            metadata={"method": "reset_code", "reason": reason},
        )
