"""Login handler.

Flow:
1. Validate email format
2. Load account (unknown email -> invalid credentials)
3. Refuse if locked (auto-unlocks an expired lockout)
4. Verify password; on mismatch count the failure (may lock the account)
5. Refuse unverified accounts
6. Clear failure counter, create session
7. Audit LOGIN_ATTEMPT and SESSION_CREATED
8. Return Success(IssuedSession)

Every rejection is audited as LOGIN_ATTEMPT(success=False) with a reason;
a locked rejection uses reason "account_locked" so it is distinct from a
bad password. Messages never reveal remaining attempts or whether the
email exists.
"""

from uuid import UUID

from src.application.commands.auth_commands import LoginUser
from src.application.dtos import IssuedSession
from src.application.services.account_lockout_guard import AccountLockoutGuard
from src.application.services.password_policy_service import PasswordPolicyService
from src.application.services.session_manager import SessionManager
from src.core.enums import ErrorCode
from src.core.errors import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    ValidationError,
)
from src.core.result import Failure, Result, Success
from src.domain.enums import AuditEventType
from src.domain.protocols import AuditProtocol, UserRepository
from src.domain.validators import is_valid_email, normalize_email


class LoginError:
    """Login-specific error messages."""

    INVALID_CREDENTIALS = "Invalid email or password"
    ACCOUNT_LOCKED = (
        "Account locked due to multiple failed login attempts. "
        "Please try again later or reset your password."
    )
    EMAIL_NOT_VERIFIED = "Please verify your email address before logging in"


class LoginUserHandler:
    """Handler for the LoginUser command."""

    def __init__(
        self,
        user_repo: UserRepository,
        password_policy: PasswordPolicyService,
        lockout_guard: AccountLockoutGuard,
        session_manager: SessionManager,
        audit: AuditProtocol,
    ) -> None:
        self._user_repo = user_repo
        self._password_policy = password_policy
        self._lockout_guard = lockout_guard
        self._session_manager = session_manager
        self._audit = audit

    async def handle(self, cmd: LoginUser) -> Result[IssuedSession, DomainError]:
        """Handle login.

        Returns:
            Success(IssuedSession) on success.
            Failure(AuthenticationError) for wrong email or password.
            Failure(AuthorizationError) for locked or unverified accounts.
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

        account = await self._user_repo.find_by_email(email)
        if account is None:
            await self._audit_failure(email, cmd.ip_address, "invalid_credentials")
            return Failure(error=_invalid_credentials())

        if await self._lockout_guard.check_locked(account):
            await self._audit_failure(
                email, cmd.ip_address, "account_locked", user_id=account.id
            )
            return Failure(
                error=AuthorizationError(
                    code=ErrorCode.ACCOUNT_LOCKED,
                    message=LoginError.ACCOUNT_LOCKED,
                    reason="locked",
                )
            )

        verified = await self._password_policy.verify(cmd.password, account.password_hash)
        if isinstance(verified, Failure):
            return Failure(error=verified.error)
        if not verified.value:
            await self._lockout_guard.record_failure(account, ip_address=cmd.ip_address)
            await self._audit_failure(
                email, cmd.ip_address, "invalid_credentials", user_id=account.id
            )
            return Failure(error=_invalid_credentials())

        if not account.verified:
            await self._audit_failure(
                email, cmd.ip_address, "email_not_verified", user_id=account.id
            )
            return Failure(
                error=AuthorizationError(
                    code=ErrorCode.EMAIL_NOT_VERIFIED,
                    message=LoginError.EMAIL_NOT_VERIFIED,
                    reason="unverified",
                )
            )

        await self._lockout_guard.record_success(account)

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
            metadata={"action": "login"},
        )
        await self._audit.record(
            event_type=AuditEventType.SESSION_CREATED,
            user_id=account.id,
            ip_address=cmd.ip_address,
            success=True,
        )
        return Success(value=issued.value)

    async def _audit_failure(
        self,
        email: str,
        ip_address: str | None,
        reason: str,
        *,
        user_id: UUID | None = None,
    ) -> None:
        await self._audit.record(
            event_type=AuditEventType.LOGIN_ATTEMPT,
            user_id=user_id,
            email=email,
            ip_address=ip_address,
            success=False,
            metadata={"action": "login", "reason": reason},
        )


def _invalid_credentials() -> AuthenticationError:
    return AuthenticationError(
        code=ErrorCode.INVALID_CREDENTIALS,
        message=LoginError.INVALID_CREDENTIALS,
    )
