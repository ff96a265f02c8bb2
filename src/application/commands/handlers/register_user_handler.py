"""Registration handler.

Flow:
1. Validate email format
2. Validate CAPTCHA token
3. Check password complexity and compromised list (all violations reported)
4. Check email uniqueness
5. Hash and encrypt password
6. Persist unverified account
7. Issue verification code (24 h) and email it
8. Audit and return Success(user_id)

On failure:
- Audit LOGIN_ATTEMPT(success=False) with the reason
- Return Failure(error)

Architecture:
- Application layer ONLY imports from domain layer (entities, protocols, errors)
- Collaborators are injected via protocols
"""

from datetime import UTC, datetime
from uuid import UUID

from uuid_extensions import uuid7

from src.application.commands.auth_commands import RegisterUser
from src.application.services.email_templates import verification_email
from src.application.services.password_policy_service import PasswordPolicyService
from src.application.services.verification_code_issuer import VerificationCodeIssuer
from src.core.enums import ErrorCode
from src.core.errors import ConflictError, DomainError, UnknownError, ValidationError
from src.core.result import Failure, Result, Success
from src.domain.entities.user_account import UserAccount
from src.domain.enums import AuditEventType
from src.domain.errors import StoreConflictError
from src.domain.protocols import (
    AuditProtocol,
    CaptchaVerifierProtocol,
    EmailServiceProtocol,
    UserRepository,
)
from src.domain.validators import is_valid_email, normalize_email


class RegistrationError:
    """Registration-specific error messages."""

    INVALID_EMAIL = "Invalid email format"
    INVALID_CAPTCHA = "Invalid CAPTCHA. Please try again."
    EMAIL_ALREADY_EXISTS = "Email already registered. Please login or reset password."
    EMAIL_FAILED = "Failed to send verification email"


class RegisterUserHandler:
    """Handler for the RegisterUser command."""

    def __init__(
        self,
        user_repo: UserRepository,
        password_policy: PasswordPolicyService,
        code_issuer: VerificationCodeIssuer,
        captcha: CaptchaVerifierProtocol,
        email_service: EmailServiceProtocol,
        audit: AuditProtocol,
        *,
        app_name: str = "Tasklane",
    ) -> None:
        self._user_repo = user_repo
        self._password_policy = password_policy
        self._code_issuer = code_issuer
        self._captcha = captcha
        self._email_service = email_service
        self._audit = audit
        self._app_name = app_name

    async def handle(self, cmd: RegisterUser) -> Result[UUID, DomainError]:
        """Handle user registration.

        Returns:
            Success(user_id) on successful registration.
            Failure(ValidationError) for bad email, CAPTCHA or password.
            Failure(ConflictError) when the email is taken.
        """
        # Step 1: Email format
        if not is_valid_email(cmd.email):
            await self._audit_failure(cmd, "invalid_email_format")
            return Failure(
                error=ValidationError(
                    code=ErrorCode.INVALID_EMAIL,
                    message=RegistrationError.INVALID_EMAIL,
                    field="email",
                )
            )
        email = normalize_email(cmd.email)

        # Step 2: CAPTCHA
        if not await self._captcha.validate(cmd.captcha_token, cmd.ip_address):
            await self._audit_failure(cmd, "invalid_captcha")
            return Failure(
                error=ValidationError(
                    code=ErrorCode.CAPTCHA_INVALID,
                    message=RegistrationError.INVALID_CAPTCHA,
                    field="captcha_token",
                )
            )

        # Step 3: Password policy
        policy = self._password_policy.check(cmd.password)
        if isinstance(policy, Failure):
            reason = (
                "compromised_password"
                if policy.error.code == ErrorCode.PASSWORD_COMPROMISED
                else "weak_password"
            )
            await self._audit_failure(cmd, reason)
            return policy

        # Step 4: Uniqueness
        if await self._user_repo.exists_by_email(email):
            await self._audit_failure(cmd, "email_already_exists")
            return Failure(error=self._conflict())

        # Step 5: Hash + encrypt
        password_hash = await self._password_policy.hash(cmd.password)
        if isinstance(password_hash, Failure):
            return Failure(error=password_hash.error)

        # Step 6: Persist
        now = datetime.now(UTC)
        account = UserAccount(
            id=uuid7(),
            email=email,
            password_hash=password_hash.value,
            verified=False,
            created_at=now,
            updated_at=now,
        )
        try:
            await self._user_repo.add(account)
        except StoreConflictError:
            # Lost a race with a concurrent registration
            await self._audit_failure(cmd, "email_already_exists")
            return Failure(error=self._conflict())

        # Step 7: Verification code + email
        code = await self._code_issuer.issue_verification(account, now)
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
                    message=RegistrationError.EMAIL_FAILED,
                )
            )

        # Step 8: Audit + return
        await self._audit.record(
            event_type=AuditEventType.LOGIN_ATTEMPT,
            user_id=account.id,
            email=email,
            ip_address=cmd.ip_address,
            success=True,
            metadata={"action": "registration"},
        )
        return Success(value=account.id)

    def _conflict(self) -> ConflictError:
        return ConflictError(
            code=ErrorCode.EMAIL_ALREADY_EXISTS,
            message=RegistrationError.EMAIL_ALREADY_EXISTS,
            resource_type="User",
            conflicting_field="email",
        )

    async def _audit_failure(self, cmd: RegisterUser, reason: str) -> None:
        await self._audit.record(
            event_type=AuditEventType.LOGIN_ATTEMPT,
            email=cmd.email,
            ip_address=cmd.ip_address,
            success=False,
            metadata={"action": "registration", "reason": reason},
        )
