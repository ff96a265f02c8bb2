"""Authentication handler dependency factories.

Request-scoped handler instances for the credential lifecycle:
- Registration, email verification, verification resend
- Login, logout
- Password reset (request and reset)

Collaborators come from FastAPI ``Depends`` so a request shares one
database session across repositories, and tests can swap any layer
through ``app.dependency_overrides``.
"""

from typing import TYPE_CHECKING

from fastapi import Depends

from src.core.config import settings
from src.core.container.infrastructure import (
    get_audit,
    get_captcha_verifier,
    get_email_service,
    get_logger,
)
from src.core.container.repositories import get_user_repository
from src.core.container.services import (
    get_code_issuer,
    get_lockout_guard,
    get_password_policy,
    get_session_manager,
)

if TYPE_CHECKING:
    from src.application.commands.handlers.login_user_handler import LoginUserHandler
    from src.application.commands.handlers.logout_user_handler import LogoutUserHandler
    from src.application.commands.handlers.register_user_handler import (
        RegisterUserHandler,
    )
    from src.application.commands.handlers.request_password_reset_handler import (
        RequestPasswordResetHandler,
    )
    from src.application.commands.handlers.resend_verification_handler import (
        ResendVerificationHandler,
    )
    from src.application.commands.handlers.reset_password_handler import (
        ResetPasswordHandler,
    )
    from src.application.commands.handlers.verify_email_handler import (
        VerifyEmailHandler,
    )
    from src.application.services import (
        AccountLockoutGuard,
        PasswordPolicyService,
        SessionManager,
        VerificationCodeIssuer,
    )
    from src.domain.protocols import AuditProtocol, UserRepository


# ============================================================================
# Authentication Handler Factories
# ============================================================================


async def get_register_user_handler(
    user_repo: "UserRepository" = Depends(get_user_repository),
    code_issuer: "VerificationCodeIssuer" = Depends(get_code_issuer),
    audit: "AuditProtocol" = Depends(get_audit),
) -> "RegisterUserHandler":
    """Get RegisterUser command handler (request-scoped).

    Usage:
        @router.post("/register")
        async def register(
            handler: RegisterUserHandler = Depends(get_register_user_handler),
        ):
            result = await handler.handle(command)
    """
    from src.application.commands.handlers.register_user_handler import (
        RegisterUserHandler,
    )

    return RegisterUserHandler(
        user_repo=user_repo,
        password_policy=get_password_policy(),
        code_issuer=code_issuer,
        captcha=get_captcha_verifier(),
        email_service=get_email_service(),
        audit=audit,
        app_name=settings.app_name,
    )


async def get_verify_email_handler(
    code_issuer: "VerificationCodeIssuer" = Depends(get_code_issuer),
    session_manager: "SessionManager" = Depends(get_session_manager),
    audit: "AuditProtocol" = Depends(get_audit),
) -> "VerifyEmailHandler":
    """Get VerifyEmail command handler (request-scoped)."""
    from src.application.commands.handlers.verify_email_handler import (
        VerifyEmailHandler,
    )

    return VerifyEmailHandler(
        code_issuer=code_issuer,
        session_manager=session_manager,
        audit=audit,
    )


async def get_resend_verification_handler(
    user_repo: "UserRepository" = Depends(get_user_repository),
    code_issuer: "VerificationCodeIssuer" = Depends(get_code_issuer),
) -> "ResendVerificationHandler":
    """Get ResendVerification command handler (request-scoped)."""
    from src.application.commands.handlers.resend_verification_handler import (
        ResendVerificationHandler,
    )

    return ResendVerificationHandler(
        user_repo=user_repo,
        code_issuer=code_issuer,
        email_service=get_email_service(),
        app_name=settings.app_name,
    )


async def get_login_user_handler(
    user_repo: "UserRepository" = Depends(get_user_repository),
    lockout_guard: "AccountLockoutGuard" = Depends(get_lockout_guard),
    session_manager: "SessionManager" = Depends(get_session_manager),
    audit: "AuditProtocol" = Depends(get_audit),
) -> "LoginUserHandler":
    """Get LoginUser command handler (request-scoped).

    The lockout guard shares the user repository and audit adapter with
    the handler through FastAPI's per-request dependency cache.
    """
    from src.application.commands.handlers.login_user_handler import (
        LoginUserHandler,
    )

    return LoginUserHandler(
        user_repo=user_repo,
        password_policy=get_password_policy(),
        lockout_guard=lockout_guard,
        session_manager=session_manager,
        audit=audit,
    )


async def get_logout_user_handler(
    session_manager: "SessionManager" = Depends(get_session_manager),
    audit: "AuditProtocol" = Depends(get_audit),
) -> "LogoutUserHandler":
    """Get LogoutUser command handler (request-scoped)."""
    from src.application.commands.handlers.logout_user_handler import (
        LogoutUserHandler,
    )

    return LogoutUserHandler(session_manager=session_manager, audit=audit)


async def get_request_password_reset_handler(
    user_repo: "UserRepository" = Depends(get_user_repository),
    code_issuer: "VerificationCodeIssuer" = Depends(get_code_issuer),
    audit: "AuditProtocol" = Depends(get_audit),
) -> "RequestPasswordResetHandler":
    """Get RequestPasswordReset command handler (request-scoped)."""
    from src.application.commands.handlers.request_password_reset_handler import (
        RequestPasswordResetHandler,
    )

    return RequestPasswordResetHandler(
        user_repo=user_repo,
        code_issuer=code_issuer,
        email_service=get_email_service(),
        audit=audit,
        logger=get_logger(),
    )


async def get_reset_password_handler(
    code_issuer: "VerificationCodeIssuer" = Depends(get_code_issuer),
    lockout_guard: "AccountLockoutGuard" = Depends(get_lockout_guard),
    session_manager: "SessionManager" = Depends(get_session_manager),
    audit: "AuditProtocol" = Depends(get_audit),
) -> "ResetPasswordHandler":
    """Get ResetPassword command handler (request-scoped)."""
    from src.application.commands.handlers.reset_password_handler import (
        ResetPasswordHandler,
    )

    return ResetPasswordHandler(
        code_issuer=code_issuer,
        password_policy=get_password_policy(),
        lockout_guard=lockout_guard,
        session_manager=session_manager,
        audit=audit,
    )
