"""Application service dependency factories.

Request-scoped services that wrap request-scoped repositories:
- SessionManager
- AccountLockoutGuard
- VerificationCodeIssuer

PasswordPolicyService holds no per-request state and is a singleton.
"""

from datetime import timedelta
from functools import lru_cache
from typing import TYPE_CHECKING

from fastapi import Depends

from src.core.config import settings
from src.core.container.infrastructure import (
    get_audit,
    get_compromised_password_checker,
    get_email_service,
    get_encryption_service,
    get_logger,
    get_password_service,
)
from src.core.container.repositories import (
    get_session_repository,
    get_user_repository,
)

if TYPE_CHECKING:
    from src.application.services import (
        AccountLockoutGuard,
        PasswordPolicyService,
        SessionManager,
        VerificationCodeIssuer,
    )
    from src.domain.protocols import AuditProtocol, SessionRepository, UserRepository


@lru_cache()
def get_password_policy() -> "PasswordPolicyService":
    """Get password policy service singleton (app-scoped)."""
    from src.application.services import PasswordPolicyService

    return PasswordPolicyService(
        hasher=get_password_service(),
        compromised_checker=get_compromised_password_checker(),
        encryption=get_encryption_service(),
    )


async def get_session_manager(
    sessions: "SessionRepository" = Depends(get_session_repository),
) -> "SessionManager":
    """Get session manager (request-scoped)."""
    from src.application.services import SessionManager

    return SessionManager(
        sessions,
        get_encryption_service(),
        inactivity_timeout=settings.session_inactivity_timeout,
        max_lifetime=settings.session_max_lifetime,
        logger=get_logger(),
    )


async def get_lockout_guard(
    users: "UserRepository" = Depends(get_user_repository),
    audit: "AuditProtocol" = Depends(get_audit),
) -> "AccountLockoutGuard":
    """Get account lockout guard (request-scoped)."""
    from src.application.services import AccountLockoutGuard

    return AccountLockoutGuard(
        users,
        audit=audit,
        email=get_email_service(),
        max_attempts=settings.lockout_max_failed_attempts,
        window=settings.lockout_window,
        lockout_duration=settings.lockout_duration,
        logger=get_logger(),
    )


async def get_code_issuer(
    users: "UserRepository" = Depends(get_user_repository),
) -> "VerificationCodeIssuer":
    """Get verification/reset code issuer (request-scoped)."""
    from src.application.services import VerificationCodeIssuer

    return VerificationCodeIssuer(
        users,
        get_encryption_service(),
        verification_ttl=timedelta(hours=settings.verification_code_ttl_hours),
        reset_ttl=timedelta(hours=settings.password_reset_code_ttl_hours),
    )
