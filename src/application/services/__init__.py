"""Application services shared by the authentication command handlers."""

from src.application.services.account_lockout_guard import AccountLockoutGuard
from src.application.services.password_policy_service import PasswordPolicyService
from src.application.services.rate_limiter import RateLimiter, is_auth_endpoint
from src.application.services.session_manager import SessionManager
from src.application.services.verification_code_issuer import (
    VerificationCodeIssuer,
    generate_code,
)

__all__ = [
    "AccountLockoutGuard",
    "PasswordPolicyService",
    "RateLimiter",
    "SessionManager",
    "VerificationCodeIssuer",
    "generate_code",
    "is_auth_endpoint",
]
