"""Request/response schemas for API endpoints.

Usage:
    from src.schemas import LoginRequest, SessionResponse
"""

from src.schemas.auth_schemas import (
    LoginRequest,
    LogoutRequest,
    OkResponse,
    PasswordResetRequest,
    PasswordResetRequestRequest,
    RegisterRequest,
    RegisterResponse,
    ResendVerificationRequest,
    SessionResponse,
    VerifyEmailRequest,
)
from src.schemas.session_schemas import CurrentSessionResponse

__all__ = [
    "CurrentSessionResponse",
    "LoginRequest",
    "LogoutRequest",
    "OkResponse",
    "PasswordResetRequest",
    "PasswordResetRequestRequest",
    "RegisterRequest",
    "RegisterResponse",
    "ResendVerificationRequest",
    "SessionResponse",
    "VerifyEmailRequest",
]
