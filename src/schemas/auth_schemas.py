"""Authentication request/response schemas.

Pydantic models for API request validation and response serialization.
Kept separate from domain entities - these are HTTP-layer concerns.

Email and code fields are plain strings here; format rules belong to
the handlers so every rejection is a 400 problem details response with
a domain error code.

Endpoints:
    POST /api/v1/auth/register
    POST /api/v1/auth/verify
    POST /api/v1/auth/resend-verification
    POST /api/v1/auth/login
    POST /api/v1/auth/logout
    POST /api/v1/auth/password-reset-request
    POST /api/v1/auth/password-reset
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from src.core.constants import PASSWORD_MIN_LENGTH

PASSWORD_RULES = (
    f"{PASSWORD_MIN_LENGTH}+ chars, upper, lower, digit, special char; "
    "not a known compromised password"
)


# =============================================================================
# Registration
# =============================================================================


class RegisterRequest(BaseModel):
    """Request schema for registration.

    POST /api/v1/auth/register
    Returns: 201 Created
    """

    email: str = Field(
        ...,
        max_length=320,
        description="User's email address",
        examples=["user@example.com"],
    )
    password: str = Field(
        ...,
        max_length=128,
        description=f"Password ({PASSWORD_RULES})",
        examples=["SecurePass123!"],
    )
    captcha_token: str = Field(
        default="",
        description="CAPTCHA response token",
        examples=["03AGdBq25..."],
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "email": "user@example.com",
                "password": "SecurePass123!",
                "captcha_token": "03AGdBq25...",
            }
        }
    )


class RegisterResponse(BaseModel):
    """Response schema for registration (201 Created)."""

    user_id: UUID = Field(..., description="Created user's ID")
    message: str = Field(
        default="Registration successful. Please check your email to verify your account.",
        description="Success message",
    )


# =============================================================================
# Email verification
# =============================================================================


class VerifyEmailRequest(BaseModel):
    """Request schema for email verification.

    POST /api/v1/auth/verify
    Returns: 200 OK with a new session
    """

    email: str = Field(..., max_length=320, examples=["user@example.com"])
    code: str = Field(..., max_length=16, description="6-digit code", examples=["042917"])


class ResendVerificationRequest(BaseModel):
    """Request schema for resending the verification code."""

    email: str = Field(..., max_length=320, examples=["user@example.com"])


# =============================================================================
# Login / logout
# =============================================================================


class LoginRequest(BaseModel):
    """Request schema for login.

    POST /api/v1/auth/login
    Returns: 200 OK
    """

    email: str = Field(..., max_length=320, examples=["user@example.com"])
    password: str = Field(..., max_length=128, examples=["SecurePass123!"])


class SessionResponse(BaseModel):
    """Issued session (login and verification)."""

    session_token: str = Field(..., description="Opaque bearer token")
    expires_at: datetime = Field(..., description="Current expiry (slides on use)")
    user_id: UUID = Field(..., description="Session owner")
    token_type: str = Field(
        default="bearer", description="Token type for Authorization header"
    )


class LogoutRequest(BaseModel):
    """Request schema for logout.

    The token may come from the body or from ``Authorization: Bearer``.
    """

    session_token: str | None = Field(default=None, description="Session to end")


# =============================================================================
# Password reset
# =============================================================================


class PasswordResetRequestRequest(BaseModel):
    """Request schema for requesting a reset code.

    POST /api/v1/auth/password-reset-request
    Returns: 200 OK whether or not the email exists
    """

    email: str = Field(..., max_length=320, examples=["user@example.com"])


class PasswordResetRequest(BaseModel):
    """Request schema for resetting a password with a code.

    POST /api/v1/auth/password-reset
    """

    email: str = Field(..., max_length=320, examples=["user@example.com"])
    code: str = Field(..., max_length=16, examples=["318604"])
    new_password: str = Field(
        ...,
        max_length=128,
        description=f"New password ({PASSWORD_RULES})",
        examples=["N3wSecurePass!"],
    )


# =============================================================================
# Generic
# =============================================================================


class OkResponse(BaseModel):
    """Acknowledgement body for operations with nothing to return."""

    ok: bool = Field(default=True)
    message: str | None = Field(default=None, description="Human-readable note")
