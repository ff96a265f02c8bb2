"""Authentication commands (CQRS write operations).

Commands represent user intent to change system state.
All commands are immutable (frozen=True) and use keyword-only arguments (kw_only=True).

Pattern:
- Commands are data containers (no logic)
- Handlers execute business logic and return Result types
- ``ip_address`` / ``user_agent`` carry request metadata for sessions
  and the audit trail
"""

from dataclasses import dataclass


@dataclass(frozen=True, kw_only=True)
class RegisterUser:
    """Register a new account.

    The account starts unverified; a verification code is emailed.

    Example:
        >>> command = RegisterUser(
        ...     email="user@example.com",
        ...     password="Correct-Horse-9!",
        ...     captcha_token="tok",
        ... )
        >>> result = await handler.handle(command)
    """

    email: str
    password: str
    captcha_token: str
    ip_address: str | None = None
    user_agent: str | None = None


@dataclass(frozen=True, kw_only=True)
class VerifyEmail:
    """Confirm an email address with its 6-digit code and sign in."""

    email: str
    code: str
    ip_address: str | None = None
    user_agent: str | None = None


@dataclass(frozen=True, kw_only=True)
class ResendVerification:
    """Issue a new verification code, superseding the previous one."""

    email: str
    ip_address: str | None = None


@dataclass(frozen=True, kw_only=True)
class LoginUser:
    """Authenticate with email and password and open a session."""

    email: str
    password: str
    ip_address: str | None = None
    user_agent: str | None = None


@dataclass(frozen=True, kw_only=True)
class LogoutUser:
    """Terminate the session identified by its bearer token."""

    session_token: str
    ip_address: str | None = None


@dataclass(frozen=True, kw_only=True)
class RequestPasswordReset:
    """Email a password reset code if the account exists.

    The outcome is identical whether or not the email is registered.
    """

    email: str
    ip_address: str | None = None


@dataclass(frozen=True, kw_only=True)
class ResetPassword:
    """Set a new password using a reset code."""

    email: str
    code: str
    new_password: str
    ip_address: str | None = None
