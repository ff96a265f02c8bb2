"""Application commands."""

from src.application.commands.auth_commands import (
    LoginUser,
    LogoutUser,
    RegisterUser,
    RequestPasswordReset,
    ResendVerification,
    ResetPassword,
    VerifyEmail,
)

__all__ = [
    "LoginUser",
    "LogoutUser",
    "RegisterUser",
    "RequestPasswordReset",
    "ResendVerification",
    "ResetPassword",
    "VerifyEmail",
]
