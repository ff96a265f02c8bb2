"""Plain-text security email templates."""

from dataclasses import dataclass
from datetime import timedelta


@dataclass(frozen=True, slots=True)
class EmailMessage:
    """Rendered subject and body."""

    subject: str
    body: str


def _hours(ttl: timedelta) -> str:
    hours = max(1, int(ttl.total_seconds() // 3600))
    return f"{hours} hour" if hours == 1 else f"{hours} hours"


def verification_email(code: str, ttl: timedelta, app_name: str) -> EmailMessage:
    return EmailMessage(
        subject="Verify Your Email Address",
        body=(
            f"Welcome to {app_name}!\n\n"
            f"Your verification code is: {code}\n\n"
            f"This code will expire in {_hours(ttl)}.\n\n"
            "If you did not create an account, please ignore this email."
        ),
    )


def password_reset_email(code: str, ttl: timedelta) -> EmailMessage:
    return EmailMessage(
        subject="Password Reset Request",
        body=(
            "You have requested to reset your password.\n\n"
            f"Your password reset code is: {code}\n\n"
            f"This code will expire in {_hours(ttl)}.\n\n"
            "If you did not request a password reset, please ignore this email."
        ),
    )


def account_locked_email(duration: timedelta) -> EmailMessage:
    minutes = int(duration.total_seconds() // 60)
    return EmailMessage(
        subject="Account Locked - Security Alert",
        body=(
            "Your account has been temporarily locked due to multiple failed "
            "login attempts.\n\n"
            f"The account will be automatically unlocked in {minutes} minutes.\n\n"
            "If you did not attempt to log in, please reset your password "
            "immediately.\n\n"
            "You can also unlock your account immediately by completing the "
            "password reset process."
        ),
    )
