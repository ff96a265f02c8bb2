"""Validators package exports."""

from src.domain.validators.functions import is_valid_email, normalize_email
from src.domain.validators.password_policy import (
    PasswordValidation,
    validate_password,
)

__all__ = [
    "PasswordValidation",
    "is_valid_email",
    "normalize_email",
    "validate_password",
]
