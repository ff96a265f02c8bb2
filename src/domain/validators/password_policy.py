"""Password complexity rules.

Every rule is evaluated and every violation reported, so a client can
show the full list in one round trip. Pure functions, no I/O.
"""

from dataclasses import dataclass

from src.core.constants import PASSWORD_MIN_LENGTH, PASSWORD_SPECIAL_CHARACTERS

PASSWORD_REQUIRED = "Password is required"
PASSWORD_TOO_SHORT = f"Password must be at least {PASSWORD_MIN_LENGTH} characters long"
PASSWORD_MISSING_UPPERCASE = "Password must contain at least one uppercase letter"
PASSWORD_MISSING_LOWERCASE = "Password must contain at least one lowercase letter"
PASSWORD_MISSING_DIGIT = "Password must contain at least one digit"
PASSWORD_MISSING_SPECIAL = (
    "Password must contain at least one special character "
    f"({PASSWORD_SPECIAL_CHARACTERS})"
)


@dataclass(frozen=True, slots=True)
class PasswordValidation:
    """Result of checking a password against the complexity rules.

    Attributes:
        valid: True when no rule is violated.
        errors: Violated rules in evaluation order.
    """

    valid: bool
    errors: tuple[str, ...]


def validate_password(password: object) -> PasswordValidation:
    """Check a candidate password against all complexity rules.

    Empty or non-string input yields a single "required" error instead of
    raising.

    Example:
        >>> validate_password("password1").errors
        ('Password must be at least 12 characters long',
         'Password must contain at least one uppercase letter',
         'Password must contain at least one special character (...)')
    """
    if not isinstance(password, str) or not password:
        return PasswordValidation(valid=False, errors=(PASSWORD_REQUIRED,))

    errors: list[str] = []
    if len(password) < PASSWORD_MIN_LENGTH:
        errors.append(PASSWORD_TOO_SHORT)
    if not any(c.isupper() for c in password):
        errors.append(PASSWORD_MISSING_UPPERCASE)
    if not any(c.islower() for c in password):
        errors.append(PASSWORD_MISSING_LOWERCASE)
    if not any(c.isdigit() for c in password):
        errors.append(PASSWORD_MISSING_DIGIT)
    if not any(c in PASSWORD_SPECIAL_CHARACTERS for c in password):
        errors.append(PASSWORD_MISSING_SPECIAL)

    return PasswordValidation(valid=not errors, errors=tuple(errors))
