"""Email checks shared by the authentication handlers.

Handlers check format themselves (rather than in schemas) so a bad
address is a 400 with a domain error code, not a 422.
"""

import re

EMAIL_PATTERN = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+"
    r"@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*$"
)
"""Simplified RFC 5322 address pattern."""


def normalize_email(email: str) -> str:
    """Trim surrounding whitespace and lower-case an address."""
    return email.strip().lower()


def is_valid_email(email: object) -> bool:
    """Check address format without raising.

    Example:
        >>> is_valid_email("user@example.com")
        True
        >>> is_valid_email("user@")
        False
    """
    if not isinstance(email, str) or not email.strip():
        return False
    return EMAIL_PATTERN.match(email.strip()) is not None
