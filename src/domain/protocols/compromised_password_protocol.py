"""Compromised password oracle protocol.

A pure predicate over a candidate password. The default adapter checks a
static seed list; a breach-corpus service can replace it without any
change to callers.
"""

from typing import Protocol


class CompromisedPasswordProtocol(Protocol):
    """Known-weak password check."""

    def is_compromised(self, password: str) -> bool:
        """True when the password (case-insensitive) is known to be weak."""
        ...
