"""Static compromised-password checker (adapter).

Implements CompromisedPasswordProtocol with an in-memory list of
well-known weak passwords. Production deployments can swap in an
adapter backed by a breach-corpus service.
"""

from collections.abc import Iterable

from src.core.constants import COMPROMISED_PASSWORDS


class StaticCompromisedPasswordChecker:
    """Case-insensitive membership check against a fixed password list."""

    def __init__(self, passwords: Iterable[str] = COMPROMISED_PASSWORDS) -> None:
        self._passwords = frozenset(p.lower() for p in passwords)

    def is_compromised(self, password: str) -> bool:
        """True when the lower-cased password is on the list.

        Example:
            >>> StaticCompromisedPasswordChecker().is_compromised("PassWord123")
            True
        """
        if not isinstance(password, str):
            return False
        return password.lower() in self._passwords
