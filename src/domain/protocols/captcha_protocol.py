"""CAPTCHA verifier protocol.

Registration requires a CAPTCHA token. Whether a token is acceptable is
decided by the configured verifier, never by the registration flow.
"""

from typing import Protocol


class CaptchaVerifierProtocol(Protocol):
    """External CAPTCHA verification capability."""

    async def validate(self, token: str, remote_ip: str | None = None) -> bool:
        """True when the token proves a human completed the challenge."""
        ...
