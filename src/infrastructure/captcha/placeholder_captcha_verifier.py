"""Placeholder CAPTCHA verifier.

Accepts any non-blank token. Used in development and tests, and until a
real challenge provider is configured.
"""


class PlaceholderCaptchaVerifier:
    """CaptchaVerifierProtocol implementation: non-empty token passes."""

    async def validate(self, token: str, remote_ip: str | None = None) -> bool:
        return bool(token and token.strip())
