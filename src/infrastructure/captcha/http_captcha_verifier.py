"""Siteverify-style CAPTCHA verifier over HTTP.

Posts ``secret``, ``response`` and optional ``remoteip`` as a form to
the configured endpoint (reCAPTCHA / hCaptcha / Turnstile all accept
this shape) and reads ``success`` from the JSON reply.

Fails closed: timeouts, transport errors, non-200 replies and
unparseable bodies all mean "not verified".
"""

import httpx

from src.domain.protocols.logger_protocol import LoggerProtocol


class HttpCaptchaVerifier:
    """CaptchaVerifierProtocol implementation backed by a siteverify API.

    Args:
        verify_url: Provider verification endpoint.
        secret: Server-side shared secret.
        timeout: Request timeout in seconds.
        logger: Optional logger for provider failures.
    """

    def __init__(
        self,
        *,
        verify_url: str,
        secret: str,
        timeout: float = 5.0,
        logger: LoggerProtocol | None = None,
    ) -> None:
        self._verify_url = verify_url
        self._secret = secret
        self._timeout = timeout
        self._logger = logger

    async def validate(self, token: str, remote_ip: str | None = None) -> bool:
        if not token or not token.strip():
            return False

        data = {"secret": self._secret, "response": token}
        if remote_ip:
            data["remoteip"] = remote_ip

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.post(self._verify_url, data=data)
        except httpx.TimeoutException as e:
            self._warn("captcha_verify_timeout", e)
            return False
        except httpx.RequestError as e:
            self._warn("captcha_verify_connection_error", e)
            return False

        if response.status_code != 200:
            self._warn("captcha_verify_bad_status", status_code=response.status_code)
            return False

        try:
            payload = response.json()
        except ValueError as e:
            self._warn("captcha_verify_invalid_json", e)
            return False

        return isinstance(payload, dict) and payload.get("success") is True

    def _warn(
        self, event: str, error: Exception | None = None, **context: object
    ) -> None:
        if self._logger is None:
            return
        if error is not None:
            context["error"] = str(error)
        self._logger.warning(event, **context)
