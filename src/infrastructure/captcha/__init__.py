"""CAPTCHA verifier adapters."""

from src.infrastructure.captcha.http_captcha_verifier import HttpCaptchaVerifier
from src.infrastructure.captcha.placeholder_captcha_verifier import (
    PlaceholderCaptchaVerifier,
)

__all__ = ["HttpCaptchaVerifier", "PlaceholderCaptchaVerifier"]
