"""Centralized constants for internal implementation details.

This module contains fixed security policy values that are NOT
environment-specific. Tunable durations and limits live in
`src/core/config.py`; the defaults there mirror the values below.

Categories:
- Token and key lengths
- Password policy
- One-time codes
- Rate limiting
- Store retry
- HTTP security headers

Example:
    >>> from src.core.constants import SESSION_TOKEN_BYTES, BEARER_PREFIX
    >>> token = secrets.token_urlsafe(SESSION_TOKEN_BYTES)
"""

# =============================================================================
# Token and Key Lengths
# =============================================================================

SESSION_TOKEN_BYTES: int = 32
"""Random bytes behind each session token (256 bits of entropy)."""

AES_KEY_LENGTH: int = 32
"""AES-256 encryption key length in bytes."""

AES_GCM_IV_LENGTH: int = 12
"""GCM initialization vector length in bytes (96 bits, NIST recommendation)."""

AES_GCM_TAG_LENGTH: int = 16
"""GCM authentication tag length in bytes."""

HEX_KEY_LENGTH: int = AES_KEY_LENGTH * 2
"""Length of a hex-encoded AES-256 key."""

BCRYPT_ROUNDS_DEFAULT: int = 12
"""Default bcrypt work factor (cost parameter)."""

SESSION_LOOKUP_KEY_INFO: bytes = b"tasklane/session-lookup-key/v1"
"""HKDF context label deriving the session lookup HMAC key from the data key."""


# =============================================================================
# Password Policy
# =============================================================================

PASSWORD_MIN_LENGTH: int = 12
"""Minimum accepted password length."""

PASSWORD_SPECIAL_CHARACTERS: str = "!@#$%^&*()-+=[]{}|;:,.<>?"
"""Characters that satisfy the special-character rule."""

COMPROMISED_PASSWORDS: frozenset[str] = frozenset(
    {
        "password",
        "password123",
        "123456",
        "12345678",
        "qwerty",
        "abc123",
        "monkey",
        "1234567",
        "letmein",
        "trustno1",
        "dragon",
        "baseball",
        "iloveyou",
        "master",
        "sunshine",
        "ashley",
        "bailey",
        "passw0rd",
        "shadow",
        "123123",
        "654321",
        "superman",
        "qazwsx",
        "michael",
        "football",
    }
)
"""Seed list of well-known weak passwords (lower case)."""


# =============================================================================
# One-time Codes
# =============================================================================

ONE_TIME_CODE_DIGITS: int = 6
"""Number of decimal digits in verification and password reset codes."""


# =============================================================================
# Rate Limiting
# =============================================================================

RATE_LIMIT_KEY_PREFIX: str = "rate_limit"
"""Redis key namespace for fixed-window counters."""

RATE_LIMIT_CLEANUP_GRACE_SECONDS: int = 60
"""How long a counter outlives its window before Redis expires it."""

AUTH_ENDPOINTS: tuple[str, ...] = (
    "/register",
    "/login",
    "/verify",
    "/password-reset-request",
    "/password-reset",
    "/resend-verification",
)
"""Path suffixes that get the stricter authentication rate limit."""


# =============================================================================
# Store Retry
# =============================================================================

STORE_MAX_RETRIES: int = 3
"""Retries after the first attempt for transient store faults."""

STORE_RETRY_BASE_MS: int = 100
"""Initial backoff delay in milliseconds."""

STORE_RETRY_MAX_MS: int = 5000
"""Upper bound for a single backoff delay in milliseconds."""


# =============================================================================
# Prefixes
# =============================================================================

BEARER_PREFIX: str = "Bearer "
"""HTTP Authorization header prefix for Bearer tokens."""


# =============================================================================
# HTTP Security Headers
# =============================================================================

SECURITY_HEADERS: dict[str, str] = {
    "Content-Security-Policy": "default-src 'self'",
    "X-Frame-Options": "DENY",
    "X-Content-Type-Options": "nosniff",
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "X-XSS-Protection": "1; mode=block",
    "Permissions-Policy": "geolocation=(), microphone=(), camera=()",
}
"""Headers attached to every HTTP response."""
