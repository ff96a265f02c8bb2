"""Domain error codes.

Closed set of machine-readable codes carried by every DomainError. The
presentation layer maps them to HTTP status codes and problem-detail
type URIs, so renaming a value is a breaking API change.
"""

from enum import Enum


class ErrorCode(Enum):
    """Machine-readable error codes for all domain failures."""

    # Input validation
    INVALID_INPUT = "invalid_input"
    INVALID_EMAIL = "invalid_email"
    INVALID_PASSWORD = "invalid_password"
    PASSWORD_TOO_WEAK = "password_too_weak"
    PASSWORD_COMPROMISED = "password_compromised"
    CAPTCHA_INVALID = "captcha_invalid"

    # Account state
    USER_NOT_FOUND = "user_not_found"
    EMAIL_ALREADY_EXISTS = "email_already_exists"
    ALREADY_VERIFIED = "already_verified"

    # Authentication / authorization
    INVALID_CREDENTIALS = "invalid_credentials"
    EMAIL_NOT_VERIFIED = "email_not_verified"
    ACCOUNT_LOCKED = "account_locked"
    SESSION_INVALID = "session_invalid"

    # One-time codes
    CODE_NOT_FOUND = "code_not_found"
    CODE_INVALID = "code_invalid"
    CODE_EXPIRED = "code_expired"

    # Rate limiting
    RATE_LIMIT_EXCEEDED = "rate_limit_exceeded"
    RATE_LIMIT_CHECK_FAILED = "rate_limit_check_failed"
    RATE_LIMIT_RESET_FAILED = "rate_limit_reset_failed"

    # Encryption / secrets
    ENCRYPTION_KEY_INVALID = "encryption_key_invalid"
    ENCRYPTION_FAILED = "encryption_failed"
    DECRYPTION_FAILED = "decryption_failed"
    SECRET_NOT_FOUND = "secret_not_found"
    SECRET_ACCESS_DENIED = "secret_access_denied"
    SECRET_INVALID_JSON = "secret_invalid_json"

    # Infrastructure
    AUDIT_RECORD_FAILED = "audit_record_failed"
    EMAIL_DELIVERY_FAILED = "email_delivery_failed"
    TRANSIENT_STORE_ERROR = "transient_store_error"
    STORE_ERROR = "store_error"
    UNKNOWN_ERROR = "unknown_error"
