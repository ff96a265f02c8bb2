"""Container module - Centralized dependency injection.

Re-exports every factory so callers import from one place:

    from src.core.container import get_logger, get_login_user_handler

The container is organized into modules by layer:
- infrastructure: App-scoped adapters (logging, Redis, db, secrets, ...)
- repositories: Request-scoped repository factories
- services: Request-scoped application services
- auth_handlers: Authentication handler factories
"""

# Infrastructure services
from src.core.container.infrastructure import (
    get_audit,
    get_audit_session,
    get_captcha_verifier,
    get_compromised_password_checker,
    get_database,
    get_db_session,
    get_email_service,
    get_encryption_service,
    get_logger,
    get_password_service,
    get_rate_limiter,
    get_redis,
    get_retention_sweeper,
    get_secrets,
    get_store_retrier,
)

# Repositories
from src.core.container.repositories import (
    get_session_repository,
    get_user_repository,
)

# Application services
from src.core.container.services import (
    get_code_issuer,
    get_lockout_guard,
    get_password_policy,
    get_session_manager,
)

# Auth handlers
from src.core.container.auth_handlers import (
    get_login_user_handler,
    get_logout_user_handler,
    get_register_user_handler,
    get_request_password_reset_handler,
    get_resend_verification_handler,
    get_reset_password_handler,
    get_verify_email_handler,
)

__all__ = [
    # Infrastructure
    "get_logger",
    "get_redis",
    "get_database",
    "get_secrets",
    "get_encryption_service",
    "get_password_service",
    "get_compromised_password_checker",
    "get_store_retrier",
    "get_retention_sweeper",
    "get_email_service",
    "get_captcha_verifier",
    "get_rate_limiter",
    "get_db_session",
    "get_audit_session",
    "get_audit",
    # Repositories
    "get_user_repository",
    "get_session_repository",
    # Services
    "get_password_policy",
    "get_session_manager",
    "get_lockout_guard",
    "get_code_issuer",
    # Auth handlers
    "get_register_user_handler",
    "get_verify_email_handler",
    "get_resend_verification_handler",
    "get_login_user_handler",
    "get_logout_user_handler",
    "get_request_password_reset_handler",
    "get_reset_password_handler",
]
