# mypy: disable-error-code="arg-type"
"""Infrastructure dependency factories.

Application-scoped singletons for core infrastructure services:
- Logging (structlog console)
- Redis client (rate-limit counters)
- Database (PostgreSQL)
- Secrets (env/AWS)
- Encryption (AES-256-GCM)
- Password hashing (bcrypt) and compromised-password checks
- Email (stub/AWS SES)
- CAPTCHA (placeholder/HTTP siteverify)
- Rate limiting (fixed window)
- Store retry policy
- Retention sweep (expired sessions and audit entries)

Request-scoped generators live at the bottom (database and audit
sessions, audit adapter).
"""

from functools import lru_cache
from typing import TYPE_CHECKING, AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.config import settings
from src.infrastructure.persistence.database import Database

if TYPE_CHECKING:
    from redis.asyncio import Redis

    from src.application.services.rate_limiter import RateLimiter
    from src.domain.protocols import (
        AuditProtocol,
        CaptchaVerifierProtocol,
        CompromisedPasswordProtocol,
        EmailServiceProtocol,
        EncryptionProtocol,
        LoggerProtocol,
        PasswordHashingProtocol,
        SecretsProtocol,
    )
    from src.infrastructure.jobs import RetentionSweeper
    from src.infrastructure.persistence.retry import StoreRetrier


# ============================================================================
# Application-Scoped Dependencies (Singletons)
# ============================================================================


@lru_cache()
def get_logger() -> "LoggerProtocol":
    """Return the application-scoped logger singleton.

    - development: human-readable console output
    - everywhere else: JSON lines
    """
    from src.infrastructure.logging.console_adapter import ConsoleAdapter

    return ConsoleAdapter(
        use_json=not settings.is_development,
        level=settings.log_level,
    )


@lru_cache()
def get_redis() -> "Redis":
    """Get Redis client singleton (app-scoped).

    Connection pool is shared across the application. Responses are
    decoded to ``str`` since only counters are stored.
    """
    from redis.asyncio import ConnectionPool, Redis

    pool = ConnectionPool.from_url(
        settings.redis_url,
        max_connections=50,
        decode_responses=True,
        socket_connect_timeout=5,
        socket_timeout=5,
        retry_on_timeout=True,
        socket_keepalive=True,
    )
    return Redis(connection_pool=pool)


@lru_cache()
def get_database() -> Database:
    """Get database manager singleton (app-scoped).

    Prefer get_db_session() for per-request sessions.
    """
    return Database(
        database_url=settings.database_url,
        echo=settings.db_echo,
    )


@lru_cache()
def get_secrets() -> "SecretsProtocol":
    """Get secrets manager singleton (app-scoped).

    Returns correct adapter based on SECRETS_BACKEND:
        - 'env': EnvAdapter, seeded with ENCRYPTION_KEY from settings
        - 'aws': AWSAdapter (AWS Secrets Manager)

    Raises:
        ValueError: If SECRETS_BACKEND is unsupported.
    """
    backend = settings.secrets_backend

    if backend == "aws":
        from src.infrastructure.secrets.aws_adapter import AWSAdapter

        return AWSAdapter(
            environment=settings.environment.value,
            region=settings.aws_region,
        )

    elif backend == "env":
        from src.infrastructure.secrets.env_adapter import EnvAdapter

        overrides = {}
        if settings.encryption_key:
            overrides[settings.encryption_key_secret_id] = settings.encryption_key
        return EnvAdapter(overrides=overrides)

    else:
        raise ValueError(
            f"Unsupported SECRETS_BACKEND: {backend}. Supported: 'env', 'aws'"
        )


@lru_cache()
def get_encryption_service() -> "EncryptionProtocol":
    """Get encryption service singleton (app-scoped).

    The data key is fetched lazily from the secret store on first use
    and cached for ``key_cache_ttl_seconds``.
    """
    from src.infrastructure.security import EncryptionService

    return EncryptionService(
        get_secrets(),
        key_secret_id=settings.encryption_key_secret_id,
        cache_ttl_seconds=settings.key_cache_ttl_seconds,
    )


@lru_cache()
def get_password_service() -> "PasswordHashingProtocol":
    """Get password hashing service singleton (app-scoped)."""
    from src.infrastructure.security import BcryptPasswordService

    return BcryptPasswordService(cost_factor=settings.bcrypt_rounds)


@lru_cache()
def get_compromised_password_checker() -> "CompromisedPasswordProtocol":
    """Get compromised password checker singleton (app-scoped)."""
    from src.infrastructure.security import StaticCompromisedPasswordChecker

    return StaticCompromisedPasswordChecker()


@lru_cache()
def get_store_retrier() -> "StoreRetrier":
    """Get the shared retry policy runner for durable store operations."""
    from src.infrastructure.persistence.retry import RetryPolicy, StoreRetrier

    return StoreRetrier(
        RetryPolicy(
            max_retries=settings.store_max_retries,
            base_delay_ms=settings.store_retry_base_ms,
            max_delay_ms=settings.store_retry_max_ms,
        ),
        logger=get_logger(),
    )


@lru_cache()
def get_retention_sweeper() -> "RetentionSweeper":
    """Get the expired session and audit purge job (app-scoped)."""
    from datetime import timedelta

    from src.infrastructure.jobs import RetentionSweeper

    return RetentionSweeper(
        get_database(),
        interval=timedelta(minutes=settings.retention_sweep_interval_minutes),
        logger=get_logger(),
        retrier=get_store_retrier(),
    )


# ============================================================================
# Email and CAPTCHA (Application-Scoped)
# ============================================================================


@lru_cache()
def get_email_service() -> "EmailServiceProtocol":
    """Get email service singleton (app-scoped).

    Returns correct adapter based on EMAIL_BACKEND:
        - 'stub': StubEmailService (logs, keeps an outbox)
        - 'ses': SESEmailService (AWS SES)
    """
    if settings.email_backend == "ses":
        from src.infrastructure.email import SESEmailService

        return SESEmailService(
            sender=settings.email_sender,
            region=settings.aws_region,
            logger=get_logger(),
        )

    from src.infrastructure.email import StubEmailService

    return StubEmailService(logger=get_logger())


@lru_cache()
def get_captcha_verifier() -> "CaptchaVerifierProtocol":
    """Get CAPTCHA verifier singleton (app-scoped).

    Returns correct adapter based on CAPTCHA_BACKEND:
        - 'placeholder': accepts any non-blank token
        - 'http': siteverify endpoint, fails closed
    """
    if settings.captcha_backend == "http":
        from src.infrastructure.captcha import HttpCaptchaVerifier

        return HttpCaptchaVerifier(
            verify_url=settings.captcha_verify_url,
            secret=settings.captcha_secret or "",
            logger=get_logger(),
        )

    from src.infrastructure.captcha import PlaceholderCaptchaVerifier

    return PlaceholderCaptchaVerifier()


# ============================================================================
# Rate Limiting (Application-Scoped)
# ============================================================================


@lru_cache()
def get_rate_limiter() -> "RateLimiter":
    """Get rate limiter singleton (app-scoped).

    Fixed-window counters in Redis. Store failures fail open: a Redis
    outage never turns into a denial of service.
    """
    from src.application.services.rate_limiter import RateLimiter
    from src.domain.enums import RateLimitScope
    from src.domain.value_objects import RateLimitRule
    from src.infrastructure.rate_limit import RedisCounterStore

    return RateLimiter(
        RedisCounterStore(redis_client=get_redis()),
        ip_rule=RateLimitRule(
            name="ip",
            scope=RateLimitScope.IP,
            limit=settings.rate_limit_ip_limit,
            window_seconds=settings.rate_limit_ip_window_seconds,
        ),
        auth_rule=RateLimitRule(
            name="ip_auth",
            scope=RateLimitScope.IP,
            limit=settings.rate_limit_auth_limit,
            window_seconds=settings.rate_limit_auth_window_seconds,
        ),
        user_rule=RateLimitRule(
            name="user",
            scope=RateLimitScope.USER,
            limit=settings.rate_limit_user_limit,
            window_seconds=settings.rate_limit_user_window_seconds,
        ),
        logger=get_logger(),
    )


# ============================================================================
# Request-Scoped Dependencies (Per-Request)
# ============================================================================


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session (request-scoped).

    Commits on success, rolls back on exception, always closes.
    """
    db = get_database()
    async with db.get_session() as session:
        yield session


async def get_audit_session() -> AsyncGenerator[AsyncSession, None]:
    """Get audit session (request-scoped, independent lifecycle).

    Separate from get_db_session() so audit rows persist even when the
    business transaction of the request rolls back.
    """
    db = get_database()
    async with db.get_session() as session:
        yield session


async def get_audit(
    audit_session: AsyncSession = Depends(get_audit_session),
) -> "AuditProtocol":
    """Get audit trail adapter (request-scoped with separate session)."""
    from datetime import timedelta

    from src.infrastructure.audit.postgres_adapter import PostgresAuditAdapter

    return PostgresAuditAdapter(
        audit_session,
        retention=timedelta(days=settings.audit_retention_days),
        logger=get_logger(),
    )
