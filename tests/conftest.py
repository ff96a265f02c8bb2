"""Pytest configuration shared by unit, integration and API tests.

Provides:
1. Marker registration and automatic asyncio marking
2. Reusable mocks for cross-cutting concerns (logger, audit, email)
3. Real encryption with a throwaway key (no secret store needed)
4. In-memory stores for service-level tests
5. A fakeredis client for counter store tests
"""

import asyncio
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, Mock

import pytest
import pytest_asyncio
from fakeredis import aioredis as fake_aioredis
from uuid_extensions import uuid7

from src.application.services.account_lockout_guard import AccountLockoutGuard
from src.application.services.password_policy_service import PasswordPolicyService
from src.application.services.session_manager import SessionManager
from src.application.services.verification_code_issuer import VerificationCodeIssuer
from src.core.result import Success
from src.domain.entities.user_account import UserAccount
from src.infrastructure.email.stub_email_service import StubEmailService
from src.infrastructure.secrets.env_adapter import EnvAdapter
from src.infrastructure.security.compromised_password_checker import (
    StaticCompromisedPasswordChecker,
)
from src.infrastructure.security.encryption_service import EncryptionService
from tests.fakes import (
    InMemoryCounterStore,
    InMemorySessionRepository,
    InMemoryUserRepository,
)

KEY_SECRET_ID = "security/encryption_key"


# Pytest markers for different test types
def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests with mocked dependencies")
    config.addinivalue_line(
        "markers", "integration: Integration tests with real database"
    )
    config.addinivalue_line("markers", "api: HTTP tests against the FastAPI app")
    config.addinivalue_line("markers", "asyncio: Async test that requires event loop")


# Test execution configuration
def pytest_collection_modifyitems(config, items):
    """Automatically add asyncio marker to async test functions.

    This ensures all async tests are properly marked even if
    the developer forgets to add @pytest.mark.asyncio.
    """
    for item in items:
        if asyncio.iscoroutinefunction(getattr(item, "function", None)):
            item.add_marker(pytest.mark.asyncio)


# =============================================================================
# Reusable Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_logger():
    """Provide a mock logger for testing.

    Usage:
        def test_something(mock_logger):
            service = MyService(logger=mock_logger)
            service.do_something()
            mock_logger.warning.assert_called_once()
    """
    logger = Mock()
    logger.info = Mock()
    logger.debug = Mock()
    logger.error = Mock()
    logger.warning = Mock()
    return logger


@pytest_asyncio.fixture
async def mock_audit():
    """Provide a mock audit trail.

    ``record`` succeeds by default. Inspect ``record.call_args_list`` to
    assert on event types and metadata.
    """
    audit = AsyncMock()
    audit.record = AsyncMock(return_value=Success(value=None))
    return audit


@pytest_asyncio.fixture
async def mock_email():
    """Provide a mock email dispatcher that accepts every message."""
    email = AsyncMock()
    email.send = AsyncMock(return_value=Success(value=None))
    return email


# =============================================================================
# Encryption
# =============================================================================


@pytest.fixture
def hex_key() -> str:
    """Fresh random AES-256 data key (64 hex characters)."""
    return EncryptionService.generate_key()


@pytest.fixture
def encryption_service(hex_key) -> EncryptionService:
    """Real AES-256-GCM service reading its key from an EnvAdapter override."""
    return EncryptionService(
        EnvAdapter(overrides={KEY_SECRET_ID: hex_key}),
        key_secret_id=KEY_SECRET_ID,
    )


# =============================================================================
# In-memory stores
# =============================================================================


@pytest.fixture
def user_repo() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def session_repo() -> InMemorySessionRepository:
    return InMemorySessionRepository()


@pytest.fixture
def counter_store() -> InMemoryCounterStore:
    return InMemoryCounterStore()


@pytest_asyncio.fixture
async def fake_redis():
    """Provide an isolated in-process Redis per test.

    Mirrors the production client settings (decoded responses).
    """
    client = fake_aioredis.FakeRedis(decode_responses=True)
    yield client
    await client.flushall()
    await client.aclose()


# =============================================================================
# Entity factories
# =============================================================================


@pytest.fixture
def make_account():
    """Factory for UserAccount entities.

    Usage:
        account = make_account(email="a@example.com", verified=False)
    """

    def factory(**overrides) -> UserAccount:
        now = datetime.now(UTC)
        values = {
            "id": uuid7(),
            "email": "user@example.com",
            "password_hash": "envelope",
            "verified": True,
            "created_at": now - timedelta(days=1),
            "updated_at": now - timedelta(days=1),
        }
        values.update(overrides)
        return UserAccount(**values)

    return factory


# =============================================================================
# Application services wired to in-memory stores
# =============================================================================


@pytest.fixture
def fast_hasher():
    """Stand-in for bcrypt so handler tests stay fast.

    Produces ``$2b$12$hash-of-<password>`` and verifies against it.
    """
    hasher = Mock()
    hasher.hash_password = Mock(side_effect=lambda p: f"$2b$12$hash-of-{p}")
    hasher.verify_password = Mock(side_effect=lambda p, h: h == f"$2b$12$hash-of-{p}")
    return hasher


@pytest.fixture
def password_policy(fast_hasher, encryption_service) -> PasswordPolicyService:
    return PasswordPolicyService(
        fast_hasher, StaticCompromisedPasswordChecker(), encryption_service
    )


@pytest.fixture
def session_manager(session_repo, encryption_service, mock_logger) -> SessionManager:
    return SessionManager(session_repo, encryption_service, logger=mock_logger)


@pytest.fixture
def code_issuer(user_repo, encryption_service) -> VerificationCodeIssuer:
    return VerificationCodeIssuer(user_repo, encryption_service)


@pytest.fixture
def lockout_guard(user_repo, mock_audit, mock_email, mock_logger) -> AccountLockoutGuard:
    return AccountLockoutGuard(
        user_repo, audit=mock_audit, email=mock_email, logger=mock_logger
    )


@pytest.fixture
def stub_email() -> StubEmailService:
    return StubEmailService()
