"""Fixtures for HTTP tests against the real FastAPI app.

Handler factories are overridden with handlers wired to in-memory
stores, so the full request path (middleware, routing, handlers,
problem details) runs without Postgres or Redis.

- Rate limiting uses an in-memory counter store
- Bearer tokens resolve through the in-memory session manager
- Emails land in a StubEmailService outbox
"""

import re
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

import src.core.container as container
from src.application.commands.handlers.login_user_handler import LoginUserHandler
from src.application.commands.handlers.logout_user_handler import LogoutUserHandler
from src.application.commands.handlers.register_user_handler import (
    RegisterUserHandler,
)
from src.application.commands.handlers.request_password_reset_handler import (
    RequestPasswordResetHandler,
)
from src.application.commands.handlers.resend_verification_handler import (
    ResendVerificationHandler,
)
from src.application.commands.handlers.reset_password_handler import (
    ResetPasswordHandler,
)
from src.application.commands.handlers.verify_email_handler import (
    VerifyEmailHandler,
)
from src.application.services.account_lockout_guard import AccountLockoutGuard
from src.application.services.rate_limiter import RateLimiter
from src.core.result import Success
from src.infrastructure.captcha.placeholder_captcha_verifier import (
    PlaceholderCaptchaVerifier,
)
from src.main import app
from src.presentation.routers.api.middleware import rate_limit_middleware
from tests.fakes import InMemoryCounterStore

PASSWORD = "SecurePass123!"
CODE_PATTERN = re.compile(r"code is: (\d{6})")


@pytest.fixture
def audit():
    """Audit trail double; ``record`` always succeeds."""
    audit = AsyncMock()
    audit.record = AsyncMock(return_value=Success(value=None))
    return audit


@pytest.fixture
def rate_limiter():
    return RateLimiter(InMemoryCounterStore())


@pytest.fixture
def handlers(
    user_repo,
    password_policy,
    code_issuer,
    session_manager,
    stub_email,
    audit,
    mock_logger,
):
    lockout_guard = AccountLockoutGuard(
        user_repo, audit=audit, email=stub_email, logger=mock_logger
    )
    return {
        container.get_register_user_handler: RegisterUserHandler(
            user_repo=user_repo,
            password_policy=password_policy,
            code_issuer=code_issuer,
            captcha=PlaceholderCaptchaVerifier(),
            email_service=stub_email,
            audit=audit,
            app_name="Tasklane",
        ),
        container.get_verify_email_handler: VerifyEmailHandler(
            code_issuer=code_issuer, session_manager=session_manager, audit=audit
        ),
        container.get_resend_verification_handler: ResendVerificationHandler(
            user_repo=user_repo,
            code_issuer=code_issuer,
            email_service=stub_email,
            app_name="Tasklane",
        ),
        container.get_login_user_handler: LoginUserHandler(
            user_repo=user_repo,
            password_policy=password_policy,
            lockout_guard=lockout_guard,
            session_manager=session_manager,
            audit=audit,
        ),
        container.get_logout_user_handler: LogoutUserHandler(
            session_manager=session_manager, audit=audit
        ),
        container.get_request_password_reset_handler: RequestPasswordResetHandler(
            user_repo=user_repo,
            code_issuer=code_issuer,
            email_service=stub_email,
            audit=audit,
            logger=mock_logger,
        ),
        container.get_reset_password_handler: ResetPasswordHandler(
            code_issuer=code_issuer,
            password_policy=password_policy,
            lockout_guard=lockout_guard,
            session_manager=session_manager,
            audit=audit,
        ),
    }


@pytest.fixture
def client(monkeypatch, handlers, session_manager, rate_limiter, audit):
    """TestClient for the real app wired to in-memory stores.

    The lifespan is not run; nothing connects to Postgres or Redis.
    """
    monkeypatch.setattr(container, "get_rate_limiter", lambda: rate_limiter)
    monkeypatch.setattr(
        rate_limit_middleware,
        "_resolve_user_from_store",
        session_manager.resolve_user_id,
    )
    monkeypatch.setattr(rate_limit_middleware, "_record_audit_to_store", audit.record)

    def provide(handler):
        return lambda: handler

    for factory, handler in handlers.items():
        app.dependency_overrides[factory] = provide(handler)
    app.dependency_overrides[container.get_session_manager] = lambda: session_manager

    yield TestClient(app, raise_server_exceptions=False)

    app.dependency_overrides.clear()


@pytest.fixture
def last_code(stub_email):
    """Code from the most recent email sent to an address."""

    def extract(email: str) -> str:
        for message in reversed(stub_email.outbox):
            if message.to == email:
                match = CODE_PATTERN.search(message.body)
                if match:
                    return match.group(1)
        raise AssertionError(f"no code emailed to {email}")

    return extract


@pytest.fixture
def verified_user(client, last_code):
    """Register and verify ``user@example.com``; returns the first session."""
    email = "user@example.com"
    response = client.post(
        "/api/v1/auth/register",
        json={"email": email, "password": PASSWORD, "captcha_token": "ok"},
    )
    assert response.status_code == 201

    response = client.post(
        "/api/v1/auth/verify", json={"email": email, "code": last_code(email)}
    )
    assert response.status_code == 200
    return response.json()
