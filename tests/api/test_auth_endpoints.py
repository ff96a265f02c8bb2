"""API tests for authentication endpoints.

Tests the complete HTTP request/response cycle for:
- POST /api/v1/auth/register
- POST /api/v1/auth/verify
- POST /api/v1/auth/resend-verification
- POST /api/v1/auth/login
- POST /api/v1/auth/logout
- POST /api/v1/auth/password-reset-request
- POST /api/v1/auth/password-reset

Architecture:
- Real app with handler factories overridden (see conftest)
- Real handlers and services over in-memory stores
- Verifies RFC 9457 bodies for every failure
"""

import pytest

from src.core.config import settings
from src.domain.enums import AuditEventType
from src.presentation.routers.api.v1.auth import PASSWORD_RESET_REQUESTED_MESSAGE
from tests.api.conftest import PASSWORD

EMAIL = "user@example.com"


def error_type(code: str) -> str:
    return f"{settings.api_base_url}/errors/{code}"


def register(client, email=EMAIL, password=PASSWORD, captcha_token="ok"):
    return client.post(
        "/api/v1/auth/register",
        json={"email": email, "password": password, "captcha_token": captcha_token},
    )


def login(client, email=EMAIL, password=PASSWORD):
    return client.post("/api/v1/auth/login", json={"email": email, "password": password})


@pytest.mark.api
class TestRegister:
    """Tests for POST /api/v1/auth/register."""

    def test_register_success(self, client, stub_email, user_repo):
        # Act
        response = register(client)

        # Assert
        assert response.status_code == 201
        data = response.json()
        assert data["user_id"]
        assert "check your email" in data["message"]
        [message] = stub_email.outbox
        assert message.to == EMAIL
        assert "verification code is:" in message.body
        assert len(user_repo.accounts) == 1

    def test_register_normalizes_email(self, client, user_repo):
        register(client, email="  User@Example.COM ")

        [account] = user_repo.accounts.values()
        assert account.email == EMAIL

    def test_register_duplicate_email(self, client):
        register(client)

        response = register(client, email="USER@example.com")

        assert response.status_code == 409
        data = response.json()
        assert data["type"] == error_type("email_already_exists")
        assert data["title"] == "Resource Conflict"

    def test_register_weak_password_lists_rules(self, client, user_repo):
        response = register(client, password="short")

        assert response.status_code == 400
        data = response.json()
        assert data["type"] == error_type("password_too_weak")
        assert len(data["errors"]) > 1
        assert {e["field"] for e in data["errors"]} == {"password"}
        assert user_repo.accounts == {}

    def test_register_invalid_email(self, client):
        response = register(client, email="not-an-email")

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "email"

    def test_register_missing_captcha(self, client):
        response = register(client, captcha_token="")

        assert response.status_code == 400
        assert response.json()["type"] == error_type("captcha_invalid")

    def test_register_malformed_body(self, client):
        response = client.post("/api/v1/auth/register", json={"email": EMAIL})

        assert response.status_code == 422
        data = response.json()
        assert data["title"] == "Validation Failed"
        assert {"field": "password", "code": "missing"}.items() <= data["errors"][
            0
        ].items()


@pytest.mark.api
class TestVerifyEmail:
    """Tests for POST /api/v1/auth/verify."""

    def test_verify_issues_session(self, client, last_code, session_repo):
        register(client)

        response = client.post(
            "/api/v1/auth/verify", json={"email": EMAIL, "code": last_code(EMAIL)}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["session_token"]
        assert data["token_type"] == "bearer"
        assert len(session_repo.sessions) == 1

    def test_wrong_code(self, client, last_code):
        register(client)
        wrong = "000000" if last_code(EMAIL) != "000000" else "111111"

        response = client.post("/api/v1/auth/verify", json={"email": EMAIL, "code": wrong})

        assert response.status_code == 400
        assert response.json()["type"] == error_type("code_invalid")

    def test_unknown_email(self, client):
        response = client.post(
            "/api/v1/auth/verify", json={"email": "ghost@example.com", "code": "123456"}
        )

        assert response.status_code == 404


@pytest.mark.api
class TestResendVerification:
    """Tests for POST /api/v1/auth/resend-verification."""

    def test_resend_sends_new_code(self, client, stub_email):
        register(client)

        response = client.post(
            "/api/v1/auth/resend-verification", json={"email": EMAIL}
        )

        assert response.status_code == 200
        assert response.json()["ok"] is True
        assert len(stub_email.outbox) == 2

    def test_already_verified(self, client, verified_user):
        response = client.post(
            "/api/v1/auth/resend-verification", json={"email": EMAIL}
        )

        assert response.status_code == 409
        assert response.json()["type"] == error_type("already_verified")

    def test_unknown_email(self, client):
        response = client.post(
            "/api/v1/auth/resend-verification", json={"email": "ghost@example.com"}
        )

        assert response.status_code == 404


@pytest.mark.api
class TestLogin:
    """Tests for POST /api/v1/auth/login."""

    def test_login_success(self, client, verified_user):
        response = login(client)

        assert response.status_code == 200
        data = response.json()
        assert data["user_id"] == verified_user["user_id"]
        assert data["session_token"] != verified_user["session_token"]

    def test_wrong_password_and_unknown_email_look_the_same(
        self, client, verified_user
    ):
        wrong_password = login(client, password="WrongPass123!")
        unknown_email = login(client, email="ghost@example.com")

        assert wrong_password.status_code == unknown_email.status_code == 401
        assert wrong_password.json()["detail"] == unknown_email.json()["detail"]
        assert wrong_password.json()["type"] == error_type("invalid_credentials")

    def test_unverified_account_forbidden(self, client):
        register(client)

        response = login(client)

        assert response.status_code == 403
        assert response.json()["type"] == error_type("email_not_verified")

    def test_lockout_after_repeated_failures(self, client, verified_user, audit):
        # Arrange
        for _ in range(settings.lockout_max_failed_attempts):
            assert login(client, password="WrongPass123!").status_code == 401

        # Act
        response = login(client)

        # Assert
        assert response.status_code == 403
        assert response.json()["type"] == error_type("account_locked")
        event_types = [c.kwargs["event_type"] for c in audit.record.call_args_list]
        assert AuditEventType.ACCOUNT_LOCKOUT in event_types


@pytest.mark.api
class TestLogout:
    """Tests for POST /api/v1/auth/logout."""

    def test_logout_with_bearer_ends_session(self, client, verified_user):
        token = verified_user["session_token"]
        headers = {"Authorization": f"Bearer {token}"}

        response = client.post("/api/v1/auth/logout", headers=headers)

        assert response.status_code == 200
        assert client.get("/api/v1/sessions/current", headers=headers).status_code == 401

    def test_logout_with_body_token(self, client, verified_user, session_repo):
        response = client.post(
            "/api/v1/auth/logout",
            json={"session_token": verified_user["session_token"]},
        )

        assert response.status_code == 200
        assert session_repo.sessions == {}

    def test_logout_unknown_token_still_succeeds(self, client):
        response = client.post(
            "/api/v1/auth/logout", headers={"Authorization": "Bearer nope"}
        )

        assert response.status_code == 200
        assert response.json()["ok"] is True


@pytest.mark.api
class TestPasswordReset:
    """Tests for the password reset endpoints."""

    def test_request_does_not_reveal_accounts(self, client, verified_user, stub_email):
        known = client.post(
            "/api/v1/auth/password-reset-request", json={"email": EMAIL}
        )
        unknown = client.post(
            "/api/v1/auth/password-reset-request", json={"email": "ghost@example.com"}
        )

        assert known.status_code == unknown.status_code == 200
        assert known.json() == unknown.json()
        assert known.json()["message"] == PASSWORD_RESET_REQUESTED_MESSAGE
        assert "reset code is:" in stub_email.outbox[-1].body

    def test_reset_replaces_password_and_ends_sessions(
        self, client, verified_user, last_code, session_repo
    ):
        # Arrange
        client.post("/api/v1/auth/password-reset-request", json={"email": EMAIL})
        new_password = "N3wSecurePass!x"

        # Act
        response = client.post(
            "/api/v1/auth/password-reset",
            json={
                "email": EMAIL,
                "code": last_code(EMAIL),
                "new_password": new_password,
            },
        )

        # Assert
        assert response.status_code == 200
        assert session_repo.sessions == {}
        assert login(client).status_code == 401
        assert login(client, password=new_password).status_code == 200

    def test_reset_code_single_use(self, client, verified_user, last_code):
        client.post("/api/v1/auth/password-reset-request", json={"email": EMAIL})
        body = {
            "email": EMAIL,
            "code": last_code(EMAIL),
            "new_password": "N3wSecurePass!x",
        }

        assert client.post("/api/v1/auth/password-reset", json=body).status_code == 200
        again = client.post("/api/v1/auth/password-reset", json=body)

        assert again.status_code == 404
        assert again.json()["type"] == error_type("code_not_found")

    def test_reset_weak_password(self, client, verified_user, last_code):
        client.post("/api/v1/auth/password-reset-request", json={"email": EMAIL})

        response = client.post(
            "/api/v1/auth/password-reset",
            json={"email": EMAIL, "code": last_code(EMAIL), "new_password": "weak"},
        )

        assert response.status_code == 400
        assert {e["field"] for e in response.json()["errors"]} == {"new_password"}


@pytest.mark.api
class TestAuthRateLimit:
    """Stricter per-IP limit on authentication endpoints."""

    def test_auth_limit_returns_429(self, client):
        for _ in range(settings.rate_limit_auth_limit):
            client.post("/api/v1/auth/login", json={"email": "x", "password": "y"})

        response = client.post(
            "/api/v1/auth/login", json={"email": "x", "password": "y"}
        )

        assert response.status_code == 429
        assert int(response.headers["Retry-After"]) >= 1
        assert response.json()["type"] == error_type("rate_limit_exceeded")
        assert "X-Trace-ID" in response.headers
