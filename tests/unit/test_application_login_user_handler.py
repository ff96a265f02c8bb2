"""Unit tests for LoginUserHandler and LogoutUserHandler.

Tests cover:
- Successful login (session issued, counters cleared, audit events)
- Unknown email and wrong password share one error
- Lockout after repeated failures, including with the correct password
- Unverified account rejected only after the password matches
- Logout is idempotent and audits only real terminations

Architecture:
- Real password policy, lockout guard and session manager
- In-memory stores, mocked audit trail and email
"""

from datetime import UTC, datetime, timedelta

import pytest

from src.application.commands.auth_commands import LoginUser, LogoutUser
from src.application.commands.handlers.login_user_handler import (
    LoginError,
    LoginUserHandler,
)
from src.application.commands.handlers.logout_user_handler import LogoutUserHandler
from src.core.enums import ErrorCode
from src.core.errors import AuthenticationError, AuthorizationError
from src.core.result import Failure, Success
from src.domain.enums import AuditEventType

PASSWORD = "Correct-Horse-9!"


@pytest.fixture
def handler(user_repo, password_policy, lockout_guard, session_manager, mock_audit):
    return LoginUserHandler(
        user_repo, password_policy, lockout_guard, session_manager, mock_audit
    )


@pytest.fixture
async def account(user_repo, make_account, password_policy):
    envelope = (await password_policy.hash(PASSWORD)).value
    account = make_account(email="member@example.com", password_hash=envelope)
    await user_repo.add(account)
    return account


def login(password: str = PASSWORD, email: str = "member@example.com") -> LoginUser:
    return LoginUser(
        email=email, password=password, ip_address="192.0.2.10", user_agent="pytest"
    )


@pytest.mark.unit
class TestLoginUserHandlerSuccess:
    """Test successful login."""

    async def test_issues_session(self, handler, account, session_repo):
        # Act
        result = await handler.handle(login(email="MEMBER@example.com"))

        # Assert
        assert isinstance(result, Success)
        assert result.value.user_id == account.id
        [stored] = session_repo.sessions.values()
        assert stored.ip_address == "192.0.2.10"
        assert stored.user_agent == "pytest"

    async def test_audits_login_and_session(self, handler, account, mock_audit):
        # Act
        await handler.handle(login())

        # Assert
        calls = [c.kwargs for c in mock_audit.record.call_args_list]
        assert [c["event_type"] for c in calls] == [
            AuditEventType.LOGIN_ATTEMPT,
            AuditEventType.SESSION_CREATED,
        ]
        assert calls[0]["success"] is True
        assert calls[0]["metadata"] == {"action": "login"}

    async def test_success_clears_failed_attempts(self, handler, account, user_repo):
        # Arrange
        await handler.handle(login(password="Wrong-Horse-9!"))
        await handler.handle(login(password="Wrong-Horse-9!"))

        # Act
        await handler.handle(login())

        # Assert
        stored = await user_repo.find_by_id(account.id)
        assert stored.failed_login_attempts == 0
        assert stored.last_failed_login_at is None


@pytest.mark.unit
class TestLoginUserHandlerFailures:
    """Test rejected logins."""

    async def test_unknown_email(self, handler, mock_audit):
        # Act
        result = await handler.handle(login(email="ghost@example.com"))

        # Assert
        assert isinstance(result, Failure)
        assert isinstance(result.error, AuthenticationError)
        assert result.error.code == ErrorCode.INVALID_CREDENTIALS
        assert result.error.message == LoginError.INVALID_CREDENTIALS
        kwargs = mock_audit.record.call_args.kwargs
        assert kwargs["user_id"] is None
        assert kwargs["metadata"]["reason"] == "invalid_credentials"

    async def test_wrong_password_same_error_as_unknown_email(self, handler, account):
        # Act
        wrong = await handler.handle(login(password="Wrong-Horse-9!"))
        unknown = await handler.handle(login(email="ghost@example.com"))

        # Assert
        assert wrong.error.code == unknown.error.code
        assert wrong.error.message == unknown.error.message

    async def test_wrong_password_counts_failure(self, handler, account, user_repo):
        # Act
        await handler.handle(login(password="Wrong-Horse-9!"))

        # Assert
        stored = await user_repo.find_by_id(account.id)
        assert stored.failed_login_attempts == 1

    async def test_fifth_failure_locks_and_blocks_correct_password(
        self, handler, account, mock_email
    ):
        # Arrange
        for _ in range(5):
            await handler.handle(login(password="Wrong-Horse-9!"))

        # Act
        result = await handler.handle(login())

        # Assert
        assert isinstance(result, Failure)
        assert isinstance(result.error, AuthorizationError)
        assert result.error.code == ErrorCode.ACCOUNT_LOCKED
        mock_email.send.assert_awaited_once()

    async def test_expired_lockout_allows_login(self, handler, account, user_repo):
        # Arrange
        now = datetime.now(UTC)
        stored = await user_repo.find_by_id(account.id)
        stored.failed_login_attempts = 5
        stored.last_failed_login_at = now - timedelta(minutes=20)
        stored.locked_until = now - timedelta(minutes=5)
        user_repo.put(stored)

        # Act
        result = await handler.handle(login())

        # Assert
        assert isinstance(result, Success)

    async def test_unverified_account(
        self, handler, user_repo, make_account, password_policy
    ):
        # Arrange
        envelope = (await password_policy.hash(PASSWORD)).value
        await user_repo.add(
            make_account(
                email="new@example.com", password_hash=envelope, verified=False
            )
        )

        # Act
        result = await handler.handle(login(email="new@example.com"))

        # Assert
        assert isinstance(result, Failure)
        assert isinstance(result.error, AuthorizationError)
        assert result.error.code == ErrorCode.EMAIL_NOT_VERIFIED

    async def test_unverified_with_wrong_password_hides_status(
        self, handler, user_repo, make_account, password_policy
    ):
        # Arrange
        envelope = (await password_policy.hash(PASSWORD)).value
        await user_repo.add(
            make_account(
                email="new@example.com", password_hash=envelope, verified=False
            )
        )

        # Act
        result = await handler.handle(
            login(email="new@example.com", password="Wrong-Horse-9!")
        )

        # Assert
        assert result.error.code == ErrorCode.INVALID_CREDENTIALS

    async def test_invalid_email_format(self, handler, mock_audit):
        # Act
        result = await handler.handle(login(email="nope"))

        # Assert
        assert result.error.code == ErrorCode.INVALID_EMAIL
        mock_audit.record.assert_not_called()


@pytest.mark.unit
class TestLogoutUserHandler:
    """Test LogoutUserHandler.handle()."""

    async def test_logout_ends_session(
        self, handler, account, session_manager, session_repo, mock_audit
    ):
        # Arrange
        token = (await handler.handle(login())).value.session_token
        mock_audit.record.reset_mock()
        logout = LogoutUserHandler(session_manager, mock_audit)

        # Act
        result = await logout.handle(LogoutUser(session_token=token))

        # Assert
        assert isinstance(result, Success)
        assert session_repo.sessions == {}
        assert (await session_manager.validate(token)).value is None
        kwargs = mock_audit.record.call_args.kwargs
        assert kwargs["event_type"] == AuditEventType.SESSION_TERMINATED
        assert kwargs["user_id"] == account.id
        assert kwargs["metadata"] == {"reason": "logout"}

    async def test_logout_twice_is_success(self, session_manager, mock_audit):
        # Arrange
        logout = LogoutUserHandler(session_manager, mock_audit)

        # Act
        first = await logout.handle(LogoutUser(session_token="unknown"))
        second = await logout.handle(LogoutUser(session_token="unknown"))

        # Assert
        assert first == Success(value=None)
        assert second == Success(value=None)
        mock_audit.record.assert_not_called()
