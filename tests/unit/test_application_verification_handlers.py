"""Unit tests for VerifyEmailHandler and ResendVerificationHandler.

Tests cover:
- Verification marks the account verified and opens a session
- Wrong, expired and missing codes are audited with a reason
- Resend reissues the code and supersedes the old one
- Resend for unknown and already verified accounts
"""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock

import pytest

from src.application.commands.auth_commands import ResendVerification, VerifyEmail
from src.application.commands.handlers.resend_verification_handler import (
    ResendVerificationHandler,
)
from src.application.commands.handlers.verify_email_handler import VerifyEmailHandler
from src.application.dtos import IssuedSession
from src.core.enums import ErrorCode
from src.core.errors import ConflictError, NotFoundError, UnknownError
from src.core.result import Failure, Success
from src.domain.enums import AuditEventType
from src.domain.errors import EmailDeliveryError


@pytest.fixture
def verify_handler(code_issuer, session_manager, mock_audit):
    return VerifyEmailHandler(code_issuer, session_manager, mock_audit)


@pytest.fixture
def resend_handler(user_repo, code_issuer, stub_email):
    return ResendVerificationHandler(user_repo, code_issuer, stub_email)


@pytest.fixture
async def pending(user_repo, make_account):
    account = make_account(email="pending@example.com", verified=False)
    await user_repo.add(account)
    return account


@pytest.mark.unit
class TestVerifyEmailHandler:
    """Test VerifyEmailHandler.handle()."""

    async def test_correct_code_verifies_and_signs_in(
        self, verify_handler, code_issuer, pending, user_repo, session_repo
    ):
        # Arrange
        code = (await code_issuer.issue_verification(pending)).value

        # Act
        result = await verify_handler.handle(
            VerifyEmail(email="pending@example.com", code=code, ip_address="10.1.1.1")
        )

        # Assert
        assert isinstance(result, Success)
        assert isinstance(result.value, IssuedSession)
        assert result.value.user_id == pending.id
        assert (await user_repo.find_by_id(pending.id)).verified is True
        assert len(session_repo.sessions) == 1

    async def test_success_audits_attempt_and_session(
        self, verify_handler, code_issuer, pending, mock_audit
    ):
        # Arrange
        code = (await code_issuer.issue_verification(pending)).value

        # Act
        await verify_handler.handle(VerifyEmail(email=pending.email, code=code))

        # Assert
        events = [c.kwargs["event_type"] for c in mock_audit.record.call_args_list]
        assert events == [AuditEventType.LOGIN_ATTEMPT, AuditEventType.SESSION_CREATED]
        first = mock_audit.record.call_args_list[0].kwargs
        assert first["metadata"] == {"action": "verification"}
        assert first["success"] is True

    async def test_wrong_code(self, verify_handler, code_issuer, pending, mock_audit):
        # Arrange
        code = (await code_issuer.issue_verification(pending)).value
        wrong = "000000" if code != "000000" else "111111"

        # Act
        result = await verify_handler.handle(
            VerifyEmail(email=pending.email, code=wrong)
        )

        # Assert
        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.CODE_INVALID
        kwargs = mock_audit.record.call_args.kwargs
        assert kwargs["success"] is False
        assert kwargs["metadata"]["reason"] == "invalid_code"

    async def test_expired_code(
        self, verify_handler, code_issuer, pending, user_repo, mock_audit
    ):
        # Arrange
        issued_at = datetime.now(UTC) - timedelta(hours=25)
        code = (await code_issuer.issue_verification(pending, issued_at)).value

        # Act
        result = await verify_handler.handle(VerifyEmail(email=pending.email, code=code))

        # Assert
        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.CODE_EXPIRED
        assert mock_audit.record.call_args.kwargs["metadata"]["reason"] == "code_expired"
        assert (await user_repo.find_by_id(pending.id)).verified is False

    async def test_no_code_pending(self, verify_handler, pending, session_repo):
        # Act
        result = await verify_handler.handle(
            VerifyEmail(email=pending.email, code="123456")
        )

        # Assert
        assert isinstance(result, Failure)
        assert isinstance(result.error, NotFoundError)
        assert session_repo.sessions == {}

    async def test_invalid_email_not_audited(self, verify_handler, mock_audit):
        # Act
        result = await verify_handler.handle(VerifyEmail(email="bad", code="123456"))

        # Assert
        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.INVALID_EMAIL
        mock_audit.record.assert_not_called()


@pytest.mark.unit
class TestResendVerificationHandler:
    """Test ResendVerificationHandler.handle()."""

    async def test_resend_supersedes_previous_code(
        self, resend_handler, code_issuer, pending, stub_email
    ):
        # Arrange
        old_code = (await code_issuer.issue_verification(pending)).value

        # Act
        result = await resend_handler.handle(
            ResendVerification(email="Pending@Example.com")
        )

        # Assert
        assert isinstance(result, Success)
        [message] = stub_email.outbox
        new_code = message.body.split("verification code is: ")[1][:6]
        if old_code != new_code:
            stale = await code_issuer.verify_code(pending.email, old_code)
            assert stale.error.code == ErrorCode.CODE_INVALID
        assert isinstance(
            await code_issuer.verify_code(pending.email, new_code), Success
        )

    async def test_unknown_email(self, resend_handler):
        # Act
        result = await resend_handler.handle(
            ResendVerification(email="ghost@example.com")
        )

        # Assert
        assert isinstance(result, Failure)
        assert isinstance(result.error, NotFoundError)
        assert result.error.code == ErrorCode.USER_NOT_FOUND

    async def test_already_verified(self, resend_handler, user_repo, make_account):
        # Arrange
        await user_repo.add(make_account(email="done@example.com", verified=True))

        # Act
        result = await resend_handler.handle(ResendVerification(email="done@example.com"))

        # Assert
        assert isinstance(result, Failure)
        assert isinstance(result.error, ConflictError)
        assert result.error.code == ErrorCode.ALREADY_VERIFIED

    async def test_delivery_failure(self, user_repo, code_issuer, pending):
        # Arrange
        email_service = AsyncMock()
        email_service.send = AsyncMock(
            return_value=Failure(
                error=EmailDeliveryError(
                    code=ErrorCode.EMAIL_DELIVERY_FAILED, message="down"
                )
            )
        )
        handler = ResendVerificationHandler(user_repo, code_issuer, email_service)

        # Act
        result = await handler.handle(ResendVerification(email=pending.email))

        # Assert
        assert isinstance(result, Failure)
        assert isinstance(result.error, UnknownError)
        assert result.error.code == ErrorCode.EMAIL_DELIVERY_FAILED
