"""One-time code issuer for email verification and password reset.

Codes are 6 random digits from ``secrets``. Only the encryption envelope
and the expiry are persisted. Reissuing overwrites the previous code,
which invalidates it. A code is cleared as soon as it is consumed.

Checks run in this order: account exists, a code is pending, the code
has not expired, the code matches. An expired code is left in place
until a new one is issued.

Mismatches are not counted toward lockout; codes rely on their short
lifetime and on resend-mediated reissue.
"""

import hmac
import secrets
from datetime import UTC, datetime, timedelta
from typing import TypeAlias

from src.core.constants import ONE_TIME_CODE_DIGITS
from src.core.enums import ErrorCode
from src.core.errors import NotFoundError, ValidationError
from src.core.result import Failure, Result, Success
from src.domain.entities.user_account import UserAccount
from src.domain.errors import EncryptionError, EncryptionIntegrityError
from src.domain.protocols import EncryptionProtocol, UserRepository
from src.domain.validators import normalize_email

CodeError: TypeAlias = (
    NotFoundError | ValidationError | EncryptionError | EncryptionIntegrityError
)


def generate_code() -> str:
    """Uniformly random zero-padded numeric code."""
    return f"{secrets.randbelow(10**ONE_TIME_CODE_DIGITS):0{ONE_TIME_CODE_DIGITS}d}"


class VerificationCodeIssuer:
    """Issues and consumes verification and password reset codes.

    Args:
        users: Account repository.
        encryption: Envelope encryption for stored codes.
        verification_ttl: Lifetime of verification codes (24 hours).
        reset_ttl: Lifetime of password reset codes (1 hour).
    """

    def __init__(
        self,
        users: UserRepository,
        encryption: EncryptionProtocol,
        *,
        verification_ttl: timedelta = timedelta(hours=24),
        reset_ttl: timedelta = timedelta(hours=1),
    ) -> None:
        self._users = users
        self._encryption = encryption
        self._verification_ttl = verification_ttl
        self._reset_ttl = reset_ttl

    @property
    def verification_ttl(self) -> timedelta:
        return self._verification_ttl

    @property
    def reset_ttl(self) -> timedelta:
        return self._reset_ttl

    async def issue_verification(
        self, account: UserAccount, now: datetime | None = None
    ) -> Result[str, EncryptionError]:
        """Store a fresh verification code on the account.

        Returns:
            Success(code) with the plaintext code for the email body.
        """
        now = now or datetime.now(UTC)
        code = generate_code()
        envelope = await self._encryption.encrypt(code)
        if isinstance(envelope, Failure):
            return envelope

        expires_at = now + self._verification_ttl
        await self._users.set_verification_code(
            account.id, envelope.value, expires_at, now=now
        )
        account.set_verification_code(envelope.value, expires_at)
        return Success(value=code)

    async def issue_reset(
        self, account: UserAccount, now: datetime | None = None
    ) -> Result[str, EncryptionError]:
        """Store a fresh password reset code on the account."""
        now = now or datetime.now(UTC)
        code = generate_code()
        envelope = await self._encryption.encrypt(code)
        if isinstance(envelope, Failure):
            return envelope

        expires_at = now + self._reset_ttl
        await self._users.set_password_reset_code(
            account.id, envelope.value, expires_at, now=now
        )
        account.set_password_reset_code(envelope.value, expires_at)
        return Success(value=code)

    async def verify_code(
        self, email: str, code: str, now: datetime | None = None
    ) -> Result[UserAccount, CodeError]:
        """Consume a verification code and mark the account verified.

        An already verified account succeeds without consuming anything.
        """
        now = now or datetime.now(UTC)
        account = await self._users.find_by_email(normalize_email(email))
        if account is None:
            return Failure(error=_user_not_found(email))
        if account.verified:
            return Success(value=account)

        matched = await self._match(
            account.verification_code,
            account.verification_code_expiry,
            code,
            now,
            label="verification",
            email=account.email,
        )
        if isinstance(matched, Failure):
            return matched

        if not await self._users.mark_verified(
            account.id, expected_code=account.verification_code, now=now
        ):
            current = await self._users.find_by_id(account.id)
            if current is not None and current.verified:
                return Success(value=current)
            return Failure(error=_invalid_code("verification"))

        account.mark_verified()
        return Success(value=account)

    async def check_reset_code(
        self, email: str, code: str, now: datetime | None = None
    ) -> Result[UserAccount, CodeError]:
        """Validate a reset code without consuming it."""
        now = now or datetime.now(UTC)
        account = await self._users.find_by_email(normalize_email(email))
        if account is None:
            return Failure(error=_user_not_found(email))

        matched = await self._match(
            account.password_reset_code,
            account.password_reset_code_expiry,
            code,
            now,
            label="password reset",
            email=account.email,
        )
        if isinstance(matched, Failure):
            return matched
        return Success(value=account)

    async def consume_reset_code(
        self,
        email: str,
        code: str,
        *,
        new_password_hash: str | None = None,
        now: datetime | None = None,
    ) -> Result[UserAccount, CodeError]:
        """Validate a reset code, then clear it in one conditional write.

        The write only matches while the checked envelope is still stored,
        so a code that a concurrent request consumed or replaced fails
        with CODE_INVALID.

        Args:
            new_password_hash: Encrypted hash stored in the same update.
        """
        now = now or datetime.now(UTC)
        checked = await self.check_reset_code(email, code, now)
        if isinstance(checked, Failure):
            return checked

        account = checked.value
        if not await self._users.consume_password_reset_code(
            account.id,
            expected_code=account.password_reset_code,
            new_password_hash=new_password_hash,
            now=now,
        ):
            return Failure(error=_invalid_code("password reset"))

        account.clear_password_reset_code()
        if new_password_hash is not None:
            account.password_hash = new_password_hash
        return Success(value=account)

    async def _match(
        self,
        envelope: str | None,
        expiry: datetime | None,
        code: str,
        now: datetime,
        *,
        label: str,
        email: str,
    ) -> Result[None, CodeError]:
        if envelope is None or expiry is None:
            return Failure(
                error=NotFoundError(
                    code=ErrorCode.CODE_NOT_FOUND,
                    message=f"No {label} code found",
                    resource_type="OneTimeCode",
                    resource_id=email,
                )
            )

        if now > expiry:
            return Failure(
                error=ValidationError(
                    code=ErrorCode.CODE_EXPIRED,
                    message=f"{label.capitalize()} code expired",
                    field="code",
                )
            )

        stored = await self._encryption.decrypt(envelope)
        if isinstance(stored, Failure):
            return Failure(error=stored.error)

        if not hmac.compare_digest(stored.value.encode(), code.strip().encode()):
            return Failure(error=_invalid_code(label))
        return Success(value=None)


def _user_not_found(email: str) -> NotFoundError:
    return NotFoundError(
        code=ErrorCode.USER_NOT_FOUND,
        message="User not found",
        resource_type="User",
        resource_id=normalize_email(email),
    )


def _invalid_code(label: str) -> ValidationError:
    return ValidationError(
        code=ErrorCode.CODE_INVALID,
        message=f"Invalid {label} code",
        field="code",
    )
