"""Session manager.

State machine:
    Created -> Active (self-transition on every validated use)
    Active -> Expired | Terminated (terminal, record deleted)

Tokens are ``secrets.token_urlsafe(32)``. The store is keyed by a keyed
HMAC digest of the token (deterministic, so a presented token can be
looked up) and keeps an encrypted copy for display. The plaintext token
is handed to the caller once and never persisted.

Expiry is the earlier of ``last_activity_at + inactivity_timeout`` and
``created_at + max_lifetime``; validation slides only the first bound.
"""

import secrets
from datetime import UTC, datetime, timedelta
from uuid import UUID

from src.application.dtos import IssuedSession
from src.core.constants import SESSION_TOKEN_BYTES
from src.core.result import Failure, Result, Success
from src.domain.entities.session import Session, compute_expiry
from src.domain.errors import EncryptionError
from src.domain.protocols import EncryptionProtocol, LoggerProtocol, SessionRepository


class SessionManager:
    """Creates, validates and terminates sessions.

    Args:
        sessions: Session repository.
        encryption: Digest for lookup keys, envelope for stored tokens.
        inactivity_timeout: Sliding idle bound (30 minutes).
        max_lifetime: Absolute age bound (24 hours).
        logger: Logger for swallowed termination errors.
    """

    def __init__(
        self,
        sessions: SessionRepository,
        encryption: EncryptionProtocol,
        *,
        inactivity_timeout: timedelta = timedelta(minutes=30),
        max_lifetime: timedelta = timedelta(hours=24),
        logger: LoggerProtocol | None = None,
    ) -> None:
        self._sessions = sessions
        self._encryption = encryption
        self._inactivity_timeout = inactivity_timeout
        self._max_lifetime = max_lifetime
        self._logger = logger

    async def create(
        self,
        user_id: UUID,
        ip_address: str | None = None,
        user_agent: str | None = None,
        now: datetime | None = None,
    ) -> Result[IssuedSession, EncryptionError]:
        """Issue a new session and return its plaintext token."""
        now = now or datetime.now(UTC)
        token = secrets.token_urlsafe(SESSION_TOKEN_BYTES)

        lookup_key = await self._encryption.digest(token)
        if isinstance(lookup_key, Failure):
            return lookup_key
        encrypted_token = await self._encryption.encrypt(token)
        if isinstance(encrypted_token, Failure):
            return encrypted_token

        session = Session(
            lookup_key=lookup_key.value,
            user_id=user_id,
            created_at=now,
            last_activity_at=now,
            expires_at=compute_expiry(
                created_at=now,
                last_activity_at=now,
                inactivity_timeout=self._inactivity_timeout,
                max_lifetime=self._max_lifetime,
            ),
            ip_address=ip_address,
            user_agent=user_agent,
            encrypted_token=encrypted_token.value,
        )
        await self._sessions.add(session)
        return Success(
            value=IssuedSession(
                session_token=token,
                expires_at=session.expires_at,
                user_id=user_id,
            )
        )

    async def validate(
        self, token: str, now: datetime | None = None
    ) -> Result[Session | None, EncryptionError]:
        """Look up a session, expire it or slide its inactivity bound.

        Returns:
            Success(session) refreshed and persisted, Success(None) when the
            token is unknown or the session has expired (and was deleted).
        """
        if not token:
            return Success(value=None)
        now = now or datetime.now(UTC)

        lookup_key = await self._encryption.digest(token)
        if isinstance(lookup_key, Failure):
            return lookup_key

        session = await self._sessions.find_by_lookup_key(lookup_key.value)
        if session is None:
            return Success(value=None)

        if self._is_expired(session, now):
            await self._sessions.delete(session.lookup_key)
            return Success(value=None)

        session.touch(
            now,
            inactivity_timeout=self._inactivity_timeout,
            max_lifetime=self._max_lifetime,
        )
        await self._sessions.update_activity(
            session.lookup_key,
            last_activity_at=session.last_activity_at,
            expires_at=session.expires_at,
        )
        return Success(value=session)

    async def resolve_user_id(
        self, token: str, now: datetime | None = None
    ) -> UUID | None:
        """Owner of a live session without refreshing it.

        Used by the rate limiter; never writes and never raises.
        """
        if not token:
            return None
        now = now or datetime.now(UTC)
        try:
            lookup_key = await self._encryption.digest(token)
            if isinstance(lookup_key, Failure):
                return None
            session = await self._sessions.find_by_lookup_key(lookup_key.value)
        except Exception as exc:
            self._log_swallowed("Session lookup failed", exc)
            return None
        if session is None or self._is_expired(session, now):
            return None
        return session.user_id

    async def terminate(self, token: str) -> Session | None:
        """Delete a session unconditionally.

        Never fails visibly: unknown tokens and store errors both return
        None (errors are logged).

        Returns:
            The deleted session, or None if nothing was deleted.
        """
        if not token:
            return None
        try:
            lookup_key = await self._encryption.digest(token)
            if isinstance(lookup_key, Failure):
                self._log_swallowed("Session termination skipped", None)
                return None
            session = await self._sessions.find_by_lookup_key(lookup_key.value)
            if session is None:
                return None
            await self._sessions.delete(session.lookup_key)
            return session
        except Exception as exc:
            self._log_swallowed("Session termination failed", exc)
            return None

    async def invalidate_all(self, user_id: UUID) -> int:
        """Delete every session of a user. Returns the number removed."""
        removed = await self._sessions.delete_all_for_user(user_id)
        if self._logger is not None:
            self._logger.info(
                "All sessions invalidated", user_id=str(user_id), removed=removed
            )
        return removed

    def _is_expired(self, session: Session, now: datetime) -> bool:
        return session.is_expired(
            now,
            inactivity_timeout=self._inactivity_timeout,
            max_lifetime=self._max_lifetime,
        )

    def _log_swallowed(self, message: str, exc: Exception | None) -> None:
        if self._logger is not None:
            self._logger.warning(
                message,
                error_type=type(exc).__name__ if exc is not None else None,
            )
