"""Logout handler.

Flow:
1. Terminate the session behind the token (unknown tokens are ignored)
2. Audit SESSION_TERMINATED when a session was actually removed
3. Return Success(None)

Logout never fails visibly; termination errors are logged by the
session manager.
"""

from src.application.commands.auth_commands import LogoutUser
from src.application.services.session_manager import SessionManager
from src.core.errors import DomainError
from src.core.result import Result, Success
from src.domain.enums import AuditEventType
from src.domain.protocols import AuditProtocol


class LogoutUserHandler:
    """Handler for the LogoutUser command."""

    def __init__(self, session_manager: SessionManager, audit: AuditProtocol) -> None:
        self._session_manager = session_manager
        self._audit = audit

    async def handle(self, cmd: LogoutUser) -> Result[None, DomainError]:
        session = await self._session_manager.terminate(cmd.session_token)
        if session is not None:
            await self._audit.record(
                event_type=AuditEventType.SESSION_TERMINATED,
                user_id=session.user_id,
                ip_address=cmd.ip_address,
                success=True,
                metadata={"reason": "logout"},
            )
        return Success(value=None)
