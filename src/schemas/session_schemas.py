"""Session resource schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class CurrentSessionResponse(BaseModel):
    """Validated session of the caller.

    GET /api/v1/sessions/current
    """

    user_id: UUID = Field(..., description="Session owner")
    expires_at: datetime = Field(..., description="Expiry after this request")
    last_activity_at: datetime = Field(..., description="Recorded activity time")
