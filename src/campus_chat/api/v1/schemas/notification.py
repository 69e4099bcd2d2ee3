from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, Field

# Empty string is accepted and clears the override
_EMAIL_PATTERN = r"^$|^[^@\s]+@[^@\s]+\.[^@\s]+$"


class UpdateNotificationPreferenceRequest(BaseModel):
    email_notifications_enabled: bool | None = None
    email: str | None = Field(None, max_length=255, pattern=_EMAIL_PATTERN)
    first_name: str | None = Field(None, max_length=100)


class NotificationPreferenceResponse(BaseModel):
    user_id: UUID
    email_notifications_enabled: bool
    email: str | None
    first_name: str | None

    model_config = {"from_attributes": True}
