from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True, slots=True)
class NotificationPreference:
    user_id: UUID
    email_notifications_enabled: bool
    email: str | None
    first_name: str | None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def defaults(cls, user_id: UUID) -> NotificationPreference:
        """Preference used when the user never saved one."""
        return cls(
            user_id=user_id,
            email_notifications_enabled=True,
            email=None,
            first_name=None,
        )


@dataclass(frozen=True, slots=True)
class EffectiveNotificationSettings:
    """Fully resolved delivery settings for one recipient."""

    user_id: UUID
    enabled: bool
    email: str | None
    first_name: str | None
