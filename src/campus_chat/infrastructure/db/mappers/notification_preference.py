from __future__ import annotations

from campus_chat.domain.entities.notification_preference import NotificationPreference
from campus_chat.infrastructure.db.models.notification_preference import (
    NotificationPreferenceModel,
)


def model_to_entity(model: NotificationPreferenceModel) -> NotificationPreference:
    return NotificationPreference(
        user_id=model.user_id,
        email_notifications_enabled=model.email_notifications_enabled,
        email=model.email,
        first_name=model.first_name,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )
