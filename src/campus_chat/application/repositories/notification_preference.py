from __future__ import annotations

from typing import Protocol
from uuid import UUID

from campus_chat.domain.entities.notification_preference import NotificationPreference


class NotificationPreferenceReader(Protocol):
    async def get_by_user_id(self, user_id: UUID) -> NotificationPreference | None: ...


class NotificationPreferenceWriter(Protocol):
    async def upsert(self, preference: NotificationPreference) -> NotificationPreference: ...
