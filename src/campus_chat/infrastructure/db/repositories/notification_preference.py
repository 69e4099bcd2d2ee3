from __future__ import annotations

from uuid import UUID

from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from campus_chat.domain.entities.notification_preference import NotificationPreference
from campus_chat.infrastructure.db.mappers import notification_preference as mapper
from campus_chat.infrastructure.db.models.notification_preference import (
    NotificationPreferenceModel,
)


class NotificationPreferenceReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_user_id(self, user_id: UUID) -> NotificationPreference | None:
        result = await self._session.get(NotificationPreferenceModel, user_id)
        return mapper.model_to_entity(result) if result else None


class NotificationPreferenceWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def upsert(self, preference: NotificationPreference) -> NotificationPreference:
        changes = {
            "email_notifications_enabled": preference.email_notifications_enabled,
            "email": preference.email,
            "first_name": preference.first_name,
            "updated_at": preference.updated_at,
        }
        stmt = (
            pg_insert(NotificationPreferenceModel)
            .values(user_id=preference.user_id, created_at=preference.created_at, **changes)
            .on_conflict_do_update(index_elements=["user_id"], set_=changes)
            .returning(NotificationPreferenceModel)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        return mapper.model_to_entity(result.scalar_one())
