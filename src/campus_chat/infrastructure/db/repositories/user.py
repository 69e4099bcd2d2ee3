from __future__ import annotations

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from campus_chat.domain.entities.user import UserAccount
from campus_chat.infrastructure.db.mappers import user as mapper
from campus_chat.infrastructure.db.models.user import UserModel


class UserDirectoryRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, user_id: UUID) -> UserAccount | None:
        result = await self._session.get(UserModel, user_id)
        return mapper.model_to_entity(result) if result else None
