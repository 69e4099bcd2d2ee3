from __future__ import annotations

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from campus_chat.infrastructure.db.models.listing import ListingModel


class ListingLookupRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_seller_id(self, listing_id: UUID) -> UUID | None:
        stmt = select(ListingModel.seller_id).where(ListingModel.id == listing_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()
