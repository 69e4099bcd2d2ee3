from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import func, or_, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from campus_chat.domain.entities.conversation import Conversation
from campus_chat.infrastructure.db.mappers import conversation as mapper
from campus_chat.infrastructure.db.models.conversation import ConversationModel


class ConversationReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, conversation_id: UUID) -> Conversation | None:
        result = await self._session.get(ConversationModel, conversation_id)
        return mapper.model_to_entity(result) if result else None

    async def get_by_triple(
        self,
        listing_id: UUID,
        buyer_id: UUID,
        seller_id: UUID,
    ) -> Conversation | None:
        stmt = select(ConversationModel).where(
            ConversationModel.listing_id == listing_id,
            ConversationModel.buyer_id == buyer_id,
            ConversationModel.seller_id == seller_id,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return mapper.model_to_entity(model) if model else None

    async def list_for_user(self, user_id: UUID) -> list[Conversation]:
        stmt = (
            select(ConversationModel)
            .where(
                or_(
                    ConversationModel.buyer_id == user_id,
                    ConversationModel.seller_id == user_id,
                )
            )
            .order_by(ConversationModel.updated_at.desc(), ConversationModel.id)
        )
        result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]


class ConversationWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create_if_not_exists(
        self,
        conversation: Conversation,
    ) -> tuple[Conversation, bool]:
        """Insert conversation idempotently. Returns (conversation, created_flag)."""
        stmt = (
            pg_insert(ConversationModel)
            .values(**mapper.entity_to_values(conversation))
            .on_conflict_do_nothing(constraint="uq_conversation_listing_buyer_seller")
            .returning(ConversationModel)
        )
        result = await self._session.execute(stmt)
        row = result.scalar_one_or_none()

        if row is not None:
            return mapper.model_to_entity(row), True

        # Lost the race on the unique triple, read the winner
        stmt = select(ConversationModel).where(
            ConversationModel.listing_id == conversation.listing_id,
            ConversationModel.buyer_id == conversation.buyer_id,
            ConversationModel.seller_id == conversation.seller_id,
        )
        existing = (await self._session.execute(stmt)).scalar_one()
        return mapper.model_to_entity(existing), False

    async def touch_updated_at(self, conversation_id: UUID, ts: datetime) -> None:
        stmt = (
            update(ConversationModel)
            .where(ConversationModel.id == conversation_id)
            # Sends may commit out of order; never move the clock backwards
            .values(updated_at=func.greatest(ConversationModel.updated_at, ts))
        )
        await self._session.execute(stmt)
