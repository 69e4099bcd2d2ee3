from __future__ import annotations

from uuid import UUID

from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from campus_chat.domain.entities.message import Message
from campus_chat.infrastructure.db.mappers import message as mapper
from campus_chat.infrastructure.db.models.conversation import ConversationModel
from campus_chat.infrastructure.db.models.message import MessageModel


def _unread_for(user_id: UUID):
    return (
        MessageModel.sender_id != user_id,
        MessageModel.is_read.is_(False),
    )


class MessageReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, message_id: UUID) -> Message | None:
        result = await self._session.get(MessageModel, message_id)
        return mapper.model_to_entity(result) if result else None

    async def list_messages(self, conversation_id: UUID) -> list[Message]:
        stmt = (
            select(MessageModel)
            .where(MessageModel.conversation_id == conversation_id)
            .order_by(MessageModel.created_at.asc(), MessageModel.id.asc())
        )
        result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]

    async def last_messages(self, conversation_ids: list[UUID]) -> dict[UUID, Message]:
        if not conversation_ids:
            return {}
        ranked = (
            select(
                MessageModel.id,
                func.row_number()
                .over(
                    partition_by=MessageModel.conversation_id,
                    order_by=(MessageModel.created_at.desc(), MessageModel.id.desc()),
                )
                .label("rn"),
            )
            .where(MessageModel.conversation_id.in_(conversation_ids))
            .subquery()
        )
        stmt = (
            select(MessageModel)
            .join(ranked, ranked.c.id == MessageModel.id)
            .where(ranked.c.rn == 1)
        )
        result = await self._session.execute(stmt)
        return {m.conversation_id: mapper.model_to_entity(m) for m in result.scalars().all()}

    async def count_unread(self, conversation_id: UUID, user_id: UUID) -> int:
        stmt = select(func.count(MessageModel.id)).where(
            MessageModel.conversation_id == conversation_id,
            *_unread_for(user_id),
        )
        result = await self._session.execute(stmt)
        return int(result.scalar_one())

    async def count_unread_by_conversation(
        self,
        user_id: UUID,
        conversation_ids: list[UUID],
    ) -> dict[UUID, int]:
        stmt = (
            select(MessageModel.conversation_id, func.count(MessageModel.id))
            .where(
                MessageModel.conversation_id.in_(conversation_ids),
                *_unread_for(user_id),
            )
            .group_by(MessageModel.conversation_id)
        )
        result = await self._session.execute(stmt)
        return {cid: int(count) for cid, count in result.all()}

    async def count_unread_for_user(self, user_id: UUID) -> int:
        stmt = (
            select(func.count(MessageModel.id))
            .join(ConversationModel, ConversationModel.id == MessageModel.conversation_id)
            .where(
                or_(
                    ConversationModel.buyer_id == user_id,
                    ConversationModel.seller_id == user_id,
                ),
                *_unread_for(user_id),
            )
        )
        result = await self._session.execute(stmt)
        return int(result.scalar_one())


class MessageWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, message: Message) -> Message:
        model = mapper.entity_to_model(message)
        self._session.add(model)
        await self._session.flush()
        return mapper.model_to_entity(model)

    async def mark_conversation_read(self, conversation_id: UUID, reader_id: UUID) -> int:
        stmt = (
            update(MessageModel)
            .where(
                MessageModel.conversation_id == conversation_id,
                *_unread_for(reader_id),
            )
            .values(is_read=True)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount or 0

    async def mark_read(self, message_id: UUID, reader_id: UUID) -> bool:
        stmt = (
            update(MessageModel)
            .where(MessageModel.id == message_id, *_unread_for(reader_id))
            .values(is_read=True)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return bool(result.rowcount)
