from __future__ import annotations

from typing import Protocol
from uuid import UUID

from campus_chat.domain.entities.message import Message


class MessageReader(Protocol):
    async def get_by_id(self, message_id: UUID) -> Message | None: ...

    async def list_messages(self, conversation_id: UUID) -> list[Message]: ...

    async def last_messages(
        self, conversation_ids: list[UUID],
    ) -> dict[UUID, Message]: ...

    async def count_unread(self, conversation_id: UUID, user_id: UUID) -> int:
        """Messages in the conversation not sent by ``user_id`` and still unread."""
        ...

    async def count_unread_by_conversation(
        self, user_id: UUID, conversation_ids: list[UUID],
    ) -> dict[UUID, int]: ...

    async def count_unread_for_user(self, user_id: UUID) -> int: ...


class MessageWriter(Protocol):
    async def create(self, message: Message) -> Message: ...

    async def mark_conversation_read(self, conversation_id: UUID, reader_id: UUID) -> int:
        """Flip unread messages from the other participant. Return rows changed."""
        ...

    async def mark_read(self, message_id: UUID, reader_id: UUID) -> bool: ...
