from __future__ import annotations

from datetime import datetime
from typing import Protocol
from uuid import UUID

from campus_chat.domain.entities.conversation import Conversation


class ConversationReader(Protocol):
    async def get_by_id(self, conversation_id: UUID) -> Conversation | None: ...

    async def get_by_triple(
        self, listing_id: UUID, buyer_id: UUID, seller_id: UUID,
    ) -> Conversation | None: ...

    async def list_for_user(self, user_id: UUID) -> list[Conversation]:
        """Conversations where the user is buyer or seller, most recently active first."""
        ...


class ConversationWriter(Protocol):
    async def create_if_not_exists(
        self, conversation: Conversation,
    ) -> tuple[Conversation, bool]:
        """Insert conversation. Return (conversation, created). On triple conflict → return existing."""
        ...

    async def touch_updated_at(self, conversation_id: UUID, ts: datetime) -> None: ...
