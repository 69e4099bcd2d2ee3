from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from campus_chat.api.v1.schemas.message import MessageResponse
from campus_chat.domain.entities.conversation import Conversation
from campus_chat.domain.entities.message import Message


class ConversationResponse(BaseModel):
    id: UUID
    listing_id: UUID
    buyer_id: UUID
    seller_id: UUID
    role: str | None = None
    created_at: datetime
    updated_at: datetime
    unread_count: int = 0
    last_message: MessageResponse | None = None
    messages: list[MessageResponse] | None = None

    @classmethod
    def build(
        cls,
        conversation: Conversation,
        viewer_id: UUID,
        *,
        unread_count: int = 0,
        last_message: Message | None = None,
        include_messages: bool = False,
    ) -> ConversationResponse:
        if last_message is None and conversation.messages:
            last_message = conversation.messages[-1]
        return cls(
            id=conversation.id,
            listing_id=conversation.listing_id,
            buyer_id=conversation.buyer_id,
            seller_id=conversation.seller_id,
            role=conversation.role_of(viewer_id),
            created_at=conversation.created_at,
            updated_at=conversation.updated_at,
            unread_count=unread_count,
            last_message=(
                MessageResponse.model_validate(last_message, from_attributes=True)
                if last_message is not None
                else None
            ),
            messages=(
                [MessageResponse.model_validate(m, from_attributes=True) for m in conversation.messages]
                if include_messages
                else None
            ),
        )
