from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from campus_chat.domain.entities.message import Message
from campus_chat.domain.value_objects.enums import ParticipantRole


@dataclass(frozen=True, slots=True)
class Conversation:
    """A buyer/seller thread about one listing.

    ``messages`` is only populated by operations that load the full thread;
    listing queries leave it empty.
    """

    id: UUID
    listing_id: UUID
    buyer_id: UUID
    seller_id: UUID
    created_at: datetime
    updated_at: datetime
    messages: tuple[Message, ...] = ()

    def is_participant(self, user_id: UUID) -> bool:
        return user_id == self.buyer_id or user_id == self.seller_id

    def other_participant(self, user_id: UUID) -> UUID | None:
        if user_id == self.buyer_id:
            return self.seller_id
        if user_id == self.seller_id:
            return self.buyer_id
        return None

    def role_of(self, user_id: UUID) -> ParticipantRole | None:
        if user_id == self.buyer_id:
            return ParticipantRole.BUYER
        if user_id == self.seller_id:
            return ParticipantRole.SELLER
        return None
