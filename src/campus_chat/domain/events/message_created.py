from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any
from uuid import UUID


@dataclass(frozen=True, slots=True)
class MessageCreated:
    message_id: UUID
    conversation_id: UUID
    listing_id: UUID
    sender_id: UUID
    recipient_id: UUID
    content: str
    created_at: datetime

    EVENT_TYPE = "chat.message_created"

    def to_payload(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> MessageCreated:
        created_at = data["created_at"]
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at)
        return cls(
            message_id=UUID(str(data["message_id"])),
            conversation_id=UUID(str(data["conversation_id"])),
            listing_id=UUID(str(data["listing_id"])),
            sender_id=UUID(str(data["sender_id"])),
            recipient_id=UUID(str(data["recipient_id"])),
            content=data["content"],
            created_at=created_at,
        )
