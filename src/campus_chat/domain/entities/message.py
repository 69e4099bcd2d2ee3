from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

MAX_CONTENT_LENGTH = 5000


@dataclass(frozen=True, slots=True)
class Message:
    id: UUID
    conversation_id: UUID
    sender_id: UUID
    content: str
    is_read: bool
    created_at: datetime

    def is_from(self, user_id: UUID) -> bool:
        return self.sender_id == user_id
