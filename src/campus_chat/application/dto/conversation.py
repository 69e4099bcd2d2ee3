from __future__ import annotations

from dataclasses import dataclass

from campus_chat.domain.entities.conversation import Conversation
from campus_chat.domain.entities.message import Message


@dataclass(frozen=True, slots=True)
class ConversationSummary:
    """A conversation as seen by one participant in their inbox."""

    conversation: Conversation
    unread_count: int
    last_message: Message | None
