from __future__ import annotations

from typing import Protocol

from campus_chat.application.repositories.conversation import (
    ConversationReader,
    ConversationWriter,
)
from campus_chat.application.repositories.listing import ListingLookup
from campus_chat.application.repositories.message import MessageReader, MessageWriter
from campus_chat.application.repositories.notification_preference import (
    NotificationPreferenceReader,
    NotificationPreferenceWriter,
)
from campus_chat.application.repositories.user import UserDirectory


class UnitOfWork(Protocol):
    conversations: ConversationReader
    conversations_w: ConversationWriter
    messages: MessageReader
    messages_w: MessageWriter
    preferences: NotificationPreferenceReader
    preferences_w: NotificationPreferenceWriter
    listings: ListingLookup
    users: UserDirectory

    async def commit(self) -> None: ...
    async def rollback(self) -> None: ...
