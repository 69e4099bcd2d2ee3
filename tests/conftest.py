"""Shared test fixtures."""
from __future__ import annotations

import asyncio
import dataclasses
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from uuid import UUID

import pytest

from campus_chat.domain.entities.conversation import Conversation
from campus_chat.domain.entities.message import Message
from campus_chat.domain.entities.notification_preference import NotificationPreference
from campus_chat.domain.entities.user import UserAccount
from campus_chat.domain.events.message_created import MessageCreated


@pytest.fixture
def buyer_id() -> UUID:
    return uuid.uuid4()


@pytest.fixture
def seller_id() -> UUID:
    return uuid.uuid4()


@pytest.fixture
def listing_id() -> UUID:
    return uuid.uuid4()


def make_conversation(
    *,
    listing_id: UUID | None = None,
    buyer_id: UUID | None = None,
    seller_id: UUID | None = None,
    updated_at: datetime | None = None,
) -> Conversation:
    now = datetime.now(timezone.utc) - timedelta(minutes=5)
    return Conversation(
        id=uuid.uuid4(),
        listing_id=listing_id or uuid.uuid4(),
        buyer_id=buyer_id or uuid.uuid4(),
        seller_id=seller_id or uuid.uuid4(),
        created_at=now,
        updated_at=updated_at or now,
    )


def make_message(
    conversation: Conversation,
    sender_id: UUID,
    content: str = "hello",
    *,
    is_read: bool = False,
    created_at: datetime | None = None,
) -> Message:
    return Message(
        id=uuid.uuid4(),
        conversation_id=conversation.id,
        sender_id=sender_id,
        content=content,
        is_read=is_read,
        created_at=created_at or datetime.now(timezone.utc),
    )


def make_user(user_id: UUID, **overrides) -> UserAccount:
    values = {
        "id": user_id,
        "username": f"user-{user_id.hex[:6]}",
        "email": f"{user_id.hex[:6]}@campus.example.edu",
        "first_name": None,
        "last_name": None,
    }
    values.update(overrides)
    return UserAccount(**values)


@dataclass
class FakeConversationReader:
    _store: dict[UUID, Conversation] = field(default_factory=dict)

    async def get_by_id(self, conversation_id: UUID) -> Conversation | None:
        return self._store.get(conversation_id)

    async def get_by_triple(
        self, listing_id: UUID, buyer_id: UUID, seller_id: UUID,
    ) -> Conversation | None:
        # Yield so concurrent get-or-create calls interleave like real queries
        await asyncio.sleep(0)
        for c in self._store.values():
            if (c.listing_id, c.buyer_id, c.seller_id) == (listing_id, buyer_id, seller_id):
                return c
        return None

    async def list_for_user(self, user_id: UUID) -> list[Conversation]:
        mine = [c for c in self._store.values() if c.is_participant(user_id)]
        return sorted(mine, key=lambda c: (c.updated_at, c.id), reverse=True)


@dataclass
class FakeConversationWriter:
    _reader: FakeConversationReader
    inserts: int = 0

    async def create_if_not_exists(
        self, conversation: Conversation,
    ) -> tuple[Conversation, bool]:
        for c in self._reader._store.values():
            if (c.listing_id, c.buyer_id, c.seller_id) == (
                conversation.listing_id, conversation.buyer_id, conversation.seller_id,
            ):
                return c, False
        self._reader._store[conversation.id] = conversation
        self.inserts += 1
        return conversation, True

    async def touch_updated_at(self, conversation_id: UUID, ts: datetime) -> None:
        conv = self._reader._store[conversation_id]
        self._reader._store[conversation_id] = dataclasses.replace(
            conv, updated_at=max(conv.updated_at, ts),
        )


@dataclass
class FakeMessageReader:
    _messages: list[Message] = field(default_factory=list)
    # Shared with FakeConversationReader by FakeUoW
    _conversations: dict[UUID, Conversation] = field(default_factory=dict)

    def _unread(self, user_id: UUID) -> list[Message]:
        return [m for m in self._messages if m.sender_id != user_id and not m.is_read]

    async def get_by_id(self, message_id: UUID) -> Message | None:
        return next((m for m in self._messages if m.id == message_id), None)

    async def list_messages(self, conversation_id: UUID) -> list[Message]:
        thread = [m for m in self._messages if m.conversation_id == conversation_id]
        return sorted(thread, key=lambda m: (m.created_at, m.id))

    async def last_messages(self, conversation_ids: list[UUID]) -> dict[UUID, Message]:
        result: dict[UUID, Message] = {}
        for cid in conversation_ids:
            thread = await self.list_messages(cid)
            if thread:
                result[cid] = thread[-1]
        return result

    async def count_unread(self, conversation_id: UUID, user_id: UUID) -> int:
        return sum(1 for m in self._unread(user_id) if m.conversation_id == conversation_id)

    async def count_unread_by_conversation(
        self, user_id: UUID, conversation_ids: list[UUID],
    ) -> dict[UUID, int]:
        counts: dict[UUID, int] = {}
        for m in self._unread(user_id):
            if m.conversation_id in conversation_ids:
                counts[m.conversation_id] = counts.get(m.conversation_id, 0) + 1
        return counts

    async def count_unread_for_user(self, user_id: UUID) -> int:
        mine = {c.id for c in self._conversations.values() if c.is_participant(user_id)}
        return sum(1 for m in self._unread(user_id) if m.conversation_id in mine)


@dataclass
class FakeMessageWriter:
    _reader: FakeMessageReader

    async def create(self, message: Message) -> Message:
        self._reader._messages.append(message)
        return message

    async def mark_conversation_read(self, conversation_id: UUID, reader_id: UUID) -> int:
        changed = 0
        for i, m in enumerate(self._reader._messages):
            if m.conversation_id == conversation_id and m.sender_id != reader_id and not m.is_read:
                self._reader._messages[i] = dataclasses.replace(m, is_read=True)
                changed += 1
        return changed

    async def mark_read(self, message_id: UUID, reader_id: UUID) -> bool:
        for i, m in enumerate(self._reader._messages):
            if m.id == message_id and m.sender_id != reader_id and not m.is_read:
                self._reader._messages[i] = dataclasses.replace(m, is_read=True)
                return True
        return False


@dataclass
class FakePreferenceReader:
    _store: dict[UUID, NotificationPreference] = field(default_factory=dict)

    async def get_by_user_id(self, user_id: UUID) -> NotificationPreference | None:
        return self._store.get(user_id)


@dataclass
class FakePreferenceWriter:
    _reader: FakePreferenceReader

    async def upsert(self, preference: NotificationPreference) -> NotificationPreference:
        self._reader._store[preference.user_id] = preference
        return preference


@dataclass
class FakeListingLookup:
    _sellers: dict[UUID, UUID] = field(default_factory=dict)

    async def get_seller_id(self, listing_id: UUID) -> UUID | None:
        return self._sellers.get(listing_id)


@dataclass
class FakeUserDirectory:
    _users: dict[UUID, UserAccount] = field(default_factory=dict)

    async def get_by_id(self, user_id: UUID) -> UserAccount | None:
        return self._users.get(user_id)


@dataclass
class FakeUoW:
    """In-memory UoW for unit tests."""
    conversations: FakeConversationReader = field(default_factory=FakeConversationReader)
    conversations_w: FakeConversationWriter | None = None
    messages: FakeMessageReader = field(default_factory=FakeMessageReader)
    messages_w: FakeMessageWriter | None = None
    preferences: FakePreferenceReader = field(default_factory=FakePreferenceReader)
    preferences_w: FakePreferenceWriter | None = None
    listings: FakeListingLookup = field(default_factory=FakeListingLookup)
    users: FakeUserDirectory = field(default_factory=FakeUserDirectory)
    commits: int = 0
    rollbacks: int = 0

    def __post_init__(self) -> None:
        if self.conversations_w is None:
            self.conversations_w = FakeConversationWriter(self.conversations)
        if self.messages_w is None:
            self.messages_w = FakeMessageWriter(self.messages)
        if self.preferences_w is None:
            self.preferences_w = FakePreferenceWriter(self.preferences)
        self.messages._conversations = self.conversations._store

    @property
    def _committed(self) -> bool:
        return self.commits > 0

    def add_conversation(self, conversation: Conversation) -> Conversation:
        self.conversations._store[conversation.id] = conversation
        return conversation

    def add_message(self, message: Message) -> Message:
        self.messages._messages.append(message)
        return message

    async def commit(self) -> None:
        self.commits += 1

    async def rollback(self) -> None:
        self.rollbacks += 1


@dataclass
class FakeNotifier:
    events: list[MessageCreated] = field(default_factory=list)
    closed: bool = False

    async def dispatch(self, event: MessageCreated) -> None:
        self.events.append(event)

    async def aclose(self) -> None:
        self.closed = True


@dataclass
class FakeMailer:
    sent: list[tuple[str, str, str]] = field(default_factory=list)
    fail: bool = False

    async def send(self, to: str, subject: str, body: str) -> None:
        if self.fail:
            raise ConnectionError("SMTP relay unavailable")
        self.sent.append((to, subject, body))


@pytest.fixture
def uow() -> FakeUoW:
    return FakeUoW()
