from __future__ import annotations

import asyncio
import uuid
from datetime import datetime, timedelta, timezone

import pytest

from campus_chat.application.exceptions import (
    ConversationNotFoundError,
    ForbiddenError,
    ListingNotFoundError,
    SelfConversationError,
)
from campus_chat.services import conversation_service
from tests.conftest import FakeUoW, make_conversation, make_message


@pytest.fixture
def marketplace(uow: FakeUoW, listing_id, seller_id):
    uow.listings._sellers[listing_id] = seller_id
    return uow


@pytest.mark.asyncio
async def test_get_or_create_creates_conversation(marketplace, listing_id, buyer_id, seller_id):
    conv = await conversation_service.get_or_create_conversation(listing_id, buyer_id, marketplace)

    assert conv.listing_id == listing_id
    assert conv.buyer_id == buyer_id
    assert conv.seller_id == seller_id
    assert conv.created_at == conv.updated_at
    assert marketplace.commits == 1


@pytest.mark.asyncio
async def test_get_or_create_is_idempotent(marketplace, listing_id, buyer_id):
    first = await conversation_service.get_or_create_conversation(listing_id, buyer_id, marketplace)
    second = await conversation_service.get_or_create_conversation(listing_id, buyer_id, marketplace)

    assert first.id == second.id
    assert len(marketplace.conversations._store) == 1
    # Existing conversation is returned without a write
    assert marketplace.commits == 1


@pytest.mark.asyncio
async def test_get_or_create_concurrent_calls_yield_one_row(marketplace, listing_id, buyer_id):
    results = await asyncio.gather(*(
        conversation_service.get_or_create_conversation(listing_id, buyer_id, marketplace)
        for _ in range(5)
    ))

    assert len({c.id for c in results}) == 1
    assert len(marketplace.conversations._store) == 1
    assert marketplace.conversations_w.inserts == 1


@pytest.mark.asyncio
async def test_get_or_create_unknown_listing(uow, buyer_id):
    with pytest.raises(ListingNotFoundError):
        await conversation_service.get_or_create_conversation(uuid.uuid4(), buyer_id, uow)
    assert uow.conversations._store == {}


@pytest.mark.asyncio
async def test_get_or_create_rejects_own_listing(marketplace, listing_id, seller_id):
    with pytest.raises(SelfConversationError):
        await conversation_service.get_or_create_conversation(listing_id, seller_id, marketplace)
    assert marketplace.conversations._store == {}


@pytest.mark.asyncio
async def test_different_buyers_get_separate_conversations(marketplace, listing_id):
    a = await conversation_service.get_or_create_conversation(listing_id, uuid.uuid4(), marketplace)
    b = await conversation_service.get_or_create_conversation(listing_id, uuid.uuid4(), marketplace)
    assert a.id != b.id


@pytest.mark.asyncio
async def test_get_conversation_populates_ordered_messages(uow, buyer_id, seller_id):
    conv = uow.add_conversation(make_conversation(buyer_id=buyer_id, seller_id=seller_id))
    base = datetime.now(timezone.utc)
    later = uow.add_message(make_message(conv, seller_id, "second", created_at=base + timedelta(seconds=1)))
    earlier = uow.add_message(make_message(conv, buyer_id, "first", created_at=base))

    loaded = await conversation_service.get_conversation(conv.id, seller_id, uow)

    assert [m.id for m in loaded.messages] == [earlier.id, later.id]


@pytest.mark.asyncio
async def test_get_conversation_not_found(uow, buyer_id):
    with pytest.raises(ConversationNotFoundError):
        await conversation_service.get_conversation(uuid.uuid4(), buyer_id, uow)


@pytest.mark.asyncio
async def test_get_conversation_forbidden_for_outsider(uow):
    conv = uow.add_conversation(make_conversation())
    with pytest.raises(ForbiddenError):
        await conversation_service.get_conversation(conv.id, uuid.uuid4(), uow)


@pytest.mark.asyncio
async def test_list_user_conversations_most_recent_first(uow, buyer_id):
    now = datetime.now(timezone.utc)
    old = uow.add_conversation(make_conversation(buyer_id=buyer_id, updated_at=now - timedelta(hours=1)))
    new = uow.add_conversation(make_conversation(seller_id=buyer_id, updated_at=now))
    uow.add_conversation(make_conversation())

    convs = await conversation_service.list_user_conversations(buyer_id, uow)

    assert [c.id for c in convs] == [new.id, old.id]


@pytest.mark.asyncio
async def test_summaries_carry_unread_and_last_message(uow, buyer_id, seller_id):
    conv = uow.add_conversation(make_conversation(buyer_id=buyer_id, seller_id=seller_id))
    quiet = uow.add_conversation(make_conversation(buyer_id=buyer_id))
    base = datetime.now(timezone.utc)
    uow.add_message(make_message(conv, seller_id, "one", created_at=base))
    last = uow.add_message(make_message(conv, seller_id, "two", created_at=base + timedelta(seconds=1)))

    summaries = await conversation_service.list_user_conversation_summaries(buyer_id, uow)
    by_id = {s.conversation.id: s for s in summaries}

    assert by_id[conv.id].unread_count == 2
    assert by_id[conv.id].last_message.id == last.id
    assert by_id[quiet.id].unread_count == 0
    assert by_id[quiet.id].last_message is None


@pytest.mark.asyncio
async def test_summaries_empty_for_new_user(uow):
    assert await conversation_service.list_user_conversation_summaries(uuid.uuid4(), uow) == []
