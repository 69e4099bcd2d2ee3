from __future__ import annotations

import uuid

import pytest

from campus_chat.application.exceptions import (
    ConversationNotFoundError,
    ForbiddenError,
    MessageNotFoundError,
)
from campus_chat.services import message_service, read_state_service
from tests.conftest import FakeUoW, make_conversation, make_message


@pytest.fixture
def conversation(uow: FakeUoW, buyer_id, seller_id):
    return uow.add_conversation(make_conversation(buyer_id=buyer_id, seller_id=seller_id))


@pytest.mark.asyncio
async def test_unread_counts_then_mark_all_read(uow, conversation, buyer_id, seller_id):
    for text in ("a", "b", "c"):
        await message_service.send_message(conversation.id, buyer_id, text, uow)

    assert await read_state_service.get_unread_count(conversation.id, seller_id, uow) == 3
    # Own messages never count as unread
    assert await read_state_service.get_unread_count(conversation.id, buyer_id, uow) == 0

    changed = await read_state_service.mark_messages_as_read(conversation.id, seller_id, uow)

    assert changed == 3
    assert await read_state_service.get_unread_count(conversation.id, seller_id, uow) == 0


@pytest.mark.asyncio
async def test_mark_messages_as_read_is_idempotent(uow, conversation, buyer_id, seller_id):
    uow.add_message(make_message(conversation, buyer_id))

    assert await read_state_service.mark_messages_as_read(conversation.id, seller_id, uow) == 1
    assert await read_state_service.mark_messages_as_read(conversation.id, seller_id, uow) == 0


@pytest.mark.asyncio
async def test_mark_messages_as_read_leaves_own_messages(uow, conversation, buyer_id, seller_id):
    own = uow.add_message(make_message(conversation, seller_id))
    uow.add_message(make_message(conversation, buyer_id))

    await read_state_service.mark_messages_as_read(conversation.id, seller_id, uow)

    assert (await uow.messages.get_by_id(own.id)).is_read is False


@pytest.mark.asyncio
async def test_buyer_seller_unread_scenario(uow, listing_id, buyer_id, seller_id):
    uow.listings._sellers[listing_id] = seller_id

    msg = await message_service.send_message_to_listing(listing_id, buyer_id, "Hi", uow)
    conv_id = msg.conversation_id
    assert await read_state_service.get_total_unread_count(seller_id, uow) == 1
    assert await read_state_service.get_total_unread_count(buyer_id, uow) == 0

    await read_state_service.mark_messages_as_read(conv_id, seller_id, uow)
    await message_service.send_message(conv_id, seller_id, "Hello back", uow)

    assert await read_state_service.get_total_unread_count(seller_id, uow) == 0
    assert await read_state_service.get_total_unread_count(buyer_id, uow) == 1


@pytest.mark.asyncio
async def test_total_unread_ignores_other_conversations(uow, conversation, buyer_id):
    other = uow.add_conversation(make_conversation())
    uow.add_message(make_message(other, other.seller_id))
    uow.add_message(make_message(conversation, conversation.seller_id))

    assert await read_state_service.get_total_unread_count(buyer_id, uow) == 1


@pytest.mark.asyncio
async def test_get_unread_counts_fills_missing(uow, conversation, buyer_id, seller_id):
    quiet = uow.add_conversation(make_conversation(buyer_id=buyer_id))
    uow.add_message(make_message(conversation, seller_id))

    counts = await read_state_service.get_unread_counts(buyer_id, [conversation.id, quiet.id], uow)

    assert counts == {conversation.id: 1, quiet.id: 0}
    assert await read_state_service.get_unread_counts(buyer_id, [], uow) == {}


@pytest.mark.asyncio
async def test_unread_count_requires_participation(uow, conversation):
    with pytest.raises(ForbiddenError):
        await read_state_service.get_unread_count(conversation.id, uuid.uuid4(), uow)
    with pytest.raises(ConversationNotFoundError):
        await read_state_service.get_unread_count(uuid.uuid4(), conversation.buyer_id, uow)
    with pytest.raises(ForbiddenError):
        await read_state_service.mark_messages_as_read(conversation.id, uuid.uuid4(), uow)


@pytest.mark.asyncio
async def test_mark_message_as_read(uow, conversation, buyer_id, seller_id):
    msg = uow.add_message(make_message(conversation, buyer_id))

    await read_state_service.mark_message_as_read(msg.id, seller_id, uow)
    assert (await uow.messages.get_by_id(msg.id)).is_read is True
    commits = uow.commits

    # Already read: nothing to write
    await read_state_service.mark_message_as_read(msg.id, seller_id, uow)
    assert uow.commits == commits


@pytest.mark.asyncio
async def test_mark_own_message_is_noop(uow, conversation, buyer_id):
    msg = uow.add_message(make_message(conversation, buyer_id))

    await read_state_service.mark_message_as_read(msg.id, buyer_id, uow)

    assert (await uow.messages.get_by_id(msg.id)).is_read is False
    assert uow.commits == 0


@pytest.mark.asyncio
async def test_mark_message_as_read_errors(uow, conversation, buyer_id):
    msg = uow.add_message(make_message(conversation, buyer_id))

    with pytest.raises(MessageNotFoundError):
        await read_state_service.mark_message_as_read(uuid.uuid4(), buyer_id, uow)
    with pytest.raises(ForbiddenError):
        await read_state_service.mark_message_as_read(msg.id, uuid.uuid4(), uow)
