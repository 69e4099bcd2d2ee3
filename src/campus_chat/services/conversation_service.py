from __future__ import annotations

import dataclasses
import logging
import uuid
from datetime import datetime, timezone

from campus_chat.application.dto.conversation import ConversationSummary
from campus_chat.application.exceptions import ListingNotFoundError, SelfConversationError
from campus_chat.application.policies.permissions import assert_conversation_access
from campus_chat.application.uow import UnitOfWork
from campus_chat.domain.entities.conversation import Conversation
from campus_chat.services.read_state_service import get_unread_counts

logger = logging.getLogger(__name__)


async def get_or_create_conversation(
    listing_id: uuid.UUID,
    buyer_id: uuid.UUID,
    uow: UnitOfWork,
) -> Conversation:
    """Return the conversation between ``buyer_id`` and the listing's seller.

    The unique (listing, buyer, seller) index decides races: a losing insert
    returns the row that won instead of failing.
    """
    seller_id = await uow.listings.get_seller_id(listing_id)
    if seller_id is None:
        raise ListingNotFoundError()

    if buyer_id == seller_id:
        raise SelfConversationError()

    existing = await uow.conversations.get_by_triple(listing_id, buyer_id, seller_id)
    if existing is not None:
        return existing

    now = datetime.now(timezone.utc)
    conversation = Conversation(
        id=uuid.uuid4(),
        listing_id=listing_id,
        buyer_id=buyer_id,
        seller_id=seller_id,
        created_at=now,
        updated_at=now,
    )
    conversation, created = await uow.conversations_w.create_if_not_exists(conversation)
    await uow.commit()

    if created:
        logger.info(
            "Created conversation %s for listing %s between buyer %s and seller %s",
            conversation.id, listing_id, buyer_id, seller_id,
        )
    else:
        logger.info(
            "Conversation %s for listing %s was created concurrently, reusing it",
            conversation.id, listing_id,
        )
    return conversation


async def get_conversation(
    conversation_id: uuid.UUID,
    user_id: uuid.UUID,
    uow: UnitOfWork,
) -> Conversation:
    """Load a conversation with its full, ordered message thread."""
    conversation = await uow.conversations.get_by_id(conversation_id)
    conversation = assert_conversation_access(user_id, conversation)
    messages = await uow.messages.list_messages(conversation_id)
    return dataclasses.replace(conversation, messages=tuple(messages))


async def list_user_conversations(
    user_id: uuid.UUID,
    uow: UnitOfWork,
) -> list[Conversation]:
    return await uow.conversations.list_for_user(user_id)


async def list_user_conversation_summaries(
    user_id: uuid.UUID,
    uow: UnitOfWork,
) -> list[ConversationSummary]:
    """Inbox view: every conversation with its unread count and latest message."""
    conversations = await uow.conversations.list_for_user(user_id)
    if not conversations:
        return []

    ids = [c.id for c in conversations]
    unread = await get_unread_counts(user_id, ids, uow)
    last = await uow.messages.last_messages(ids)
    return [
        ConversationSummary(
            conversation=c,
            unread_count=unread[c.id],
            last_message=last.get(c.id),
        )
        for c in conversations
    ]
