from __future__ import annotations

import logging
import uuid

from campus_chat.application.exceptions import MessageNotFoundError
from campus_chat.application.policies.permissions import assert_conversation_access
from campus_chat.application.uow import UnitOfWork

logger = logging.getLogger(__name__)


async def get_unread_count(
    conversation_id: uuid.UUID,
    user_id: uuid.UUID,
    uow: UnitOfWork,
) -> int:
    conversation = await uow.conversations.get_by_id(conversation_id)
    assert_conversation_access(user_id, conversation)
    return await uow.messages.count_unread(conversation_id, user_id)


async def get_total_unread_count(user_id: uuid.UUID, uow: UnitOfWork) -> int:
    return await uow.messages.count_unread_for_user(user_id)


async def mark_messages_as_read(
    conversation_id: uuid.UUID,
    user_id: uuid.UUID,
    uow: UnitOfWork,
) -> int:
    """Mark everything the other participant sent as read. Returns rows changed."""
    conversation = await uow.conversations.get_by_id(conversation_id)
    assert_conversation_access(user_id, conversation)

    count = await uow.messages_w.mark_conversation_read(conversation_id, user_id)
    await uow.commit()

    logger.info(
        "Marked %d messages as read in conversation %s for user %s",
        count, conversation_id, user_id,
    )
    return count


async def mark_message_as_read(
    message_id: uuid.UUID,
    user_id: uuid.UUID,
    uow: UnitOfWork,
) -> None:
    message = await uow.messages.get_by_id(message_id)
    if message is None:
        raise MessageNotFoundError()

    conversation = await uow.conversations.get_by_id(message.conversation_id)
    assert_conversation_access(user_id, conversation)

    # Own messages and already-read messages are left alone.
    if message.is_from(user_id) or message.is_read:
        return

    changed = await uow.messages_w.mark_read(message_id, user_id)
    await uow.commit()
    if changed:
        logger.info("Marked message %s as read for user %s", message_id, user_id)


async def get_unread_counts(
    user_id: uuid.UUID,
    conversation_ids: list[uuid.UUID],
    uow: UnitOfWork,
) -> dict[uuid.UUID, int]:
    """Unread counts keyed by conversation id. Conversations with none are 0."""
    if not conversation_ids:
        return {}
    counts = await uow.messages.count_unread_by_conversation(user_id, conversation_ids)
    return {cid: counts.get(cid, 0) for cid in conversation_ids}
