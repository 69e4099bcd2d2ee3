from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone

from campus_chat.application.exceptions import InvalidContentError
from campus_chat.application.policies.permissions import assert_conversation_access
from campus_chat.application.ports.notifications import NotificationDispatcher
from campus_chat.application.uow import UnitOfWork
from campus_chat.domain.entities.message import MAX_CONTENT_LENGTH, Message
from campus_chat.domain.events.message_created import MessageCreated
from campus_chat.services import conversation_service

logger = logging.getLogger(__name__)


def validate_content(content: str | None) -> str:
    if content is None or not content.strip():
        raise InvalidContentError("Message content is required")
    if "\x00" in content:
        # PostgreSQL text cannot store NUL
        raise InvalidContentError("Message content must not contain NUL characters")
    if len(content) > MAX_CONTENT_LENGTH:
        raise InvalidContentError(
            f"Message must be between 1 and {MAX_CONTENT_LENGTH} characters"
        )
    return content


async def send_message(
    conversation_id: uuid.UUID,
    sender_id: uuid.UUID,
    content: str,
    uow: UnitOfWork,
    notifier: NotificationDispatcher | None = None,
) -> Message:
    """Append a message and advance the conversation's ``updated_at``.

    Both writes share one commit. The notification is handed off only after
    the commit succeeded and cannot fail the send.
    """
    conversation = await uow.conversations.get_by_id(conversation_id)
    conversation = assert_conversation_access(sender_id, conversation)
    content = validate_content(content)

    msg = Message(
        id=uuid.uuid4(),
        conversation_id=conversation_id,
        sender_id=sender_id,
        content=content,
        is_read=False,
        created_at=datetime.now(timezone.utc),
    )
    try:
        msg = await uow.messages_w.create(msg)
        await uow.conversations_w.touch_updated_at(conversation_id, msg.created_at)
        await uow.commit()
    except Exception:
        await uow.rollback()
        raise

    logger.info(
        "Message %s sent in conversation %s by user %s",
        msg.id, conversation_id, sender_id,
    )

    recipient_id = conversation.other_participant(sender_id)
    if notifier is not None and recipient_id is not None:
        await notifier.dispatch(
            MessageCreated(
                message_id=msg.id,
                conversation_id=conversation_id,
                listing_id=conversation.listing_id,
                sender_id=sender_id,
                recipient_id=recipient_id,
                content=msg.content,
                created_at=msg.created_at,
            )
        )

    return msg


async def send_message_to_listing(
    listing_id: uuid.UUID,
    buyer_id: uuid.UUID,
    content: str,
    uow: UnitOfWork,
    notifier: NotificationDispatcher | None = None,
) -> Message:
    validate_content(content)
    conversation = await conversation_service.get_or_create_conversation(
        listing_id, buyer_id, uow,
    )
    return await send_message(conversation.id, buyer_id, content, uow, notifier)


async def list_messages(
    conversation_id: uuid.UUID,
    user_id: uuid.UUID,
    uow: UnitOfWork,
) -> list[Message]:
    conversation = await uow.conversations.get_by_id(conversation_id)
    assert_conversation_access(user_id, conversation)
    return await uow.messages.list_messages(conversation_id)
