from __future__ import annotations

from uuid import UUID

from campus_chat.application.exceptions import ConversationNotFoundError, ForbiddenError
from campus_chat.domain.entities.conversation import Conversation


def assert_conversation_access(
    user_id: UUID,
    conversation: Conversation | None,
) -> Conversation:
    """Raise if conversation doesn't exist or the user is neither buyer nor seller."""
    if conversation is None:
        raise ConversationNotFoundError()

    if not conversation.is_participant(user_id):
        raise ForbiddenError("Not a participant of this conversation")

    return conversation
