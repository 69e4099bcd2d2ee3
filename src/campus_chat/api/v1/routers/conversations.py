from __future__ import annotations

import logging
from uuid import UUID

from fastapi import APIRouter

from campus_chat.api.deps import CurrentPrincipal, NotifierDep, UoWDep
from campus_chat.api.v1.schemas.common import CountResponse
from campus_chat.api.v1.schemas.conversation import ConversationResponse
from campus_chat.api.v1.schemas.message import MessageResponse, SendMessageRequest
from campus_chat.services import conversation_service, message_service, read_state_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/chat/conversations", tags=["conversations"])


@router.get("", response_model=list[ConversationResponse])
async def list_conversations(
    principal: CurrentPrincipal,
    uow: UoWDep,
) -> list[ConversationResponse]:
    summaries = await conversation_service.list_user_conversation_summaries(
        principal.user_id, uow,
    )
    return [
        ConversationResponse.build(
            s.conversation,
            principal.user_id,
            unread_count=s.unread_count,
            last_message=s.last_message,
        )
        for s in summaries
    ]


@router.get("/listing/{listing_id}", response_model=ConversationResponse)
async def get_or_create_for_listing(
    listing_id: UUID,
    principal: CurrentPrincipal,
    uow: UoWDep,
) -> ConversationResponse:
    logger.info("User %s requesting conversation for listing %s", principal.user_id, listing_id)
    conv = await conversation_service.get_or_create_conversation(
        listing_id, principal.user_id, uow,
    )
    unread = await read_state_service.get_unread_count(conv.id, principal.user_id, uow)
    return ConversationResponse.build(conv, principal.user_id, unread_count=unread)


@router.get("/{conversation_id}", response_model=ConversationResponse)
async def get_conversation(
    conversation_id: UUID,
    principal: CurrentPrincipal,
    uow: UoWDep,
) -> ConversationResponse:
    conv = await conversation_service.get_conversation(conversation_id, principal.user_id, uow)
    unread = await read_state_service.get_unread_count(conversation_id, principal.user_id, uow)
    return ConversationResponse.build(
        conv, principal.user_id, unread_count=unread, include_messages=True,
    )


@router.get("/{conversation_id}/messages", response_model=list[MessageResponse])
async def list_messages(
    conversation_id: UUID,
    principal: CurrentPrincipal,
    uow: UoWDep,
) -> list[MessageResponse]:
    messages = await message_service.list_messages(conversation_id, principal.user_id, uow)
    return [MessageResponse.model_validate(m, from_attributes=True) for m in messages]


@router.post("/{conversation_id}/messages", response_model=MessageResponse, status_code=201)
async def send_message(
    conversation_id: UUID,
    body: SendMessageRequest,
    principal: CurrentPrincipal,
    uow: UoWDep,
    notifier: NotifierDep,
) -> MessageResponse:
    msg = await message_service.send_message(
        conversation_id, principal.user_id, body.content, uow, notifier,
    )
    return MessageResponse.model_validate(msg, from_attributes=True)


@router.put("/{conversation_id}/read", response_model=CountResponse)
async def mark_conversation_read(
    conversation_id: UUID,
    principal: CurrentPrincipal,
    uow: UoWDep,
) -> CountResponse:
    count = await read_state_service.mark_messages_as_read(
        conversation_id, principal.user_id, uow,
    )
    return CountResponse(count=count)
