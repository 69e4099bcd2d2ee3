from __future__ import annotations

import logging
from uuid import UUID

from fastapi import APIRouter

from campus_chat.api.deps import CurrentPrincipal, NotifierDep, UoWDep
from campus_chat.api.v1.schemas.common import StatusResponse, UnreadCountResponse
from campus_chat.api.v1.schemas.message import MessageResponse, SendListingMessageRequest
from campus_chat.services import message_service, read_state_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/chat", tags=["messages"])


@router.post("/messages", response_model=MessageResponse, status_code=201)
async def send_message_to_listing(
    body: SendListingMessageRequest,
    principal: CurrentPrincipal,
    uow: UoWDep,
    notifier: NotifierDep,
) -> MessageResponse:
    logger.info("User %s sending message to listing %s", principal.user_id, body.listing_id)
    msg = await message_service.send_message_to_listing(
        body.listing_id, principal.user_id, body.content, uow, notifier,
    )
    return MessageResponse.model_validate(msg, from_attributes=True)


@router.put("/messages/{message_id}/read", response_model=StatusResponse)
async def mark_message_read(
    message_id: UUID,
    principal: CurrentPrincipal,
    uow: UoWDep,
) -> StatusResponse:
    await read_state_service.mark_message_as_read(message_id, principal.user_id, uow)
    return StatusResponse()


@router.get("/unread-count", response_model=UnreadCountResponse)
async def get_unread_count(
    principal: CurrentPrincipal,
    uow: UoWDep,
) -> UnreadCountResponse:
    total = await read_state_service.get_total_unread_count(principal.user_id, uow)
    return UnreadCountResponse(unread_count=total)
