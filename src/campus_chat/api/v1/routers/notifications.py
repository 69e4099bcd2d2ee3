from __future__ import annotations

from fastapi import APIRouter

from campus_chat.api.deps import CurrentPrincipal, UoWDep
from campus_chat.api.v1.schemas.notification import (
    NotificationPreferenceResponse,
    UpdateNotificationPreferenceRequest,
)
from campus_chat.services import notification_service

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("/preferences", response_model=NotificationPreferenceResponse)
async def get_preferences(
    principal: CurrentPrincipal,
    uow: UoWDep,
) -> NotificationPreferenceResponse:
    preference = await notification_service.get_preference(principal.user_id, uow)
    return NotificationPreferenceResponse.model_validate(preference, from_attributes=True)


@router.put("/preferences", response_model=NotificationPreferenceResponse)
async def update_preferences(
    body: UpdateNotificationPreferenceRequest,
    principal: CurrentPrincipal,
    uow: UoWDep,
) -> NotificationPreferenceResponse:
    preference = await notification_service.update_preference(
        principal.user_id,
        body.email_notifications_enabled,
        body.email,
        body.first_name,
        uow,
    )
    return NotificationPreferenceResponse.model_validate(preference, from_attributes=True)
