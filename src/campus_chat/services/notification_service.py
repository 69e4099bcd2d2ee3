"""Notification preferences and delivery of "new message" e-mails."""
from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone

from campus_chat.application.ports.mailer import Mailer
from campus_chat.application.uow import UnitOfWork
from campus_chat.domain.entities.notification_preference import (
    EffectiveNotificationSettings,
    NotificationPreference,
)
from campus_chat.domain.entities.user import UserAccount
from campus_chat.domain.events.message_created import MessageCreated

logger = logging.getLogger(__name__)


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


async def get_preference(user_id: uuid.UUID, uow: UnitOfWork) -> NotificationPreference:
    preference = await uow.preferences.get_by_user_id(user_id)
    return preference or NotificationPreference.defaults(user_id)


async def update_preference(
    user_id: uuid.UUID,
    email_notifications_enabled: bool | None,
    email: str | None,
    first_name: str | None,
    uow: UnitOfWork,
) -> NotificationPreference:
    """Create or update the user's preference.

    ``None`` keeps the stored value; an empty string clears an override.
    """
    current = await uow.preferences.get_by_user_id(user_id)
    base = current or NotificationPreference.defaults(user_id)
    now = datetime.now(timezone.utc)

    preference = NotificationPreference(
        user_id=user_id,
        email_notifications_enabled=(
            base.email_notifications_enabled
            if email_notifications_enabled is None
            else email_notifications_enabled
        ),
        email=base.email if email is None else _clean(email),
        first_name=base.first_name if first_name is None else _clean(first_name),
        created_at=base.created_at or now,
        updated_at=now,
    )
    preference = await uow.preferences_w.upsert(preference)
    await uow.commit()

    logger.info(
        "Updated notification preferences for user %s (enabled=%s)",
        user_id, preference.email_notifications_enabled,
    )
    return preference


def resolve_effective_settings(
    user_id: uuid.UUID,
    preference: NotificationPreference | None,
    account: UserAccount | None,
) -> EffectiveNotificationSettings:
    """Merge the optional preference record with account defaults."""
    enabled = True if preference is None else preference.email_notifications_enabled
    override_email = _clean(preference.email) if preference else None
    override_name = _clean(preference.first_name) if preference else None
    return EffectiveNotificationSettings(
        user_id=user_id,
        enabled=enabled,
        email=override_email or (_clean(account.email) if account else None),
        first_name=override_name or (_clean(account.first_name) if account else None),
    )


def build_message_email(
    recipient_name: str | None,
    sender_name: str,
    content: str,
    marketplace_name: str,
) -> tuple[str, str]:
    subject = f"New message received from {sender_name}"
    body = (
        f"Hi {recipient_name or 'there'},\n\n"
        f"You have received a new message from {sender_name}:\n\n"
        "---\n"
        f"{content}\n"
        "---\n\n"
        f"Log in to {marketplace_name} to reply to this message.\n\n"
        "Best regards,\n"
        f"{marketplace_name} Team"
    )
    return subject, body


async def deliver_message_notification(
    event: MessageCreated,
    uow: UnitOfWork,
    mailer: Mailer,
    *,
    marketplace_name: str = "Campus Marketplace",
) -> bool:
    """Send the "new message" e-mail to the recipient of ``event``.

    Returns True when an e-mail was handed to the mailer. Never raises.
    """
    try:
        recipient = await uow.users.get_by_id(event.recipient_id)
        preference = await uow.preferences.get_by_user_id(event.recipient_id)
        effective = resolve_effective_settings(event.recipient_id, preference, recipient)

        if not effective.enabled:
            logger.debug("User %s has disabled e-mail notifications", event.recipient_id)
            return False

        if effective.email is None:
            logger.warning("No e-mail address found for user %s", event.recipient_id)
            return False

        sender = await uow.users.get_by_id(event.sender_id)
        sender_name = sender.display_name if sender else "Someone"

        subject, body = build_message_email(
            effective.first_name, sender_name, event.content, marketplace_name,
        )
        await mailer.send(effective.email, subject, body)
    except Exception:
        logger.exception(
            "Failed to deliver notification for message %s to user %s",
            event.message_id, event.recipient_id,
        )
        return False

    logger.info(
        "Message notification sent to user %s for message %s",
        event.recipient_id, event.message_id,
    )
    return True
