"""Consumer that delivers "new message" e-mails queued on a Redis stream."""
from __future__ import annotations

import asyncio
import logging
import signal
import socket
import uuid
from functools import partial
from typing import Any

import redis.asyncio as aioredis

from campus_chat.application.ports.mailer import Mailer
from campus_chat.config import settings
from campus_chat.domain.events.message_created import MessageCreated
from campus_chat.infrastructure.bus.redis_streams import RedisStreamConsumer
from campus_chat.infrastructure.db.session import AsyncSessionLocal
from campus_chat.infrastructure.db.uow import open_uow
from campus_chat.infrastructure.mail.smtp_mailer import build_mailer
from campus_chat.infrastructure.notifications.dispatcher import UoWFactory
from campus_chat.logging_config import setup_logging
from campus_chat.services import notification_service

logger = logging.getLogger(__name__)


async def handle_event(
    event_type: str,
    data: dict[str, Any],
    *,
    mailer: Mailer,
    uow_factory: UoWFactory = partial(open_uow, AsyncSessionLocal),
) -> None:
    if event_type != MessageCreated.EVENT_TYPE:
        logger.debug("Ignoring unknown event: %s", event_type)
        return

    if not settings.EMAIL_NOTIFICATIONS_ENABLED:
        logger.debug("E-mail notifications disabled, dropping %s", event_type)
        return

    event = MessageCreated.from_payload(data)
    async with uow_factory() as uow:
        await notification_service.deliver_message_notification(
            event, uow, mailer, marketplace_name=settings.MARKETPLACE_NAME,
        )


async def run_consumer() -> None:
    redis = aioredis.from_url(settings.REDIS_URL, decode_responses=True)
    consumer = RedisStreamConsumer(
        redis=redis,
        stream=settings.NOTIFICATIONS_STREAM,
        group=settings.NOTIFICATIONS_GROUP,
        consumer=f"{socket.gethostname()}-{uuid.uuid4().hex[:8]}",
        handler=partial(handle_event, mailer=build_mailer(settings)),
    )

    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop.set)

    logger.info("Notification worker %s starting", consumer.consumer)
    try:
        await consumer.run(stop)
    finally:
        await redis.aclose()


def main() -> None:
    setup_logging(settings.LOG_LEVEL)
    asyncio.run(run_consumer())


if __name__ == "__main__":
    main()
