"""Create the notification consumer group ahead of the first worker start."""
from __future__ import annotations

import asyncio
import logging
from functools import partial

import redis.asyncio as aioredis

from campus_chat.config import settings
from campus_chat.infrastructure.bus.redis_streams import RedisStreamConsumer
from campus_chat.infrastructure.mail.smtp_mailer import LoggingMailer
from campus_chat.workers.notification_worker import handle_event

logger = logging.getLogger(__name__)


async def create_group() -> None:
    redis = aioredis.from_url(settings.REDIS_URL, decode_responses=True)
    try:
        consumer = RedisStreamConsumer(
            redis=redis,
            stream=settings.NOTIFICATIONS_STREAM,
            group=settings.NOTIFICATIONS_GROUP,
            consumer="bootstrap",
            handler=partial(handle_event, mailer=LoggingMailer()),
        )
        await consumer.ensure_group()
    finally:
        await redis.aclose()


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    asyncio.run(create_group())


if __name__ == "__main__":
    main()
