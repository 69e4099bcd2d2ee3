"""Post-commit notification hand-off.

Both dispatchers return as soon as the event is handed off. Delivery runs in
its own task or process with its own database session, so a slow or failing
mail relay never reaches the request that sent the message.
"""
from __future__ import annotations

import asyncio
import logging
from contextlib import AbstractAsyncContextManager
from typing import Callable

from campus_chat.application.ports.mailer import Mailer
from campus_chat.application.uow import UnitOfWork
from campus_chat.domain.events.message_created import MessageCreated
from campus_chat.infrastructure.bus.redis_streams import RedisStreamProducer
from campus_chat.services import notification_service

logger = logging.getLogger(__name__)

UoWFactory = Callable[[], AbstractAsyncContextManager[UnitOfWork]]


class BackgroundNotificationDispatcher:
    """Deliver notifications on detached asyncio tasks in this process."""

    def __init__(
        self,
        uow_factory: UoWFactory,
        mailer: Mailer,
        *,
        marketplace_name: str = "Campus Marketplace",
    ) -> None:
        self._uow_factory = uow_factory
        self._mailer = mailer
        self._marketplace_name = marketplace_name
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def dispatch(self, event: MessageCreated) -> None:
        try:
            task = asyncio.create_task(
                self._deliver(event), name=f"notify-{event.message_id}",
            )
        except Exception:
            logger.exception("Could not schedule notification for message %s", event.message_id)
            return
        # Event loop keeps only weak references to tasks
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _deliver(self, event: MessageCreated) -> None:
        try:
            async with self._uow_factory() as uow:
                await notification_service.deliver_message_notification(
                    event, uow, self._mailer, marketplace_name=self._marketplace_name,
                )
        except Exception:
            logger.exception("Notification task failed for message %s", event.message_id)

    async def aclose(self) -> None:
        if self._tasks:
            logger.info("Waiting for %d pending notification(s)", len(self._tasks))
            await asyncio.gather(*self._tasks, return_exceptions=True)


class RedisStreamNotificationDispatcher:
    """Append notification events to a Redis stream for the notification worker."""

    def __init__(self, producer: RedisStreamProducer, stream: str) -> None:
        self._producer = producer
        self._stream = stream

    async def dispatch(self, event: MessageCreated) -> None:
        try:
            await self._producer.add(self._stream, MessageCreated.EVENT_TYPE, event.to_payload())
        except Exception:
            logger.exception(
                "Could not enqueue notification for message %s on %s",
                event.message_id, self._stream,
            )

    async def aclose(self) -> None:
        return None
