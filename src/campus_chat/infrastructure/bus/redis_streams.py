"""Redis Streams transport for notification events.

The API appends with :class:`RedisStreamProducer`; the notification worker
reads through a consumer group with :class:`RedisStreamConsumer`.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Coroutine

import redis.asyncio as aioredis

from campus_chat.infrastructure.bus.serializer import from_stream_fields, to_stream_fields

logger = logging.getLogger(__name__)

StreamHandler = Callable[[str, dict[str, Any]], Coroutine[Any, Any, None]]


class RedisStreamProducer:
    def __init__(self, redis: aioredis.Redis, *, maxlen: int = 100_000) -> None:
        self._redis = redis
        self._maxlen = maxlen

    async def add(self, stream: str, event_type: str, payload: dict[str, Any]) -> str:
        return await self._redis.xadd(
            stream,
            to_stream_fields(event_type, payload),
            maxlen=self._maxlen,
            approximate=True,
        )


class RedisStreamConsumer:
    """Consumer-group reader that hands each entry to ``handler`` once.

    Entries are acknowledged whether or not the handler succeeded: a
    notification that failed is logged and dropped, never retried.
    """

    def __init__(
        self,
        redis: aioredis.Redis,
        stream: str,
        group: str,
        consumer: str,
        handler: StreamHandler,
        *,
        batch_size: int = 10,
        block_ms: int = 5000,
        error_backoff: float = 5.0,
    ) -> None:
        self._redis = redis
        self.stream = stream
        self.group = group
        self.consumer = consumer
        self._handler = handler
        self._batch_size = batch_size
        self._block_ms = block_ms
        self._error_backoff = error_backoff

    async def ensure_group(self) -> bool:
        """Create the group if missing. Returns True when it was created."""
        try:
            # From the start of the stream: events queued before the first
            # worker boot are still delivered
            await self._redis.xgroup_create(self.stream, self.group, id="0", mkstream=True)
        except aioredis.ResponseError as exc:
            if "BUSYGROUP" not in str(exc):
                raise
            logger.debug("Consumer group %s already exists on %s", self.group, self.stream)
            return False
        logger.info("Created consumer group %s on %s", self.group, self.stream)
        return True

    async def read_batch(self) -> list[tuple[str, dict[str, Any]]]:
        response = await self._redis.xreadgroup(
            groupname=self.group,
            consumername=self.consumer,
            streams={self.stream: ">"},
            count=self._batch_size,
            block=self._block_ms,
        )
        return [entry for _stream, entries in response or [] for entry in entries]

    async def process(self, entry_id: str, fields: dict[str, Any]) -> None:
        try:
            event_type, payload = from_stream_fields(fields)
            await self._handler(event_type, payload)
        except Exception:
            logger.exception("Failed to handle %s entry %s", self.stream, entry_id)
        finally:
            await self._redis.xack(self.stream, self.group, entry_id)

    async def run(self, stop: asyncio.Event) -> None:
        await self.ensure_group()
        logger.info("Consuming %s as %s/%s", self.stream, self.group, self.consumer)
        while not stop.is_set():
            try:
                for entry_id, fields in await self.read_batch():
                    await self.process(entry_id, fields)
            except Exception:
                logger.exception("Stream read failed, retrying in %.0fs", self._error_backoff)
                await asyncio.sleep(self._error_backoff)
        logger.info("Stream consumer %s stopped", self.consumer)
