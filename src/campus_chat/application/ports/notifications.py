from __future__ import annotations

from typing import Protocol

from campus_chat.domain.events.message_created import MessageCreated


class NotificationDispatcher(Protocol):
    async def dispatch(self, event: MessageCreated) -> None:
        """Hand off a notification without waiting for delivery. Must not raise."""
        ...

    async def aclose(self) -> None: ...
