from __future__ import annotations

from contextlib import asynccontextmanager
from types import TracebackType
from typing import AsyncIterator, Self

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from campus_chat.infrastructure.db.repositories.conversation import (
    ConversationReaderRepo,
    ConversationWriterRepo,
)
from campus_chat.infrastructure.db.repositories.listing import ListingLookupRepo
from campus_chat.infrastructure.db.repositories.message import (
    MessageReaderRepo,
    MessageWriterRepo,
)
from campus_chat.infrastructure.db.repositories.notification_preference import (
    NotificationPreferenceReaderRepo,
    NotificationPreferenceWriterRepo,
)
from campus_chat.infrastructure.db.repositories.user import UserDirectoryRepo


class SqlAlchemyUoW:
    """Concrete Unit-of-Work backed by a single AsyncSession."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self.conversations = ConversationReaderRepo(session)
        self.conversations_w = ConversationWriterRepo(session)
        self.messages = MessageReaderRepo(session)
        self.messages_w = MessageWriterRepo(session)
        self.preferences = NotificationPreferenceReaderRepo(session)
        self.preferences_w = NotificationPreferenceWriterRepo(session)
        self.listings = ListingLookupRepo(session)
        self.users = UserDirectoryRepo(session)

    async def commit(self) -> None:
        await self._session.commit()

    async def rollback(self) -> None:
        await self._session.rollback()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if exc_type is not None:
            await self.rollback()


@asynccontextmanager
async def open_uow(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[SqlAlchemyUoW]:
    """Unit of work on a fresh session, for work outside a request."""
    async with session_factory() as session:
        async with SqlAlchemyUoW(session) as uow:
            yield uow
