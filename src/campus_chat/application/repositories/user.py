from __future__ import annotations

from typing import Protocol
from uuid import UUID

from campus_chat.domain.entities.user import UserAccount


class UserDirectory(Protocol):
    async def get_by_id(self, user_id: UUID) -> UserAccount | None: ...
