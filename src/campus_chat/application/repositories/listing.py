from __future__ import annotations

from typing import Protocol
from uuid import UUID


class ListingLookup(Protocol):
    async def get_seller_id(self, listing_id: UUID) -> UUID | None: ...
