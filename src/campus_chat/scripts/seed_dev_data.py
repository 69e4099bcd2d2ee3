"""Create tables and seed a buyer, a seller, a listing and one conversation.

Development only: in production the users and listings tables belong to the
marketplace backend and the chat tables are migrated alongside them.
"""
from __future__ import annotations

import asyncio
import logging
import uuid

from campus_chat.infrastructure.db.base import Base
from campus_chat.infrastructure.db.models import ListingModel, UserModel
from campus_chat.infrastructure.db.session import AsyncSessionLocal, engine
from campus_chat.infrastructure.db.uow import open_uow
from campus_chat.services import conversation_service, message_service

logger = logging.getLogger(__name__)


async def create_tables() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Tables created: %s", ", ".join(sorted(Base.metadata.tables)))


async def seed() -> None:
    seller_id, buyer_id, listing_id = uuid.uuid4(), uuid.uuid4(), uuid.uuid4()

    async with AsyncSessionLocal() as session:
        session.add_all([
            UserModel(
                id=seller_id, username=f"seller-{seller_id.hex[:6]}",
                email="seller@example.edu", first_name="Sam", last_name="Seller",
            ),
            UserModel(
                id=buyer_id, username=f"buyer-{buyer_id.hex[:6]}",
                email="buyer@example.edu", first_name="Bea", last_name="Buyer",
            ),
        ])
        await session.flush()
        session.add(ListingModel(id=listing_id, seller_id=seller_id, title="Calculus textbook"))
        await session.commit()

    async with open_uow(AsyncSessionLocal) as uow:
        conv = await conversation_service.get_or_create_conversation(listing_id, buyer_id, uow)
        thread = [
            (buyer_id, "Hi! Is the textbook still available?"),
            (seller_id, "Yes, it is. Pickup near the library works for me."),
            (buyer_id, "Great, see you there tomorrow."),
        ]
        for sender_id, content in thread:
            await message_service.send_message(conv.id, sender_id, content, uow)

    logger.info(
        "Seeded conversation %s (buyer=%s seller=%s listing=%s)",
        conv.id, buyer_id, seller_id, listing_id,
    )


async def run() -> None:
    try:
        await create_tables()
        await seed()
    finally:
        await engine.dispose()


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    asyncio.run(run())


if __name__ == "__main__":
    main()
