"""Dev seeding helper for the demo account."""

import asyncio
import logging

from backend.app.db.engine import get_store
from backend.app.db.repositories import UserRecord, UserRepository
from backend.app.db.storage import KeyValueStore

logger = logging.getLogger(__name__)

DEMO_USER = UserRecord(username="demo", email="demo@example.com", password="password")


async def seed_demo_user(store: KeyValueStore) -> None:
    """Seed the demo account.

    This function is idempotent - safe to run multiple times.
    """
    users = UserRepository(store)

    if await users.get(DEMO_USER.username) is not None:
        logger.debug("Demo user already exists")
        return

    await users.create(DEMO_USER)
    logger.info("Seeded demo user %s", DEMO_USER.username)


if __name__ == "__main__":
    asyncio.run(seed_demo_user(get_store()))
