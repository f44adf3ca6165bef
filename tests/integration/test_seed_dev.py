"""Integration tests for dev seeding helper."""

import pytest

from backend.app.db.inmemory import InMemoryStore
from backend.app.db.repositories import UserRecord, UserRepository
from backend.app.db.seed_dev import DEMO_USER, seed_demo_user


@pytest.mark.asyncio
async def test_seed_creates_demo_user() -> None:
    store = InMemoryStore()

    await seed_demo_user(store)

    assert await UserRepository(store).get("demo") == DEMO_USER


@pytest.mark.asyncio
async def test_seed_is_idempotent() -> None:
    """Seeding twice leaves a changed demo account alone."""
    store = InMemoryStore()
    users = UserRepository(store)
    await users.create(UserRecord("demo", "demo@example.com", "changed"))

    await seed_demo_user(store)

    user = await users.get("demo")
    assert user is not None
    assert user.password == "changed"
    assert len(await store.list("users")) == 1
