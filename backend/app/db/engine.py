"""Database engine and the shared store dependency."""

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from backend.app.config import Settings, get_settings
from backend.app.db.inmemory import InMemoryStore
from backend.app.db.sql_storage import SqlKeyValueStore
from backend.app.db.storage import KeyValueStore


def create_async_engine_from_settings(settings: Settings) -> AsyncEngine:
    """Create async SQLAlchemy engine from settings.

    Raises:
        ValueError: If DATABASE_URL is unset or empty.
    """
    database_url = settings.database_url

    if not database_url:
        raise ValueError(
            "DATABASE_URL must be set to a valid connection string. "
            "Please configure the database_url setting."
        )

    # Convert sync driver URLs to their async counterparts
    if database_url.startswith("postgresql://"):
        database_url = database_url.replace("postgresql://", "postgresql+asyncpg://", 1)
    elif database_url.startswith("sqlite://"):
        database_url = database_url.replace("sqlite://", "sqlite+aiosqlite://", 1)

    return create_async_engine(database_url, pool_pre_ping=True, echo=False)


def create_store_from_settings(settings: Settings) -> KeyValueStore:
    """Create the configured store: SQL when DATABASE_URL is set, else in-memory."""
    if settings.database_url:
        return SqlKeyValueStore(create_async_engine_from_settings(settings))
    return InMemoryStore()


# One store shared by every route
_store: KeyValueStore | None = None


def get_store() -> KeyValueStore:
    """FastAPI dependency for the shared store."""
    global _store
    if _store is None:
        _store = create_store_from_settings(get_settings())
    return _store
