"""SQL implementation of the storage protocol."""

from sqlalchemy import delete, select, text, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from backend.app.db.models import Base, StoredRecord
from backend.app.db.storage import Record


class SqlKeyValueStore:
    """SQL implementation of KeyValueStore on a single JSON table."""

    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine

    async def create_tables(self) -> None:
        """Create the backing table if it does not exist."""
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def get(self, namespace: str, key: str) -> Record | None:
        """Get a record."""
        async with AsyncSession(self._engine) as session:
            row = await self._find(session, namespace, key)
            return dict(row.value) if row is not None else None

    async def put(self, namespace: str, key: str, value: Record) -> None:
        """Insert or overwrite a record, keeping its original position.

        A concurrent insert of the same key loses the unique constraint race
        and is retried as an update.
        """
        async with AsyncSession(self._engine) as session:
            row = await self._find(session, namespace, key)
            if row is not None:
                row.value = dict(value)
                await session.commit()
                return

            session.add(StoredRecord(namespace=namespace, key=key, value=dict(value)))
            try:
                await session.commit()
            except IntegrityError:
                await session.rollback()
                await session.execute(
                    update(StoredRecord)
                    .where(StoredRecord.namespace == namespace, StoredRecord.key == key)
                    .values(value=dict(value))
                )
                await session.commit()

    async def delete(self, namespace: str, key: str) -> bool:
        """Delete a record."""
        async with AsyncSession(self._engine) as session:
            result = await session.execute(
                delete(StoredRecord).where(
                    StoredRecord.namespace == namespace,
                    StoredRecord.key == key,
                )
            )
            await session.commit()
            return bool(result.rowcount)

    async def list(self, namespace: str, prefix: str = "") -> list[tuple[str, Record]]:
        """List records ordered by insertion."""
        query = select(StoredRecord).where(StoredRecord.namespace == namespace)
        if prefix:
            query = query.where(StoredRecord.key.startswith(prefix, autoescape=True))
        query = query.order_by(StoredRecord.id)

        async with AsyncSession(self._engine) as session:
            result = await session.execute(query)
            return [(row.key, dict(row.value)) for row in result.scalars().all()]

    async def ping(self) -> None:
        """Run a trivial query."""
        async with self._engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    @staticmethod
    async def _find(session: AsyncSession, namespace: str, key: str) -> StoredRecord | None:
        result = await session.execute(
            select(StoredRecord).where(
                StoredRecord.namespace == namespace,
                StoredRecord.key == key,
            )
        )
        return result.scalar_one_or_none()
