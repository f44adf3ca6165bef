"""In-memory implementation of the storage protocol."""

import copy

from backend.app.db.storage import Record


class InMemoryStore:
    """In-memory implementation of KeyValueStore.

    Records are deep-copied on the way in and out so callers cannot mutate
    stored state behind the store's back.
    """

    def __init__(self) -> None:
        self._data: dict[str, dict[str, Record]] = {}

    async def get(self, namespace: str, key: str) -> Record | None:
        """Get a record."""
        record = self._data.get(namespace, {}).get(key)
        return copy.deepcopy(record) if record is not None else None

    async def put(self, namespace: str, key: str, value: Record) -> None:
        """Insert or overwrite a record."""
        self._data.setdefault(namespace, {})[key] = copy.deepcopy(value)

    async def delete(self, namespace: str, key: str) -> bool:
        """Delete a record."""
        bucket = self._data.get(namespace, {})
        if key not in bucket:
            return False
        del bucket[key]
        return True

    async def list(self, namespace: str, prefix: str = "") -> list[tuple[str, Record]]:
        """List records in insertion order."""
        return [
            (key, copy.deepcopy(record))
            for key, record in self._data.get(namespace, {}).items()
            if key.startswith(prefix)
        ]

    async def ping(self) -> None:
        """Always reachable."""
        return None
