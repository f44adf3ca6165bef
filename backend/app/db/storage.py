"""Storage protocol shared by every route.

Records are JSON-compatible dicts grouped by namespace ("users", "chats",
"files"). Implementations must preserve insertion order in ``list`` and keep
an existing key's position when it is overwritten.
"""

from typing import Any, Protocol

Record = dict[str, Any]


class KeyValueStore(Protocol):
    """Namespaced key/value storage."""

    async def get(self, namespace: str, key: str) -> Record | None:
        """Get a record, or None if absent."""
        ...

    async def put(self, namespace: str, key: str, value: Record) -> None:
        """Insert or overwrite a record."""
        ...

    async def delete(self, namespace: str, key: str) -> bool:
        """Delete a record.

        Returns:
            True if a record was removed
        """
        ...

    async def list(self, namespace: str, prefix: str = "") -> list[tuple[str, Record]]:
        """List (key, record) pairs in insertion order.

        Args:
            namespace: Record namespace
            prefix: Only keys starting with this prefix
        """
        ...

    async def ping(self) -> None:
        """Raise if the store is unreachable."""
        ...
