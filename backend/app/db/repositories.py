"""Repositories over the shared key/value store.

Each repository owns one namespace. Records are plain dataclasses so routes
never touch the raw dict layout.
"""

import uuid
from dataclasses import asdict, dataclass
from datetime import datetime
from urllib.parse import quote

from backend.app.db.storage import KeyValueStore, Record

USERS = "users"
CHATS = "chats"
FILES = "files"


@dataclass
class UserRecord:
    """Registered user. Passwords are stored as given (demo only)."""

    username: str
    email: str
    password: str


@dataclass
class ChatEntry:
    """One answered question in a user's history."""

    question: str
    answer: str
    filename: str | None
    timestamp: datetime

    def to_record(self) -> Record:
        return {
            "question": self.question,
            "answer": self.answer,
            "filename": self.filename,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_record(cls, record: Record) -> "ChatEntry":
        return cls(
            question=record["question"],
            answer=record["answer"],
            filename=record.get("filename"),
            timestamp=datetime.fromisoformat(record["timestamp"]),
        )


@dataclass
class StoredFile:
    """Metadata for an uploaded document; content is never kept."""

    username: str
    filename: str
    content_type: str
    size: int
    uploaded_at: datetime


class UserRepository:
    """User accounts keyed by username."""

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    async def get(self, username: str) -> UserRecord | None:
        """Get user by exact username."""
        record = await self._store.get(USERS, username)
        return UserRecord(**record) if record is not None else None

    async def find_by_login(self, login: str) -> UserRecord | None:
        """Find user by username, falling back to email."""
        user = await self.get(login)
        if user is not None:
            return user
        return await self.find_by_email(login)

    async def find_by_email(self, email: str) -> UserRecord | None:
        """Find user by email."""
        for _, record in await self._store.list(USERS):
            if record["email"] == email:
                return UserRecord(**record)
        return None

    async def exists(self, username: str, email: str) -> bool:
        """Check whether the username or the email is already taken."""
        if await self.get(username) is not None:
            return True
        return await self.find_by_email(email) is not None

    async def create(self, user: UserRecord) -> None:
        """Store a new user."""
        await self._store.put(USERS, user.username, asdict(user))


def user_prefix(username: str) -> str:
    """Key prefix owning one user's records.

    The username is percent-encoded so a "/" inside it can never make one
    user's prefix match another user's keys.
    """
    return f"{quote(username, safe='')}/"


class ChatRepository:
    """Per-user chat history, oldest first.

    Each entry is its own record keyed "<user>/<id>", so concurrent appends
    for one user never touch the same key.
    """

    def __init__(self, store: KeyValueStore, history_limit: int = 100) -> None:
        self._store = store
        self._history_limit = history_limit

    async def _entries(self, username: str) -> list[tuple[str, ChatEntry]]:
        records = await self._store.list(CHATS, prefix=user_prefix(username))
        entries = [(key, ChatEntry.from_record(record)) for key, record in records]
        entries.sort(key=lambda item: item[1].timestamp)
        return entries

    async def append(self, username: str, entry: ChatEntry) -> None:
        """Append an entry, dropping the oldest beyond the history limit."""
        key = f"{user_prefix(username)}{uuid.uuid4().hex}"
        await self._store.put(CHATS, key, entry.to_record())

        entries = await self._entries(username)
        for stale_key, _ in entries[: max(len(entries) - self._history_limit, 0)]:
            await self._store.delete(CHATS, stale_key)

    async def history(self, username: str) -> list[ChatEntry]:
        """Return the most recent entries, oldest first."""
        entries = await self._entries(username)
        return [entry for _, entry in entries[-self._history_limit :]]

    async def clear(self, username: str) -> None:
        """Drop the user's history."""
        for key, _ in await self._store.list(CHATS, prefix=user_prefix(username)):
            await self._store.delete(CHATS, key)


class FileRepository:
    """Uploaded document metadata keyed by "<user>/<filename>"."""

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    @staticmethod
    def _key(username: str, filename: str) -> str:
        return f"{user_prefix(username)}{filename}"

    async def save(self, stored: StoredFile) -> None:
        """Store (or replace) a document's metadata."""
        await self._store.put(
            FILES,
            self._key(stored.username, stored.filename),
            {
                "username": stored.username,
                "filename": stored.filename,
                "content_type": stored.content_type,
                "size": stored.size,
                "uploaded_at": stored.uploaded_at.isoformat(),
            },
        )

    async def delete(self, username: str, filename: str) -> bool:
        """Delete a document's metadata."""
        return await self._store.delete(FILES, self._key(username, filename))

    async def list_names(self, username: str) -> list[str]:
        """List the user's document names in upload order."""
        records = await self._store.list(FILES, prefix=user_prefix(username))
        return [record["filename"] for _, record in records]

    async def exists(self, username: str, filename: str) -> bool:
        """Check whether the user has uploaded a document with this name."""
        return await self._store.get(FILES, self._key(username, filename)) is not None
