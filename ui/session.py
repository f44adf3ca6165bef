"""Chat session - state machine, bootstrap, and the operations the page calls.

States: UNAUTHENTICATED -> (login/register/restore) -> BOOTSTRAPPING -> READY
-> (logout) -> UNAUTHENTICATED. Document and question operations are only
valid in READY.
"""

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from ui.client import BackendError, ChatApiClient
from ui.dispatcher import QueryDispatcher
from ui.notifications import Notifier
from ui.registry import DocumentRegistry, UnsupportedFileType, UploadState
from ui.transcript import Exchange, TranscriptStore

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    """Session lifecycle state."""

    unauthenticated = "unauthenticated"
    bootstrapping = "bootstrapping"
    ready = "ready"


class AuthenticationRequired(Exception):
    """No usable token/username: the caller must send the user to login."""


class SessionNotReady(RuntimeError):
    """Operation attempted outside the READY state."""


_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _parse_timestamp(value: Any) -> datetime | None:
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    # Naive timestamps are taken as UTC so they compare with aware ones
    return parsed if parsed.tzinfo is not None else parsed.replace(tzinfo=timezone.utc)


def order_history(entries: list[dict[str, Any]]) -> list[Exchange]:
    """Convert backend history entries to exchanges, oldest first.

    Entries are sorted by timestamp when every entry has a parseable one;
    otherwise the backend's newest-first order is reversed.
    """
    exchanges = [
        Exchange(
            question=str(entry.get("question", "")),
            answer=str(entry.get("answer", "")),
            document=entry.get("filename"),
            timestamp=_parse_timestamp(entry.get("timestamp")),
        )
        for entry in entries
    ]

    if exchanges and all(exchange.timestamp is not None for exchange in exchanges):
        return sorted(exchanges, key=lambda exchange: exchange.timestamp or _EPOCH)

    return list(reversed(exchanges))


class ChatSession:
    """Owns one transcript, one document registry and the dispatcher for a signed-in user."""

    def __init__(self, client: ChatApiClient, notifier: Notifier | None = None) -> None:
        self.client = client
        self.notifier = notifier or Notifier()
        self.state = SessionState.unauthenticated
        self.username: str | None = None
        self.token: str | None = None
        self.transcript = TranscriptStore()
        self.registry: DocumentRegistry | None = None
        self.dispatcher = QueryDispatcher(client, self.transcript, self.notifier)

    @property
    def documents_available(self) -> bool:
        return self.registry is not None and bool(self.registry.documents)

    @property
    def upload_state(self) -> UploadState:
        return self.registry.upload_state if self.registry is not None else UploadState.idle

    # --- Lifecycle ---

    async def login(self, username: str, password: str) -> None:
        """Log in and bootstrap.

        Raises:
            BackendError: If the credentials are rejected or the request fails
        """
        result = await self.client.login(username, password)
        await self.establish(result.token, result.username)

    async def register(self, username: str, email: str, password: str) -> None:
        """Register, then bootstrap as the new user.

        Raises:
            BackendError: If registration is rejected or the request fails
        """
        result = await self.client.register(username, email, password)
        await self.establish(result.token, result.username)

    async def restore(self, token: str | None, username: str | None) -> None:
        """Resume a session from a stored token and username.

        Raises:
            AuthenticationRequired: If either value is missing or the token is not accepted
        """
        if not token or not username:
            raise AuthenticationRequired("No stored session")

        try:
            owner = await self.client.whoami(token)
        except BackendError as e:
            raise AuthenticationRequired(f"Stored session rejected: {e.message}") from e

        if owner != username:
            raise AuthenticationRequired("Stored session belongs to another user")

        await self.establish(token, username)

    async def establish(self, token: str | None, username: str | None) -> None:
        """Enter BOOTSTRAPPING with fresh stores, hydrate them, then become READY.

        Raises:
            AuthenticationRequired: If token or username is missing
        """
        if not token or not username:
            raise AuthenticationRequired("Missing token or username")

        self.state = SessionState.bootstrapping
        self.token = token
        self.username = username
        self.transcript = TranscriptStore()
        self.registry = DocumentRegistry(self.client, username)
        self.dispatcher = QueryDispatcher(self.client, self.transcript, self.notifier)

        await self._bootstrap(username, self.registry)
        self.state = SessionState.ready
        logger.info("Session ready for %s", username)

    async def _bootstrap(self, username: str, registry: DocumentRegistry) -> None:
        """Hydrate transcript and registry; failures are reported, not raised."""
        try:
            history = await self.client.fetch_history(username)
        except BackendError as e:
            logger.warning("Failed to fetch history for %s: %s", username, e.message)
            self.notifier.error("Failed to fetch history")
        else:
            self.transcript.install(order_history(history))

        try:
            await registry.refresh()
        except BackendError as e:
            logger.warning("Failed to fetch documents for %s: %s", username, e.message)
            self.notifier.error("Failed to load documents")

    def logout(self) -> None:
        """Drop all client-side session state."""
        self.transcript.clear()
        self.state = SessionState.unauthenticated
        self.token = None
        self.username = None
        self.registry = None
        logger.info("Session closed")

    # --- READY-only operations ---

    def _require_ready(self) -> tuple[str, DocumentRegistry]:
        if self.state is not SessionState.ready or self.username is None or self.registry is None:
            raise SessionNotReady(f"Session is {self.state.value}")
        return self.username, self.registry

    def selected_documents(self) -> list[str]:
        """Selected documents in display order."""
        _, registry = self._require_ready()
        return [name for name in registry.documents if registry.is_selected(name)]

    async def ask(self, question: str) -> None:
        """Submit a question against the currently selected documents."""
        username, _ = self._require_ready()
        await self.dispatcher.submit(question, self.selected_documents(), username)

    def toggle_document(self, name: str) -> None:
        """Flip selection of a known document."""
        _, registry = self._require_ready()
        registry.toggle_selection(name)

    async def upload_document(self, filename: str, content: bytes, content_type: str | None) -> bool:
        """Upload a PDF and refresh the registry.

        Returns:
            True on success; failures are reported through the notifier
        """
        _, registry = self._require_ready()
        try:
            await registry.upload(filename, content, content_type)
        except UnsupportedFileType:
            self.notifier.error("Please upload a valid PDF file")
            return False
        except BackendError as e:
            logger.warning("Upload of %s failed: %s", filename, e.message)
            self.notifier.error("Failed to upload PDF")
            return False

        self.notifier.success("PDF uploaded successfully!")
        return True

    async def remove_document(self, name: str) -> bool:
        """Delete a document.

        Returns:
            True on success; failures are reported through the notifier
        """
        _, registry = self._require_ready()
        try:
            await registry.remove(name)
        except BackendError as e:
            logger.warning("Delete of %s failed: %s", name, e.message)
            self.notifier.error(f"Failed to delete {name}")
            return False

        self.notifier.success(f"Deleted {name}")
        return True

    def clear_transcript(self) -> None:
        """Clear the visible transcript; in-flight answers are discarded on arrival."""
        self._require_ready()
        self.transcript.clear()
