"""Document selection registry - the user's documents and the active subset.

Every backend-touching operation performs exactly one round trip (upload adds
the refresh that follows it) and updates local state only after that round
trip succeeds.
"""

import logging
from collections.abc import Iterable
from enum import Enum

from ui.client import BackendError, ChatApiClient

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"


class UnsupportedFileType(ValueError):
    """Upload rejected before any network call: not a PDF."""


class UploadState(str, Enum):
    """Two-phase upload state."""

    idle = "idle"
    pending = "pending"
    confirmed = "confirmed"
    failed = "failed"


def is_pdf(content_type: str | None) -> bool:
    return content_type == PDF_CONTENT_TYPE


class DocumentRegistry:
    """Known documents for one user plus the selected subset."""

    def __init__(self, client: ChatApiClient, username: str) -> None:
        self._client = client
        self._username = username
        self._known: list[str] = []
        self._selected: set[str] = set()
        self.upload_state = UploadState.idle

    @property
    def documents(self) -> tuple[str, ...]:
        """Known documents in backend order (for display)."""
        return tuple(self._known)

    def list_known(self) -> set[str]:
        return set(self._known)

    def list_selected(self) -> set[str]:
        return set(self._selected)

    def is_selected(self, name: str) -> bool:
        return name in self._selected

    def install(self, names: Iterable[str]) -> None:
        """Replace known documents and select all of them."""
        self._known = list(dict.fromkeys(names))
        self._selected = set(self._known)

    def toggle_selection(self, name: str) -> None:
        """Flip whether a known document is selected.

        Raises:
            KeyError: If the document is not known
        """
        if name not in self._known:
            raise KeyError(name)

        if name in self._selected:
            self._selected.discard(name)
        else:
            self._selected.add(name)

    async def refresh(self) -> None:
        """Reload the document list from the backend; selects everything.

        Raises:
            BackendError: If the listing fails (state unchanged)
        """
        names = await self._client.list_documents(self._username)
        self.install(names)
        logger.debug("Registry refreshed: %d document(s)", len(self._known))

    async def remove(self, name: str) -> None:
        """Delete a document at the backend, then drop it locally.

        Raises:
            BackendError: If the deletion fails (state unchanged)
        """
        await self._client.delete_document(self._username, name)
        self._known = [known for known in self._known if known != name]
        self._selected.discard(name)

    async def upload(self, filename: str, content: bytes, content_type: str | None) -> str:
        """Upload a PDF, then refresh the registry.

        Returns:
            Filename as stored by the backend

        Raises:
            UnsupportedFileType: If the file is not a PDF (no network call made)
            BackendError: If the upload or the follow-up refresh fails
        """
        if not is_pdf(content_type):
            raise UnsupportedFileType(f"{filename} is not a PDF")

        self.upload_state = UploadState.pending
        try:
            stored_name = await self._client.upload_document(
                self._username, filename, content, content_type or PDF_CONTENT_TYPE
            )
            await self.refresh()
        except BackendError:
            self.upload_state = UploadState.failed
            raise

        self.upload_state = UploadState.confirmed
        return stored_name
