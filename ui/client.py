"""HTTP client for the local auth endpoints and the answering backend."""

import json
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import httpx

from ui.config import ClientSettings

logger = logging.getLogger(__name__)


class BackendError(Exception):
    """A request failed: network error or non-success status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


@dataclass(frozen=True)
class AuthResult:
    """Successful login/register payload."""

    token: str
    username: str
    email: str


def _form_fields(**fields: str) -> dict[str, tuple[None, bytes]]:
    """Encode plain fields as multipart parts (no filename) so they post as multipart/form-data."""
    return {name: (None, value.encode("utf-8")) for name, value in fields.items()}


def _require(data: Any, key: str) -> Any:
    """Read a required field from a JSON object body.

    Raises:
        BackendError: If the body is not an object or lacks the field
    """
    if not isinstance(data, dict) or key not in data:
        raise BackendError(f"Malformed response body: missing {key!r}")
    return data[key]


def _error_message(response: httpx.Response) -> str:
    """Pull {"error": ...} (or FastAPI's {"detail": ...}) out of an error response."""
    try:
        body = response.json()
    except ValueError:
        return f"HTTP {response.status_code}"
    if isinstance(body, dict):
        return str(body.get("error") or body.get("detail") or f"HTTP {response.status_code}")
    return f"HTTP {response.status_code}"


def _auth_result(data: Any) -> AuthResult:
    user = _require(data, "user")
    return AuthResult(
        token=str(_require(data, "token")),
        username=str(_require(user, "username")),
        email=str(_require(user, "email")),
    )


class ChatApiClient:
    """Async client for both endpoint families.

    Args:
        api_url: Base URL of the local simulation endpoints
        backend_url: Base URL of the answering backend
        timeout: Per-request timeout in seconds
        transport: Optional httpx transport (for testing with mocks)
    """

    def __init__(
        self,
        api_url: str,
        backend_url: str,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api = httpx.AsyncClient(base_url=api_url, timeout=timeout, transport=transport)
        self._backend = httpx.AsyncClient(base_url=backend_url, timeout=timeout, transport=transport)

    @classmethod
    def from_settings(cls, settings: ClientSettings) -> "ChatApiClient":
        """Build a client from UI settings."""
        return cls(
            api_url=settings.api_url,
            backend_url=settings.backend_url,
            timeout=settings.request_timeout_s,
        )

    async def aclose(self) -> None:
        """Close both underlying connection pools."""
        await self._api.aclose()
        await self._backend.aclose()

    async def _send(self, client: httpx.AsyncClient, method: str, url: str, **kwargs: Any) -> Any:
        """Send a request and return the decoded JSON body.

        Raises:
            BackendError: On network errors or non-2xx responses
        """
        try:
            response = await client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise BackendError(f"Network error: {type(e).__name__}") from e

        if not response.is_success:
            message = _error_message(response)
            logger.warning("%s %s returned %d: %s", method, url, response.status_code, message)
            raise BackendError(message, status_code=response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise BackendError("Malformed response body", status_code=response.status_code) from e

    # --- Local simulation endpoints ---

    async def login(self, username: str, password: str) -> AuthResult:
        """Log in by username or email."""
        data = await self._send(
            self._api, "POST", "/api/auth/login", json={"username": username, "password": password}
        )
        return _auth_result(data)

    async def register(self, username: str, email: str, password: str) -> AuthResult:
        """Register a new account."""
        data = await self._send(
            self._api,
            "POST",
            "/api/auth/register",
            json={"username": username, "email": email, "password": password},
        )
        return _auth_result(data)

    async def whoami(self, token: str) -> str:
        """Return the username a token belongs to."""
        data = await self._send(
            self._api, "GET", "/api/auth/me", headers={"Authorization": f"Bearer {token}"}
        )
        return str(_require(data, "username"))

    # --- Answering backend ---

    async def upload_document(
        self, username: str, filename: str, content: bytes, content_type: str
    ) -> str:
        """Upload a document; returns the stored filename."""
        data = await self._send(
            self._backend,
            "POST",
            "/upload/",
            files={
                "file": (filename, content, content_type),
                **_form_fields(username=username),
            },
        )
        return str(_require(data, "filename"))

    async def delete_document(self, username: str, filename: str) -> None:
        """Delete a document."""
        await self._send(
            self._backend,
            "POST",
            "/delete/",
            files=_form_fields(filename=filename, username=username),
        )

    async def list_documents(self, username: str) -> list[str]:
        """List the user's documents in backend order."""
        data = await self._send(self._backend, "GET", "/pdfs/", params={"username": username})
        return [str(name) for name in _require(data, "pdfs")]

    async def fetch_history(self, username: str) -> list[dict[str, Any]]:
        """Fetch the user's history as returned by the backend (newest first)."""
        data = await self._send(self._backend, "GET", "/history/", params={"username": username})
        history: list[dict[str, Any]] = _require(data, "history")
        return history

    async def ask(self, query: str, filenames: Sequence[str], username: str) -> str:
        """Ask a question against the given documents; returns the answer text."""
        data = await self._send(
            self._backend,
            "POST",
            "/ask/",
            files=_form_fields(filenames=json.dumps(list(filenames)), query=query, username=username),
        )
        return str(_require(data, "answer"))
