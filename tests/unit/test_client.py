"""Unit tests for the UI HTTP client."""

import json

import httpx
import pytest

from ui.client import BackendError, ChatApiClient
from ui.config import ClientSettings


def _client(handler: object) -> ChatApiClient:
    return ChatApiClient(
        api_url="http://api.test",
        backend_url="http://backend.test",
        transport=httpx.MockTransport(handler),  # type: ignore[arg-type]
    )


def _form_part(body: bytes, name: str) -> str:
    """Extract a plain multipart field value from a request body."""
    marker = f'name="{name}"\r\n\r\n'.encode()
    start = body.index(marker) + len(marker)
    return body[start : body.index(b"\r\n", start)].decode()


@pytest.mark.asyncio
async def test_ask_posts_multipart_with_json_filenames() -> None:
    """filenames go as a JSON list next to query and username."""
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"answer": "42"})

    answer = await _client(handler).ask("What?", ["a.pdf", "b.pdf"], "alice")

    assert answer == "42"
    request = seen[0]
    assert request.method == "POST"
    assert str(request.url) == "http://backend.test/ask/"
    assert request.headers["Content-Type"].startswith("multipart/form-data")
    assert json.loads(_form_part(request.content, "filenames")) == ["a.pdf", "b.pdf"]
    assert _form_part(request.content, "query") == "What?"
    assert _form_part(request.content, "username") == "alice"


@pytest.mark.asyncio
async def test_auth_calls_go_to_api_url() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={"message": "ok", "token": "t", "user": {"username": "alice", "email": "a@x.io"}},
        )

    result = await _client(handler).login("alice", "secret")

    assert result.token == "t"
    assert result.username == "alice"
    assert str(seen[0].url) == "http://api.test/api/auth/login"
    assert json.loads(seen[0].content) == {"username": "alice", "password": "secret"}


@pytest.mark.asyncio
async def test_error_body_becomes_backend_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"error": "Invalid credentials"})

    with pytest.raises(BackendError) as exc_info:
        await _client(handler).login("alice", "wrong")

    assert exc_info.value.status_code == 401
    assert exc_info.value.message == "Invalid credentials"


@pytest.mark.asyncio
async def test_non_json_error_uses_status() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="Bad Gateway")

    with pytest.raises(BackendError) as exc_info:
        await _client(handler).list_documents("alice")

    assert exc_info.value.message == "HTTP 502"


@pytest.mark.asyncio
async def test_network_error_becomes_backend_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(BackendError) as exc_info:
        await _client(handler).fetch_history("alice")

    assert exc_info.value.status_code is None
    assert "ConnectError" in exc_info.value.message


@pytest.mark.asyncio
async def test_malformed_body_becomes_backend_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"unexpected": True})

    with pytest.raises(BackendError, match="pdfs"):
        await _client(handler).list_documents("alice")


@pytest.mark.asyncio
async def test_upload_sends_file_and_username() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"message": "ok", "filename": "report.pdf"})

    stored = await _client(handler).upload_document(
        "alice", "report.pdf", b"%PDF-1.4", "application/pdf"
    )

    assert stored == "report.pdf"
    body = seen[0].content
    assert b'name="file"; filename="report.pdf"' in body
    assert b"Content-Type: application/pdf" in body
    assert _form_part(body, "username") == "alice"


def test_from_settings() -> None:
    settings = ClientSettings(api_url="http://api.test", backend_url="http://backend.test")

    client = ChatApiClient.from_settings(settings)

    assert isinstance(client, ChatApiClient)
