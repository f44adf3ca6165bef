"""Integration tests for /api/chat routes."""

from fastapi.testclient import TestClient

from backend.app.llm.client import UPLOAD_TIP


def test_ask_without_document(client: TestClient) -> None:
    """Answers without a document carry the generic header and the upload tip."""
    response = client.post("/api/chat/ask", json={"query": "Hello?", "username": "demo"})

    assert response.status_code == 200
    data = response.json()
    assert data["answer"].startswith("🤖 **AI Response:**")
    assert data["answer"].endswith(UPLOAD_TIP)
    assert data["timestamp"]


def test_ask_with_document(client: TestClient) -> None:
    response = client.post(
        "/api/chat/ask", json={"query": "Summary?", "username": "demo", "filename": "q3.pdf"}
    )

    assert response.status_code == 200
    assert 'Based on "q3.pdf"' in response.json()["answer"]


def test_ask_missing_fields(client: TestClient) -> None:
    response = client.post("/api/chat/ask", json={"username": "demo"})

    assert response.status_code == 400
    assert response.json() == {"error": "Missing query or username"}


def test_history_is_oldest_first_and_records_document(client: TestClient) -> None:
    client.post("/api/chat/ask", json={"query": "first", "username": "demo"})
    client.post("/api/chat/ask", json={"query": "second", "username": "demo", "filename": "a.pdf"})

    response = client.get("/api/chat/history", params={"username": "demo"})

    assert response.status_code == 200
    history = response.json()["history"]
    assert [h["question"] for h in history] == ["first", "second"]
    assert [h["filename"] for h in history] == ["No document", "a.pdf"]


def test_history_is_per_user(client: TestClient) -> None:
    client.post("/api/chat/ask", json={"query": "mine", "username": "demo"})

    response = client.get("/api/chat/history", params={"username": "someone-else"})

    assert response.json() == {"history": []}


def test_history_missing_username(client: TestClient) -> None:
    response = client.get("/api/chat/history")

    assert response.status_code == 400


def test_clear_history(client: TestClient) -> None:
    client.post("/api/chat/ask", json={"query": "Q", "username": "demo"})

    response = client.post("/api/chat/clear", json={"username": "demo"})

    assert response.status_code == 200
    assert response.json() == {"message": "Chat history cleared successfully"}
    assert client.get("/api/chat/history", params={"username": "demo"}).json() == {"history": []}


def test_clear_missing_username(client: TestClient) -> None:
    response = client.post("/api/chat/clear", json={})

    assert response.status_code == 400
    assert response.json() == {"error": "Missing username"}
