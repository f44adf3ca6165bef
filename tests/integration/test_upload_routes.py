"""Integration tests for POST /api/upload."""

from fastapi.testclient import TestClient

from backend.app.config import Settings, get_settings
from backend.app.main import app


def test_upload_pdf(client: TestClient, pdf_bytes: bytes) -> None:
    response = client.post(
        "/api/upload",
        files={"file": ("report.pdf", pdf_bytes, "application/pdf")},
        data={"username": "demo"},
    )

    assert response.status_code == 200
    assert response.json() == {"message": "File uploaded successfully", "filename": "report.pdf"}

    listed = client.get("/pdfs/", params={"username": "demo"})
    assert listed.json() == {"pdfs": ["report.pdf"]}


def test_upload_rejects_non_pdf(client: TestClient) -> None:
    response = client.post(
        "/api/upload",
        files={"file": ("notes.txt", b"hello", "text/plain")},
        data={"username": "demo"},
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Only PDF files are allowed"}


def test_upload_missing_username(client: TestClient, pdf_bytes: bytes) -> None:
    response = client.post(
        "/api/upload", files={"file": ("report.pdf", pdf_bytes, "application/pdf")}
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Missing file or username"}


def test_upload_over_size_limit(client: TestClient, pdf_bytes: bytes) -> None:
    """Files larger than max_upload_mb are rejected."""
    app.dependency_overrides[get_settings] = lambda: Settings(max_upload_mb=0)

    response = client.post(
        "/api/upload",
        files={"file": ("report.pdf", pdf_bytes, "application/pdf")},
        data={"username": "demo"},
    )

    assert response.status_code == 400
    assert "limit" in response.json()["error"]
