"""Upload simulation endpoint - POST /api/upload."""

from datetime import datetime, timezone
from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status

from backend.app.config import Settings, get_settings
from backend.app.db.engine import get_store
from backend.app.db.repositories import FileRepository, StoredFile
from backend.app.db.storage import KeyValueStore
from backend.app.models.documents import UploadResponse
from backend.app.utils.logging import StructuredEventLogger
from backend.app.utils.metrics import chat_metrics

router = APIRouter(prefix="/api", tags=["upload"])
events = StructuredEventLogger("upload")

PDF_CONTENT_TYPE = "application/pdf"


async def store_pdf_upload(
    store: KeyValueStore,
    settings: Settings,
    file: UploadFile | None,
    username: str | None,
) -> StoredFile:
    """Validate and record an uploaded PDF.

    Only metadata is kept; text extraction belongs to the answering backend.

    Raises:
        HTTPException: 400 on missing fields, non-PDF content or oversize file
    """
    if file is None or not file.filename or not username:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing file or username")

    if file.content_type != PDF_CONTENT_TYPE:
        chat_metrics.inc_upload("rejected")
        events.log_event(
            "upload", "rejected", username=username, error_reason=f"content_type={file.content_type}"
        )
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Only PDF files are allowed")

    content = await file.read()
    if len(content) > settings.max_upload_mb * 1024 * 1024:
        chat_metrics.inc_upload("rejected")
        events.log_event("upload", "rejected", username=username, error_reason="too_large")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"File exceeds {settings.max_upload_mb} MB limit",
        )

    stored = StoredFile(
        username=username,
        filename=file.filename,
        content_type=file.content_type,
        size=len(content),
        uploaded_at=datetime.now(timezone.utc),
    )
    await FileRepository(store).save(stored)

    chat_metrics.inc_upload("success")
    events.log_event("upload", "success", username=username, filename=stored.filename, size=stored.size)

    return stored


@router.post("/upload", response_model=UploadResponse)
async def upload(
    store: Annotated[KeyValueStore, Depends(get_store)],
    settings: Annotated[Settings, Depends(get_settings)],
    file: Annotated[UploadFile | None, File()] = None,
    username: Annotated[str | None, Form()] = None,
) -> UploadResponse:
    """Upload a PDF for the given user."""
    stored = await store_pdf_upload(store, settings, file, username)
    return UploadResponse(message="File uploaded successfully", filename=stored.filename)
