"""Simulated answering backend - /upload/, /delete/, /pdfs/, /history/, /ask/.

Stands in for the external document-indexing and question-answering service
so the UI can run end-to-end. Shares the store with the /api routes.
"""

import json
import time
from datetime import datetime, timezone
from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status

from backend.app.api.routes.chat import to_history_items
from backend.app.api.routes.upload import store_pdf_upload
from backend.app.config import Settings, get_settings
from backend.app.db.engine import get_store
from backend.app.db.repositories import ChatEntry, ChatRepository, FileRepository
from backend.app.db.storage import KeyValueStore
from backend.app.llm.client import AnswerClient, get_answer_client
from backend.app.models.chat import HistoryResponse
from backend.app.models.common import StatusResponse
from backend.app.models.documents import AnswerResponse, DocumentListResponse, UploadResponse
from backend.app.utils.logging import StructuredEventLogger
from backend.app.utils.metrics import chat_metrics

router = APIRouter(tags=["documents"])
events = StructuredEventLogger("documents")


def parse_filenames(raw: str) -> list[str]:
    """Parse the JSON-encoded ``filenames`` form field.

    Raises:
        HTTPException: 400 unless the field is a non-empty JSON list of strings
    """
    try:
        value = json.loads(raw)
    except json.JSONDecodeError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="filenames must be a JSON list"
        ) from e

    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="filenames must be a JSON list of strings"
        )
    if not value:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No documents selected")

    return value


@router.post("/upload/", response_model=UploadResponse)
async def upload_document(
    store: Annotated[KeyValueStore, Depends(get_store)],
    settings: Annotated[Settings, Depends(get_settings)],
    file: Annotated[UploadFile | None, File()] = None,
    username: Annotated[str | None, Form()] = None,
) -> UploadResponse:
    """Ingest a PDF for a user."""
    stored = await store_pdf_upload(store, settings, file, username)
    return UploadResponse(message="File uploaded successfully", filename=stored.filename)


@router.post("/delete/", response_model=StatusResponse)
async def delete_document(
    store: Annotated[KeyValueStore, Depends(get_store)],
    filename: Annotated[str | None, Form()] = None,
    username: Annotated[str | None, Form()] = None,
) -> StatusResponse:
    """Delete one of a user's documents.

    Raises:
        HTTPException: 400 on missing fields, 404 if the document does not exist
    """
    if not filename or not username:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing filename or username")

    if not await FileRepository(store).delete(username, filename):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Document not found")

    events.log_event("delete", "success", username=username, filename=filename)
    return StatusResponse(status="deleted")


@router.get("/pdfs/", response_model=DocumentListResponse)
async def list_documents(
    store: Annotated[KeyValueStore, Depends(get_store)],
    username: Annotated[str | None, Query()] = None,
) -> DocumentListResponse:
    """List a user's documents in upload order."""
    if not username:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing username")

    return DocumentListResponse(pdfs=await FileRepository(store).list_names(username))


@router.get("/history/", response_model=HistoryResponse)
async def document_history(
    store: Annotated[KeyValueStore, Depends(get_store)],
    settings: Annotated[Settings, Depends(get_settings)],
    username: Annotated[str | None, Query()] = None,
) -> HistoryResponse:
    """Return a user's history, newest first."""
    if not username:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing username")

    entries = await ChatRepository(store, settings.history_limit).history(username)
    return HistoryResponse(history=to_history_items(list(reversed(entries))))


@router.post("/ask/", response_model=AnswerResponse)
async def ask_documents(
    store: Annotated[KeyValueStore, Depends(get_store)],
    answer_client: Annotated[AnswerClient, Depends(get_answer_client)],
    settings: Annotated[Settings, Depends(get_settings)],
    filenames: Annotated[str | None, Form()] = None,
    query: Annotated[str | None, Form()] = None,
    username: Annotated[str | None, Form()] = None,
) -> AnswerResponse:
    """Answer a question against a set of the user's documents.

    Raises:
        HTTPException: 400 on missing or malformed fields, 404 on unknown documents
    """
    if not filenames or not query or not query.strip() or not username:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Missing filenames, query or username"
        )

    names = parse_filenames(filenames)

    files = FileRepository(store)
    missing = [name for name in names if not await files.exists(username, name)]
    if missing:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown document(s): {', '.join(missing)}"
        )

    start = time.perf_counter()
    answer = await answer_client.answer(query=query, filenames=names)
    latency_ms = (time.perf_counter() - start) * 1000

    await ChatRepository(store, settings.history_limit).append(
        username,
        ChatEntry(
            question=query,
            answer=answer,
            filename=", ".join(names),
            timestamp=datetime.now(timezone.utc),
        ),
    )

    chat_metrics.record_answer("ask", latency_ms)
    events.log_event("ask", "success", username=username, latency_ms=latency_ms, documents=len(names))

    return AnswerResponse(answer=answer)
