"""Chat simulation endpoints - POST /api/chat/ask, POST /api/chat/clear, GET /api/chat/history."""

import time
from datetime import datetime, timezone
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from backend.app.config import Settings, get_settings
from backend.app.db.engine import get_store
from backend.app.db.repositories import ChatEntry, ChatRepository
from backend.app.db.storage import KeyValueStore
from backend.app.llm.client import AnswerClient, get_answer_client
from backend.app.models.chat import (
    AskRequest,
    AskResponse,
    ClearRequest,
    HistoryItem,
    HistoryResponse,
)
from backend.app.models.common import MessageResponse
from backend.app.utils.logging import StructuredEventLogger
from backend.app.utils.metrics import chat_metrics

router = APIRouter(prefix="/api/chat", tags=["chat"])
events = StructuredEventLogger("chat")

NO_DOCUMENT = "No document"


def to_history_items(entries: list[ChatEntry]) -> list[HistoryItem]:
    """Convert stored entries to response items, order preserved."""
    return [
        HistoryItem(
            question=entry.question,
            answer=entry.answer,
            filename=entry.filename,
            timestamp=entry.timestamp,
        )
        for entry in entries
    ]


@router.post("/ask", response_model=AskResponse)
async def ask(
    request: AskRequest,
    store: Annotated[KeyValueStore, Depends(get_store)],
    answer_client: Annotated[AnswerClient, Depends(get_answer_client)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> AskResponse:
    """Answer a question against an optional single document.

    The answer is stored in the user's history before it is returned.

    Raises:
        HTTPException: 400 if query or username is missing
    """
    if not request.query or not request.username:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing query or username")

    filenames = [request.filename] if request.filename else []

    start = time.perf_counter()
    answer = await answer_client.answer(query=request.query, filenames=filenames)
    latency_ms = (time.perf_counter() - start) * 1000

    now = datetime.now(timezone.utc)
    await ChatRepository(store, settings.history_limit).append(
        request.username,
        ChatEntry(
            question=request.query,
            answer=answer,
            filename=request.filename or NO_DOCUMENT,
            timestamp=now,
        ),
    )

    chat_metrics.record_answer("api_chat_ask", latency_ms)
    events.log_event(
        "ask", "success", username=request.username, latency_ms=latency_ms, documents=len(filenames)
    )

    return AskResponse(answer=answer, timestamp=now)


@router.post("/clear", response_model=MessageResponse)
async def clear(
    request: ClearRequest,
    store: Annotated[KeyValueStore, Depends(get_store)],
) -> MessageResponse:
    """Clear a user's chat history.

    Raises:
        HTTPException: 400 if username is missing
    """
    if not request.username:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing username")

    await ChatRepository(store).clear(request.username)
    events.log_event("clear", "success", username=request.username)

    return MessageResponse(message="Chat history cleared successfully")


@router.get("/history", response_model=HistoryResponse)
async def history(
    store: Annotated[KeyValueStore, Depends(get_store)],
    settings: Annotated[Settings, Depends(get_settings)],
    username: Annotated[str | None, Query()] = None,
) -> HistoryResponse:
    """Return the user's most recent history, oldest first.

    Raises:
        HTTPException: 400 if username is missing
    """
    if not username:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing username")

    entries = await ChatRepository(store, settings.history_limit).history(username)
    return HistoryResponse(history=to_history_items(entries))
