"""Chat request/response models."""

from datetime import datetime

from pydantic import BaseModel


class AskRequest(BaseModel):
    """Body for POST /api/chat/ask."""

    filename: str | None = None
    query: str | None = None
    username: str | None = None


class AskResponse(BaseModel):
    """Response for POST /api/chat/ask."""

    answer: str
    timestamp: datetime


class ClearRequest(BaseModel):
    """Body for POST /api/chat/clear."""

    username: str | None = None


class HistoryItem(BaseModel):
    """Single history entry."""

    question: str
    answer: str
    filename: str | None = None
    timestamp: datetime


class HistoryResponse(BaseModel):
    """Response for the history endpoints."""

    history: list[HistoryItem]
