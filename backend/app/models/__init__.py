"""Models package - re-exports for convenience."""

from backend.app.models.auth import AuthResponse, LoginRequest, RegisterRequest, UserPublic
from backend.app.models.chat import (
    AskRequest,
    AskResponse,
    ClearRequest,
    HistoryItem,
    HistoryResponse,
)
from backend.app.models.common import ErrorResponse, MessageResponse, StatusResponse
from backend.app.models.documents import AnswerResponse, DocumentListResponse, UploadResponse

__all__ = [
    # Common
    "ErrorResponse",
    "MessageResponse",
    "StatusResponse",
    # Auth
    "LoginRequest",
    "RegisterRequest",
    "UserPublic",
    "AuthResponse",
    # Chat
    "AskRequest",
    "AskResponse",
    "ClearRequest",
    "HistoryItem",
    "HistoryResponse",
    # Documents
    "UploadResponse",
    "DocumentListResponse",
    "AnswerResponse",
]
