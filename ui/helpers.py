"""Helper functions for UI - pure view builders over session snapshots."""

from collections.abc import Iterable, Sequence
from typing import Any

from ui.dispatcher import ERROR_MARKER
from ui.registry import UploadState
from ui.transcript import Exchange

PENDING_PLACEHOLDER = "⏳ Thinking..."
WELCOME_MESSAGE = (
    "Hi there! I'm your document assistant. Upload documents and ask me questions about them. "
    "I'll provide answers with references to your source material."
)


def build_question_rows(exchanges: Sequence[Exchange]) -> list[str]:
    """Questions column: one row per exchange, in transcript order."""
    return [exchange.question for exchange in exchanges]


def build_answer_view(exchanges: Sequence[Exchange]) -> list[dict[str, Any]]:
    """Answers column: one entry per exchange with a render status.

    Args:
        exchanges: Transcript snapshot

    Returns:
        List of dicts with index, question, text, status and document
    """
    view = []
    for index, exchange in enumerate(exchanges):
        if exchange.answer is None:
            status = "pending"
            text = PENDING_PLACEHOLDER
        elif exchange.answer == ERROR_MARKER:
            status = "error"
            text = exchange.answer
        else:
            status = "answered"
            text = exchange.answer

        view.append(
            {
                "index": index,
                "question": exchange.question,
                "text": text,
                "status": status,
                "document": exchange.document,
            }
        )
    return view


def build_document_status(
    documents: Sequence[str], selected: Iterable[str], upload_state: UploadState
) -> dict[str, str]:
    """Status line under the question input.

    Returns:
        Dict with level (error/info/success) and message
    """
    if upload_state is UploadState.pending:
        return {"level": "info", "message": "Uploading document..."}

    if not documents:
        return {"level": "error", "message": "No documents available"}

    selected_count = len(set(selected) & set(documents))
    if selected_count == 0:
        return {"level": "error", "message": "No documents selected"}

    noun = "document" if len(documents) == 1 else "documents"
    return {
        "level": "success",
        "message": f"{selected_count} of {len(documents)} {noun} selected",
    }
