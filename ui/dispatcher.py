"""Query dispatcher - turns a question plus the active documents into one backend request.

The transcript slot is reserved before the request is sent, so the pending
placeholder renders immediately. Submissions are independent: any number may
be in flight, each resolves only its own slot, and a failure is written into
that slot as an error marker instead of propagating.
"""

import logging
import time
from collections.abc import Iterable

from ui.client import BackendError, ChatApiClient
from ui.notifications import Notifier
from ui.transcript import TranscriptStore

logger = logging.getLogger(__name__)

ERROR_MARKER = "Error fetching answer."
FAILURE_NOTICE = "Failed to get answer"


def validate_submission(question: str, documents: Iterable[str]) -> str | None:
    """Return why a submission would be rejected, or None if it is valid."""
    if not question.strip():
        return "Please enter a question"
    if not any(True for _ in documents):
        return "Select at least one document"
    return None


class QueryDispatcher:
    """Dispatches questions and writes answers back into the transcript."""

    def __init__(
        self, client: ChatApiClient, transcript: TranscriptStore, notifier: Notifier
    ) -> None:
        self._client = client
        self._transcript = transcript
        self._notifier = notifier
        self._in_flight = 0

    @property
    def in_flight(self) -> int:
        """Number of submissions awaiting their answer."""
        return self._in_flight

    async def submit(self, question: str, selected_documents: Iterable[str], username: str) -> None:
        """Ask a question against the selected documents.

        Rejected without touching the transcript when the question is blank or
        no document is selected. Never raises on backend failure.
        """
        documents = list(dict.fromkeys(selected_documents))

        reason = validate_submission(question, documents)
        if reason is not None:
            logger.debug("Submission rejected: %s", reason)
            self._notifier.warning(reason)
            return

        # Reserve the slot before the first suspension point
        slot = self._transcript.append(question)
        self._in_flight += 1
        start = time.perf_counter()

        try:
            answer = await self._client.ask(question, documents, username)
        except BackendError as e:
            logger.warning(
                "Answer failed for slot %d: %s",
                slot.index,
                e.message,
                extra={"structured": {"slot": slot.index, "status_code": e.status_code}},
            )
            self._transcript.resolve(slot, ERROR_MARKER)
            self._notifier.error(FAILURE_NOTICE)
        except Exception:
            logger.exception("Unexpected failure answering slot %d", slot.index)
            self._transcript.resolve(slot, ERROR_MARKER)
            self._notifier.error(FAILURE_NOTICE)
        else:
            resolved = self._transcript.resolve(slot, answer)
            logger.info(
                "Answer received for slot %d",
                slot.index,
                extra={
                    "structured": {
                        "slot": slot.index,
                        "documents": len(documents),
                        "latency_ms": round((time.perf_counter() - start) * 1000, 2),
                        "stale": not resolved,
                    }
                },
            )
        finally:
            self._in_flight -= 1
