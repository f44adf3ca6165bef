"""Transcript store - ordered question/answer exchanges with slot reservation.

An exchange is identified by its position. A question is appended with a
pending answer and resolved later through the ``Slot`` returned by
``append``. ``clear`` bumps a generation counter so that slots handed out
before the clear can never write into the new transcript.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, replace
from datetime import datetime

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Exchange:
    """One question/answer pair. ``answer`` is None while pending."""

    question: str
    answer: str | None = None
    document: str | None = None
    timestamp: datetime | None = None

    @property
    def pending(self) -> bool:
        return self.answer is None


@dataclass(frozen=True)
class Slot:
    """Position reserved for an exchange, tagged with the transcript generation."""

    index: int
    generation: int


class TranscriptStore:
    """Append-only transcript with generation-guarded resolution."""

    def __init__(self) -> None:
        self._exchanges: list[Exchange] = []
        self._generation = 0

    def __len__(self) -> int:
        return len(self._exchanges)

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def exchanges(self) -> tuple[Exchange, ...]:
        """Snapshot of the transcript in display order."""
        return tuple(self._exchanges)

    @property
    def pending_count(self) -> int:
        return sum(1 for exchange in self._exchanges if exchange.pending)

    def append(self, question: str, document: str | None = None) -> Slot:
        """Append a pending exchange and reserve its slot."""
        slot = Slot(index=len(self._exchanges), generation=self._generation)
        self._exchanges.append(Exchange(question=question, document=document))
        return slot

    def resolve(self, slot: Slot, answer: str) -> bool:
        """Set the answer for a reserved slot. Last write wins.

        Returns:
            False if the slot is stale (transcript cleared since it was reserved)
        """
        if slot.generation != self._generation or slot.index >= len(self._exchanges):
            logger.debug("Discarding stale resolution for slot %s", slot)
            return False

        self._exchanges[slot.index] = replace(self._exchanges[slot.index], answer=answer)
        return True

    def clear(self) -> None:
        """Empty the transcript and invalidate every outstanding slot."""
        self._exchanges.clear()
        self._generation += 1

    def install(self, exchanges: Iterable[Exchange]) -> None:
        """Replace the transcript wholesale (history hydration).

        Outstanding slots are invalidated as with ``clear``.
        """
        self._exchanges = list(exchanges)
        self._generation += 1
