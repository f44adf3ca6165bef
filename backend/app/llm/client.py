"""Answer generation for the simulated backend.

No model is called: answers are canned analysis paragraphs wrapped with the
document names they were asked against. The Protocol is the seam where a real
question-answering client plugs in.
"""

import asyncio
import logging
import random
from collections.abc import Sequence
from typing import Protocol

from backend.app.config import get_settings

logger = logging.getLogger(__name__)

CANNED_RESPONSES = [
    "Based on the document analysis, this information relates to the strategic planning "
    "section where the company outlines its growth objectives and market positioning "
    "strategies for the upcoming fiscal year.",
    "According to the document, this data point is referenced in the financial projections "
    "section, specifically highlighting the expected ROI and budget allocations for various "
    "departments.",
    "The document indicates that this topic is covered extensively in the operational "
    "efficiency chapter, detailing process improvements and resource optimization strategies.",
    "This question pertains to the risk assessment section of the document, where potential "
    "challenges and mitigation strategies are thoroughly analyzed.",
    "The document addresses this in the market analysis section, providing insights into "
    "competitive landscape and customer behavior patterns.",
    "Based on the PDF content, this relates to the executive summary where key performance "
    "indicators and strategic milestones are outlined for stakeholder review.",
]

SIMULATION_NOTE = (
    "*Note: This is a simulated response. In production, this would analyze your actual "
    "PDF content using AI.*"
)
UPLOAD_TIP = "*💡 Tip: Upload a PDF document for more specific answers based on your content.*"


class AnswerClient(Protocol):
    """Protocol for answer generation implementations."""

    async def answer(self, *, query: str, filenames: Sequence[str]) -> str:
        """Answer a question against the given documents.

        Args:
            query: User question
            filenames: Documents to use as context (may be empty)

        Returns:
            Markdown answer text
        """
        ...


def format_answer(body: str, filenames: Sequence[str]) -> str:
    """Wrap an answer body with its document context header."""
    if filenames:
        names = ", ".join(filenames)
        return f'📄 **Based on "{names}":**\n\n{body}\n\n{SIMULATION_NOTE}'
    return f"🤖 **AI Response:**\n\n{body}\n\n{UPLOAD_TIP}"


class SimulatedAnswerClient:
    """Picks a canned response after an artificial processing delay."""

    def __init__(self, delay_ms: int = 1500, seed: int | None = None) -> None:
        """Initialize simulated client.

        Args:
            delay_ms: Artificial latency per answer
            seed: RNG seed for reproducible answers (None = nondeterministic)
        """
        self.delay_ms = delay_ms
        self._rng = random.Random(seed)

    async def answer(self, *, query: str, filenames: Sequence[str]) -> str:
        """Generate a simulated answer."""
        if self.delay_ms > 0:
            await asyncio.sleep(self.delay_ms / 1000)

        body = self._rng.choice(CANNED_RESPONSES)
        logger.debug("Simulated answer for %d document(s)", len(filenames))
        return format_answer(body, filenames)


_answer_client: AnswerClient | None = None


def get_answer_client() -> AnswerClient:
    """Get the process-wide answer client (FastAPI dependency)."""
    global _answer_client
    if _answer_client is None:
        settings = get_settings()
        _answer_client = SimulatedAnswerClient(
            delay_ms=settings.answer_delay_ms, seed=settings.answer_rng_seed
        )
    return _answer_client
