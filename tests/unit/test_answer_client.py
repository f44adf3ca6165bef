"""Tests for the simulated answer client.

All tests are deterministic and never sleep.
"""

import pytest

from backend.app.llm.client import (
    CANNED_RESPONSES,
    SIMULATION_NOTE,
    UPLOAD_TIP,
    SimulatedAnswerClient,
    format_answer,
)


def test_format_answer_with_documents() -> None:
    text = format_answer("Body.", ["a.pdf", "b.pdf"])

    assert text.startswith('📄 **Based on "a.pdf, b.pdf":**')
    assert "Body." in text
    assert text.endswith(SIMULATION_NOTE)


def test_format_answer_without_documents() -> None:
    text = format_answer("Body.", [])

    assert text.startswith("🤖 **AI Response:**")
    assert text.endswith(UPLOAD_TIP)


@pytest.mark.asyncio
async def test_answer_uses_a_canned_response() -> None:
    client = SimulatedAnswerClient(delay_ms=0, seed=1)

    text = await client.answer(query="What is the plan?", filenames=["plan.pdf"])

    assert any(body in text for body in CANNED_RESPONSES)
    assert "plan.pdf" in text


@pytest.mark.asyncio
async def test_same_seed_same_answers() -> None:
    """Seeded clients are reproducible."""
    first = SimulatedAnswerClient(delay_ms=0, seed=42)
    second = SimulatedAnswerClient(delay_ms=0, seed=42)

    answers_a = [await first.answer(query="Q", filenames=[]) for _ in range(5)]
    answers_b = [await second.answer(query="Q", filenames=[]) for _ in range(5)]

    assert answers_a == answers_b
