"""Unit tests for the background event loop."""

import logging
from collections.abc import Generator

import pytest

from ui.runtime import BackgroundLoop, log_future_exception
from ui.session import SessionNotReady


@pytest.fixture
def runtime() -> Generator[BackgroundLoop, None, None]:
    loop = BackgroundLoop(name="test-loop")
    yield loop
    loop.stop()


async def _fail() -> None:
    raise SessionNotReady("Session is unauthenticated")


async def _answer() -> int:
    return 42


def test_run_returns_result(runtime: BackgroundLoop) -> None:
    assert runtime.run(_answer(), timeout=5) == 42


def test_call_runs_on_loop_thread(runtime: BackgroundLoop) -> None:
    assert runtime.call(lambda x: x + 1, 1, timeout=5) == 2


def test_fire_and_forget_failure_is_logged(
    runtime: BackgroundLoop, caplog: pytest.LogCaptureFixture
) -> None:
    """A failing submission's exception reaches the log."""
    future = runtime.submit(_fail())

    with caplog.at_level(logging.ERROR, logger="ui.runtime"):
        with pytest.raises(SessionNotReady):
            future.result(timeout=5)
        log_future_exception(future)

    assert any(
        isinstance(record.exc_info[1], SessionNotReady) for record in caplog.records if record.exc_info
    )


def test_successful_submission_logs_nothing(
    runtime: BackgroundLoop, caplog: pytest.LogCaptureFixture
) -> None:
    future = runtime.submit(_answer())
    future.result(timeout=5)

    with caplog.at_level(logging.ERROR, logger="ui.runtime"):
        log_future_exception(future)

    assert caplog.records == []
