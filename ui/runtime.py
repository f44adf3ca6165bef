"""Background event loop for the Streamlit page.

Streamlit re-runs the page script on its own thread for every interaction,
so session state lives on one long-lived asyncio loop in a daemon thread.
All session mutations are marshalled onto that loop; the page thread only
reads snapshots.
"""

import asyncio
import concurrent.futures
import logging
import threading
from collections.abc import Callable, Coroutine
from typing import Any, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


def log_future_exception(future: concurrent.futures.Future[Any]) -> None:
    """Done-callback for fire-and-forget submissions: log what they raised."""
    if future.cancelled():
        return
    exc = future.exception()
    if exc is not None:
        logger.error("Background task failed", exc_info=exc)


class BackgroundLoop:
    """An asyncio event loop running in a dedicated daemon thread."""

    def __init__(self, name: str = "chat-session-loop") -> None:
        self._loop = asyncio.new_event_loop()
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)
        self._thread.start()

    def _run(self) -> None:
        asyncio.set_event_loop(self._loop)
        self._loop.run_forever()

    @property
    def running(self) -> bool:
        return self._thread.is_alive() and self._loop.is_running()

    def submit(self, coro: Coroutine[Any, Any, T]) -> concurrent.futures.Future[T]:
        """Schedule a coroutine on the loop without waiting for it."""
        return asyncio.run_coroutine_threadsafe(coro, self._loop)

    def run(self, coro: Coroutine[Any, Any, T], timeout: float | None = None) -> T:
        """Run a coroutine on the loop and wait for its result."""
        return self.submit(coro).result(timeout)

    def call(self, fn: Callable[..., T], *args: Any, timeout: float | None = None) -> T:
        """Run a plain callable on the loop thread and wait for its result."""

        async def _invoke() -> T:
            return fn(*args)

        return self.run(_invoke(), timeout)

    def stop(self) -> None:
        """Stop the loop and join the thread."""
        self._loop.call_soon_threadsafe(self._loop.stop)
        self._thread.join(timeout=5)
