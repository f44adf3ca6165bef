"""Non-blocking notifications (toasts) raised by session components."""

from collections import deque
from dataclasses import dataclass
from enum import Enum


class Level(str, Enum):
    """Notification level."""

    success = "success"
    info = "info"
    warning = "warning"
    error = "error"


@dataclass(frozen=True)
class Notification:
    """A single transient message."""

    level: Level
    message: str


class Notifier:
    """Queue of notifications drained by the UI on each render.

    Appends and drains may come from different threads; deque operations
    used here are atomic.
    """

    def __init__(self, maxlen: int = 50) -> None:
        self._queue: deque[Notification] = deque(maxlen=maxlen)

    def notify(self, level: Level, message: str) -> None:
        """Queue a notification."""
        self._queue.append(Notification(level=level, message=message))

    def success(self, message: str) -> None:
        self.notify(Level.success, message)

    def info(self, message: str) -> None:
        self.notify(Level.info, message)

    def warning(self, message: str) -> None:
        self.notify(Level.warning, message)

    def error(self, message: str) -> None:
        self.notify(Level.error, message)

    def drain(self) -> list[Notification]:
        """Remove and return every queued notification, oldest first."""
        drained = []
        while self._queue:
            drained.append(self._queue.popleft())
        return drained
