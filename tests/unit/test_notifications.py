"""Unit tests for the notification queue."""

from ui.notifications import Level, Notification, Notifier


def test_drain_returns_oldest_first_and_empties() -> None:
    """Drain yields queued notifications in order, then nothing."""
    notifier = Notifier()
    notifier.success("uploaded")
    notifier.error("failed")

    assert notifier.drain() == [
        Notification(level=Level.success, message="uploaded"),
        Notification(level=Level.error, message="failed"),
    ]
    assert notifier.drain() == []


def test_queue_is_bounded() -> None:
    """Only the newest notifications are kept."""
    notifier = Notifier(maxlen=2)
    for i in range(4):
        notifier.info(f"n{i}")

    assert [n.message for n in notifier.drain()] == ["n2", "n3"]
