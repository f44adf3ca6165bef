"""Structured logging for chat, upload and auth events."""

import logging
from typing import Any

from backend.app.config import Settings

logger = logging.getLogger(__name__)


class StructuredEventLogger:
    """Structured logger for request-level events."""

    def __init__(self, component: str) -> None:
        self.component = component

    def log_event(
        self,
        event: str,
        outcome: str,
        username: str | None = None,
        latency_ms: float | None = None,
        error_reason: str | None = None,
        **fields: Any,
    ) -> None:
        """Log an event with structured data."""
        log_data: dict[str, Any] = {
            "component": self.component,
            "event": event,
            "outcome": outcome,
            "username": username,
            **fields,
        }

        if latency_ms is not None:
            log_data["latency_ms"] = round(latency_ms, 2)
        if error_reason:
            log_data["error_reason"] = error_reason

        log_msg = f"{self.component}.{event} - {outcome}"

        if outcome in ("success", "ok"):
            logger.info(log_msg, extra={"structured": log_data})
        else:
            logger.warning(log_msg, extra={"structured": log_data})


def configure_logging(settings: Settings) -> None:
    """Configure root logging once at application startup."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
