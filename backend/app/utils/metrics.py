"""Prometheus metrics for chat, upload and auth routes."""

from prometheus_client import Counter, Histogram

questions_total = Counter(
    "questions_total",
    "Total questions answered",
    ["route"],
)

answer_latency_ms = Histogram(
    "answer_latency_ms",
    "Answer generation latency in milliseconds",
    ["route"],
    buckets=[10, 50, 100, 250, 500, 1000, 1500, 2000, 4000, 8000],
)

uploads_total = Counter(
    "uploads_total",
    "Total document uploads",
    ["outcome"],
)

auth_attempts_total = Counter(
    "auth_attempts_total",
    "Total login/register attempts",
    ["action", "outcome"],
)


class PrometheusChatMetrics:
    """Prometheus-based chat metrics implementation."""

    def record_answer(self, route: str, latency_ms: float) -> None:
        """Record an answered question and its latency."""
        questions_total.labels(route=route).inc()
        answer_latency_ms.labels(route=route).observe(latency_ms)

    def inc_upload(self, outcome: str) -> None:
        """Increment upload counter."""
        uploads_total.labels(outcome=outcome).inc()

    def inc_auth(self, action: str, outcome: str) -> None:
        """Increment auth attempt counter."""
        auth_attempts_total.labels(action=action, outcome=outcome).inc()


chat_metrics = PrometheusChatMetrics()
