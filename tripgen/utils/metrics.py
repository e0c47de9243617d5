"""Prometheus metrics for generation attempts and itinerary commits."""

from prometheus_client import Counter, Histogram

generation_attempts_total = Counter(
    "generation_attempts_total",
    "Total generation attempts",
    ["kind", "outcome"],
)

generation_latency_ms = Histogram(
    "generation_latency_ms",
    "Generation attempt latency in milliseconds",
    ["kind", "outcome"],
    buckets=[100, 250, 500, 1000, 2000, 4000, 8000, 16000, 32000],
)

generation_fallbacks_total = Counter(
    "generation_fallbacks_total",
    "Total generations answered by the fallback synthesizer",
    ["kind", "reason"],
)

itinerary_commits_total = Counter(
    "itinerary_commits_total",
    "Total itinerary commits",
    ["outcome"],
)


class GenerationMetrics:
    """Interface for generation metrics (no-op default)."""

    def record_attempt(self, kind: str, outcome: str, latency_ms: float) -> None:
        """Record one attempt and its latency."""
        pass

    def inc_fallback(self, kind: str, reason: str) -> None:
        """Increment fallback counter."""
        pass

    def inc_commit(self, outcome: str) -> None:
        """Increment commit counter."""
        pass


class PrometheusGenerationMetrics(GenerationMetrics):
    """Prometheus-based generation metrics implementation."""

    def record_attempt(self, kind: str, outcome: str, latency_ms: float) -> None:
        """Record one attempt and its latency."""
        generation_attempts_total.labels(kind=kind, outcome=outcome).inc()
        generation_latency_ms.labels(kind=kind, outcome=outcome).observe(latency_ms)

    def inc_fallback(self, kind: str, reason: str) -> None:
        """Increment fallback counter."""
        generation_fallbacks_total.labels(kind=kind, reason=reason).inc()

    def inc_commit(self, outcome: str) -> None:
        """Increment commit counter."""
        itinerary_commits_total.labels(outcome=outcome).inc()
