"""Structured logging for generation attempts."""

import logging
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationContext:
    """Context for one generation with tracing."""

    trace_id: str
    kind: str
    subject: str


class GenerationLogger:
    """Interface for structured attempt logging (no-op default)."""

    def log_attempt(
        self,
        ctx: GenerationContext,
        attempt: int,
        outcome: str,
        latency_ms: float,
        status_code: int | None = None,
        error_reason: str | None = None,
    ) -> None:
        """Log one generation attempt."""
        pass


class StructuredGenerationLogger(GenerationLogger):
    """Structured logger for generation attempts."""

    def log_attempt(
        self,
        ctx: GenerationContext,
        attempt: int,
        outcome: str,
        latency_ms: float,
        status_code: int | None = None,
        error_reason: str | None = None,
    ) -> None:
        """Log generation attempt with structured data."""
        log_data: dict[str, Any] = {
            "trace_id": ctx.trace_id,
            "kind": ctx.kind,
            "subject": ctx.subject,
            "attempt": attempt,
            "outcome": outcome,
            "latency_ms": round(latency_ms, 2),
        }

        if status_code is not None:
            log_data["status_code"] = status_code
        if error_reason:
            log_data["error_reason"] = error_reason

        log_msg = f"Generation attempt: {ctx.kind} #{attempt} - {outcome}"

        if outcome == "success":
            logger.info(log_msg, extra={"structured": log_data})
        else:
            logger.warning(log_msg, extra={"structured": log_data})
