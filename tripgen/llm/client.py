"""Generative client - bounded, sequential attempts with linear backoff.

Each attempt is one transport call, optionally followed by an acceptance
check (normalize + validate). Attempts are tagged success / retryable /
terminal; the loop never unwinds through exceptions between attempts.
"""

import asyncio
import logging
import time
import uuid
from collections.abc import Awaitable, Callable
from typing import Any

from tripgen.config import Settings, get_settings
from tripgen.errors import (
    NormalizationFailure,
    QuotaExhaustedError,
    TransientServiceError,
    ValidationError,
)
from tripgen.llm.transports import GeminiTransport, GenerationTransport, OpenAITransport
from tripgen.models.generation import (
    AttemptOutcome,
    AttemptResult,
    GenerationResult,
    PromptPayload,
    RawGenerationResult,
    TerminalError,
)
from tripgen.utils.logging import GenerationContext, GenerationLogger
from tripgen.utils.metrics import GenerationMetrics

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_BACKOFF_BASE_SECONDS = 1.0


class GenerativeClient:
    """Calls a generation transport with a fixed attempt budget."""

    def __init__(
        self,
        transport: GenerationTransport,
        *,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        backoff_base_seconds: float = DEFAULT_BACKOFF_BASE_SECONDS,
        sleep_fn: Callable[[float], Awaitable[None]] | None = None,
        metrics: GenerationMetrics | None = None,
        attempt_logger: GenerationLogger | None = None,
    ) -> None:
        """Initialize client.

        Args:
            transport: Provider transport making one call per attempt
            max_attempts: Attempt budget per generation (>= 1)
            backoff_base_seconds: Wait before retry k is k * base
            sleep_fn: Injectable sleep function (default: asyncio.sleep)
            metrics: Metrics recorder (optional, defaults to no-op)
            attempt_logger: Structured logger (optional, defaults to no-op)
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self._transport = transport
        self._max_attempts = max_attempts
        self._backoff_base = backoff_base_seconds
        self._sleep = sleep_fn or asyncio.sleep
        self._metrics = metrics or GenerationMetrics()
        self._logger = attempt_logger or GenerationLogger()

    @property
    def max_attempts(self) -> int:
        return self._max_attempts

    def backoff_delay(self, attempt: int) -> float:
        """Delay before retrying after the given 1-based attempt (linear)."""
        return attempt * self._backoff_base

    async def _attempt(
        self, payload: PromptPayload, accept: Callable[[str], Any] | None
    ) -> tuple[AttemptResult, Any]:
        try:
            result = await self._transport.send(payload)
        except Exception as e:
            # Transports classify their own failures; an escaped exception counts as retryable
            logger.exception("Transport raised unexpectedly")
            return AttemptResult.retry(TransientServiceError(f"{type(e).__name__}: {e}")), None

        if result.outcome != AttemptOutcome.success or accept is None:
            return result, result.text

        try:
            value = accept(result.text or "")
        except (NormalizationFailure, ValidationError) as e:
            logger.debug(f"Rejected response text: {(result.text or '')[:500]!r}")
            return AttemptResult.retry(e, result.status_code), None

        return result, value

    async def generate(
        self,
        payload: PromptPayload,
        accept: Callable[[str], Any] | None = None,
        *,
        ctx: GenerationContext | None = None,
    ) -> GenerationResult:
        """Run the attempt loop.

        Args:
            payload: Built prompt with sampling parameters
            accept: Optional normalize/validate step; raising NormalizationFailure
                or ValidationError turns a transport success into a retryable failure
            ctx: Tracing context for structured logs

        Returns:
            GenerationResult carrying either the accepted value (raw text when
            accept is None) or a TerminalError
        """
        if ctx is None:
            ctx = GenerationContext(
                trace_id=f"trace-{uuid.uuid4()}",
                kind=payload.request.kind.value,
                subject=payload.request.subject,
            )

        last: AttemptResult | None = None
        attempt = 0
        for attempt in range(1, self._max_attempts + 1):
            started = time.monotonic()
            result, value = await self._attempt(payload, accept)
            elapsed_ms = (time.monotonic() - started) * 1000

            reason = type(result.error).__name__ if result.error else None
            self._metrics.record_attempt(ctx.kind, result.outcome.value, elapsed_ms)
            self._logger.log_attempt(
                ctx,
                attempt,
                result.outcome.value,
                elapsed_ms,
                status_code=result.status_code,
                error_reason=reason,
            )

            if result.outcome == AttemptOutcome.success:
                raw = RawGenerationResult(
                    text=result.text or "", attempt=attempt, status_code=result.status_code
                )
                return GenerationResult(attempts=attempt, value=value, raw=raw)

            last = result
            if result.outcome == AttemptOutcome.terminal:
                break

            if attempt < self._max_attempts:
                await self._sleep(self.backoff_delay(attempt))

        return GenerationResult(attempts=attempt, terminal=_terminal_from(last, attempt))


def _terminal_from(last: AttemptResult | None, attempts: int) -> TerminalError:
    if last is not None and isinstance(last.error, QuotaExhaustedError):
        reason = "quota_exhausted"
    elif last is not None and last.outcome == AttemptOutcome.terminal:
        reason = "terminal_failure"
    else:
        reason = "attempts_exhausted"
    return TerminalError(
        reason=reason,
        attempts=attempts,
        status_code=last.status_code if last else None,
        error=last.error if last else None,
    )


def get_generative_client(
    settings: Settings | None = None,
    *,
    metrics: GenerationMetrics | None = None,
    attempt_logger: GenerationLogger | None = None,
) -> GenerativeClient | None:
    """Factory function to build the configured client.

    Returns:
        GenerativeClient for the configured provider, or None when no API
        key is configured (callers go straight to the fallback synthesizer)
    """
    settings = settings or get_settings()

    transport: GenerationTransport
    if settings.generation_provider == "openai":
        key = settings.openai_api_key
        if not key or not key.get_secret_value():
            logger.warning("No OpenAI API key configured, generation will use fallback")
            return None
        transport = OpenAITransport(
            api_key=key.get_secret_value(),
            model=settings.openai_model,
            timeout_seconds=settings.generation_timeout_seconds,
        )
    else:
        key = settings.gemini_api_key
        if not key or not key.get_secret_value():
            logger.warning("No Gemini API key configured, generation will use fallback")
            return None
        transport = GeminiTransport(
            api_key=key.get_secret_value(),
            model=settings.gemini_model,
            base_url=settings.gemini_base_url,
            timeout_seconds=settings.generation_timeout_seconds,
        )

    logger.info(f"Using {settings.generation_provider} transport for generation")
    return GenerativeClient(
        transport,
        max_attempts=settings.generation_max_attempts,
        backoff_base_seconds=settings.generation_backoff_base_seconds,
        metrics=metrics,
        attempt_logger=attempt_logger,
    )
