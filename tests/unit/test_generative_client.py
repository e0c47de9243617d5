"""Unit tests for the generative client attempt loop.

Tests cover:
1. Success on first attempt
2. Linear backoff between retries, none after the last attempt
3. Terminal (quota) failures skip remaining attempts
4. Acceptance failures (normalize/validate) consume attempts
5. Metrics wiring
"""

import pytest
from prometheus_client import REGISTRY

from tests.helpers import RecordingSleep, ScriptedTransport, itinerary_json
from tripgen.config import Settings
from tripgen.errors import (
    QuotaExhaustedError,
    TransientServiceError,
    ValidationError,
)
from tripgen.llm.client import GenerativeClient, get_generative_client
from tripgen.llm.normalize import normalize
from tripgen.llm.prompts import build_prompt
from tripgen.llm.transports import GeminiTransport, OpenAITransport
from tripgen.llm.validation import validate
from tripgen.models.common import GenerationKind
from tripgen.models.generation import AttemptResult, GenerationRequest
from tripgen.utils.metrics import PrometheusGenerationMetrics

REQUEST = GenerationRequest(kind=GenerationKind.itinerary, subject="Kyoto", count=2)
PAYLOAD = build_prompt(REQUEST)


def _accept(text: str):
    return validate(normalize(text), REQUEST)


def _transient(status: int = 503) -> AttemptResult:
    return AttemptResult.retry(TransientServiceError("unavailable", status), status)


@pytest.mark.asyncio
async def test_first_attempt_success_returns_raw_text() -> None:
    transport = ScriptedTransport([AttemptResult.ok("hello")])
    sleep = RecordingSleep()
    client = GenerativeClient(transport, sleep_fn=sleep)

    result = await client.generate(PAYLOAD)

    assert result.succeeded
    assert result.value == "hello"
    assert result.raw is not None and result.raw.text == "hello"
    assert result.attempts == 1
    assert sleep.delays == []


@pytest.mark.asyncio
async def test_backoff_is_linear_and_skipped_after_final_attempt() -> None:
    transport = ScriptedTransport([_transient(), _transient(), _transient()])
    sleep = RecordingSleep()
    client = GenerativeClient(transport, backoff_base_seconds=1.0, sleep_fn=sleep)

    result = await client.generate(PAYLOAD)

    assert not result.succeeded
    assert result.attempts == 3
    assert len(transport.calls) == 3
    assert sleep.delays == [1.0, 2.0]
    assert result.terminal is not None
    assert result.terminal.reason == "attempts_exhausted"
    assert result.terminal.status_code == 503


@pytest.mark.asyncio
async def test_retry_then_success() -> None:
    transport = ScriptedTransport([_transient(), AttemptResult.ok("ok")])
    sleep = RecordingSleep()
    client = GenerativeClient(transport, backoff_base_seconds=0.5, sleep_fn=sleep)

    result = await client.generate(PAYLOAD)

    assert result.value == "ok"
    assert result.attempts == 2
    assert sleep.delays == [0.5]


@pytest.mark.asyncio
async def test_quota_exhaustion_stops_immediately() -> None:
    transport = ScriptedTransport(
        [AttemptResult.stop(QuotaExhaustedError("429"), 429), AttemptResult.ok("never")]
    )
    sleep = RecordingSleep()
    client = GenerativeClient(transport, sleep_fn=sleep)

    result = await client.generate(PAYLOAD)

    assert len(transport.calls) == 1
    assert sleep.delays == []
    assert result.terminal is not None
    assert result.terminal.reason == "quota_exhausted"
    assert result.terminal.attempts == 1


@pytest.mark.asyncio
async def test_invalid_json_consumes_every_attempt() -> None:
    transport = ScriptedTransport([AttemptResult.ok("{not: valid,}")] * 3)
    sleep = RecordingSleep()
    client = GenerativeClient(transport, sleep_fn=sleep)

    result = await client.generate(PAYLOAD, accept=_accept)

    assert result.attempts == 3
    assert len(transport.calls) == 3
    assert result.terminal is not None
    assert isinstance(result.terminal.error, ValidationError)


@pytest.mark.asyncio
async def test_acceptance_projects_value() -> None:
    transport = ScriptedTransport(
        [AttemptResult.ok("no json here"), AttemptResult.ok(f"```json\n{itinerary_json(2)}\n```")]
    )
    client = GenerativeClient(transport, sleep_fn=RecordingSleep())

    result = await client.generate(PAYLOAD, accept=_accept)

    assert result.attempts == 2
    assert result.value.total_days == 2


@pytest.mark.asyncio
async def test_transport_exception_is_retryable() -> None:
    class ExplodingTransport:
        def __init__(self) -> None:
            self.calls = 0

        async def send(self, payload):
            self.calls += 1
            if self.calls == 1:
                raise RuntimeError("bug")
            return AttemptResult.ok("fine")

    transport = ExplodingTransport()
    client = GenerativeClient(transport, sleep_fn=RecordingSleep())

    result = await client.generate(PAYLOAD)

    assert result.value == "fine"
    assert transport.calls == 2


def test_max_attempts_must_be_positive() -> None:
    with pytest.raises(ValueError):
        GenerativeClient(ScriptedTransport([]), max_attempts=0)


@pytest.mark.asyncio
async def test_metrics_record_each_attempt() -> None:
    def sample(outcome: str) -> float:
        value = REGISTRY.get_sample_value(
            "generation_attempts_total", {"kind": "itinerary", "outcome": outcome}
        )
        return value or 0.0

    before_retry, before_success = sample("retryable"), sample("success")

    transport = ScriptedTransport([_transient(), AttemptResult.ok("ok")])
    client = GenerativeClient(
        transport, sleep_fn=RecordingSleep(), metrics=PrometheusGenerationMetrics()
    )
    await client.generate(PAYLOAD)

    assert sample("retryable") == before_retry + 1
    assert sample("success") == before_success + 1


def test_factory_without_key_returns_none() -> None:
    assert get_generative_client(Settings(gemini_api_key=None)) is None
    assert (
        get_generative_client(Settings(generation_provider="openai", openai_api_key=None))
        is None
    )


def test_factory_selects_configured_transport() -> None:
    gemini = get_generative_client(Settings(gemini_api_key="g-key", generation_max_attempts=5))
    openai_client = get_generative_client(
        Settings(generation_provider="openai", openai_api_key="o-key")
    )

    assert gemini is not None and isinstance(gemini._transport, GeminiTransport)
    assert gemini.max_attempts == 5
    assert openai_client is not None and isinstance(openai_client._transport, OpenAITransport)
