"""Generation request/attempt models - inputs and per-attempt outcomes."""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from tripgen.errors import PipelineError
from tripgen.models.common import GenerationKind


class GenerationParams(BaseModel):
    """Sampling parameters sent with a prompt."""

    model_config = ConfigDict(frozen=True)

    temperature: float = Field(0.7, ge=0.0, le=2.0)
    top_k: int = Field(40, gt=0)
    top_p: float = Field(0.95, gt=0.0, le=1.0)
    max_output_tokens: int = Field(8192, gt=0)
    safety_thresholds: bool = False


class GenerationRequest(BaseModel):
    """Immutable per-action request: what to generate, for which subject."""

    model_config = ConfigDict(frozen=True)

    kind: GenerationKind
    subject: str = Field(..., min_length=1)
    count: int = Field(..., gt=0)
    currency_symbol: str = "₹"
    currency_name: str = "Indian Rupees"


class PromptPayload(BaseModel):
    """Built prompt plus the parameters to send it with."""

    model_config = ConfigDict(frozen=True)

    request: GenerationRequest
    prompt: str
    params: GenerationParams


class RawGenerationResult(BaseModel):
    """Unparsed text of one successful attempt."""

    text: str
    attempt: int
    status_code: int | None = None


class AttemptOutcome(str, Enum):
    """Classification of one attempt."""

    success = "success"
    retryable = "retryable"
    terminal = "terminal"


@dataclass
class AttemptResult:
    """Tagged result of one transport call (and, optionally, its acceptance check)."""

    outcome: AttemptOutcome
    text: str | None = None
    status_code: int | None = None
    error: PipelineError | None = None

    @classmethod
    def ok(cls, text: str, status_code: int | None = 200) -> "AttemptResult":
        return cls(outcome=AttemptOutcome.success, text=text, status_code=status_code)

    @classmethod
    def retry(cls, error: PipelineError, status_code: int | None = None) -> "AttemptResult":
        return cls(outcome=AttemptOutcome.retryable, status_code=status_code, error=error)

    @classmethod
    def stop(cls, error: PipelineError, status_code: int | None = None) -> "AttemptResult":
        return cls(outcome=AttemptOutcome.terminal, status_code=status_code, error=error)


@dataclass(frozen=True)
class TerminalError:
    """Signal that no usable response was obtained within the retry budget."""

    reason: str
    attempts: int
    status_code: int | None = None
    error: PipelineError | None = None


@dataclass
class GenerationResult:
    """Outcome of the whole attempt loop.

    Exactly one of ``value`` and ``terminal`` is set. ``value`` is the raw
    text, or whatever the acceptance callable projected it into.
    """

    attempts: int
    value: Any = None
    raw: RawGenerationResult | None = None
    terminal: TerminalError | None = None

    @property
    def succeeded(self) -> bool:
        return self.terminal is None
