"""Transports for the generative service - one HTTP call per attempt.

A transport never raises for service failures: every call ends in a
tagged AttemptResult so the client's retry loop stays explicit.
"""

from typing import Any, Protocol

import httpx
import openai
from openai import AsyncOpenAI

from tripgen.errors import QuotaExhaustedError, TransientServiceError
from tripgen.models.generation import AttemptResult, GenerationParams, PromptPayload

QUOTA_STATUS_CODES = frozenset({429})
TRANSIENT_STATUS_CODES = frozenset({500, 502, 503, 504})

SAFETY_CATEGORIES = (
    "HARM_CATEGORY_HARASSMENT",
    "HARM_CATEGORY_HATE_SPEECH",
    "HARM_CATEGORY_SEXUALLY_EXPLICIT",
    "HARM_CATEGORY_DANGEROUS_CONTENT",
)


class GenerationTransport(Protocol):
    """Protocol for generative service transports."""

    async def send(self, payload: PromptPayload) -> AttemptResult:
        """Send one prompt and classify the outcome.

        Args:
            payload: Built prompt with sampling parameters

        Returns:
            AttemptResult tagged success, retryable or terminal
        """
        ...


def classify_status(status_code: int, detail: str = "") -> AttemptResult:
    """Classify a non-success HTTP status.

    429 is terminal (quota/rate limit); everything else may be retried.
    """
    message = f"generative service returned {status_code}"
    if detail:
        message = f"{message}: {detail[:200]}"

    if status_code in QUOTA_STATUS_CODES:
        return AttemptResult.stop(QuotaExhaustedError(message, status_code), status_code)
    if status_code not in TRANSIENT_STATUS_CODES:
        message = f"unexpected status, {message}"
    return AttemptResult.retry(TransientServiceError(message, status_code), status_code)


def build_gemini_body(prompt: str, params: GenerationParams) -> dict[str, Any]:
    """Build a generateContent request body."""
    body: dict[str, Any] = {
        "contents": [{"parts": [{"text": prompt}]}],
        "generationConfig": {
            "temperature": params.temperature,
            "topK": params.top_k,
            "topP": params.top_p,
            "maxOutputTokens": params.max_output_tokens,
        },
    }
    if params.safety_thresholds:
        body["safetySettings"] = [
            {"category": category, "threshold": "BLOCK_MEDIUM_AND_ABOVE"}
            for category in SAFETY_CATEGORIES
        ]
    return body


def extract_candidate_text(envelope: Any) -> str | None:
    """Return the first candidate's text, or None when the envelope has none."""
    if not isinstance(envelope, dict):
        return None
    candidates = envelope.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        return None
    content = candidates[0].get("content") if isinstance(candidates[0], dict) else None
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list) or not parts or not isinstance(parts[0], dict):
        return None
    text = parts[0].get("text")
    if not isinstance(text, str) or not text.strip():
        return None
    return text


class GeminiTransport:
    """Gemini generateContent transport over httpx."""

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-1.5-flash",
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout_seconds: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize Gemini transport.

        Args:
            api_key: Gemini API key (read from environment)
            model: Model name
            base_url: API base URL
            timeout_seconds: Per-call timeout
            client: Optional httpx client (for testing with mocks)
        """
        self._api_key = api_key
        self._model = model
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout_seconds
        self._client = client

    @property
    def url(self) -> str:
        return f"{self._base_url}/models/{self._model}:generateContent"

    async def send(self, payload: PromptPayload) -> AttemptResult:
        """Send one generateContent call."""
        body = build_gemini_body(payload.prompt, payload.params)

        client = self._client
        close_client = False
        if client is None:
            client = httpx.AsyncClient(timeout=self._timeout)
            close_client = True

        try:
            response = await client.post(self.url, params={"key": self._api_key}, json=body)
        except httpx.HTTPError as e:
            return AttemptResult.retry(
                TransientServiceError(f"Gemini transport error: {type(e).__name__}: {e}")
            )
        finally:
            if close_client:
                await client.aclose()

        if not response.is_success:
            return classify_status(response.status_code, response.text)

        try:
            envelope = response.json()
        except ValueError:
            return AttemptResult.retry(
                TransientServiceError("Gemini returned a non-JSON envelope", response.status_code),
                response.status_code,
            )

        text = extract_candidate_text(envelope)
        if text is None:
            return AttemptResult.retry(
                TransientServiceError("Gemini returned no candidate text", response.status_code),
                response.status_code,
            )

        return AttemptResult.ok(text, response.status_code)


class OpenAITransport:
    """OpenAI chat-completions transport."""

    SYSTEM_PROMPT = (
        "You are a travel planning assistant. Answer with a single JSON object "
        "that matches the requested format exactly, with no surrounding prose."
    )

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "gpt-4o-mini",
        timeout_seconds: float = 30.0,
        client: AsyncOpenAI | None = None,
    ) -> None:
        """Initialize OpenAI transport.

        Args:
            api_key: OpenAI API key (read from environment)
            model: Model name (default: gpt-4o-mini for cost efficiency)
            timeout_seconds: Per-call timeout
            client: Optional preconfigured client (for testing with mocks)
        """
        # SDK retries are disabled; the generative client owns the retry budget
        self.client = client or AsyncOpenAI(
            api_key=api_key, timeout=timeout_seconds, max_retries=0
        )
        self.model = model

    async def send(self, payload: PromptPayload) -> AttemptResult:
        """Send one chat completion call."""
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": self.SYSTEM_PROMPT},
                    {"role": "user", "content": payload.prompt},
                ],
                temperature=payload.params.temperature,
                top_p=payload.params.top_p,
                max_tokens=payload.params.max_output_tokens,
            )
        except openai.RateLimitError as e:
            return AttemptResult.stop(QuotaExhaustedError(f"OpenAI rate limited: {e}"), 429)
        except openai.APIStatusError as e:
            return classify_status(e.status_code, str(e))
        except openai.APIConnectionError as e:
            return AttemptResult.retry(TransientServiceError(f"OpenAI connection error: {e}"))

        if not response.choices:
            return AttemptResult.retry(TransientServiceError("OpenAI returned no choices"))

        text = response.choices[0].message.content or ""
        if not text.strip():
            return AttemptResult.retry(TransientServiceError("OpenAI returned empty content"))

        return AttemptResult.ok(text)
