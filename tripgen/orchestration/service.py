"""Caller-facing pipeline: generate (with fallback) and commit.

Generation failures never reach the caller; they only show up as
``used_fallback=True``. Caller-input errors and commit failures are raised.
"""

import logging
import uuid
from collections.abc import Callable
from datetime import date
from typing import Any

from tripgen.config import Settings, get_settings
from tripgen.db.context import RequestContext
from tripgen.db.repositories import TripStore
from tripgen.errors import InvalidRequestError
from tripgen.llm.client import GenerativeClient, get_generative_client
from tripgen.llm.fallback import (
    synthesize_destinations,
    synthesize_itinerary,
    synthesize_restaurants,
)
from tripgen.llm.normalize import normalize
from tripgen.llm.prompts import build_prompt, resolve_count
from tripgen.llm.validation import validate
from tripgen.materialize.materializer import ItineraryMaterializer
from tripgen.models.commit import CommitResult
from tripgen.models.common import GenerationKind
from tripgen.models.generation import GenerationRequest
from tripgen.models.itinerary import GeneratedItinerary, ValidatedItinerary
from tripgen.models.places import GeneratedDestinations, GeneratedRestaurants
from tripgen.utils.logging import StructuredGenerationLogger
from tripgen.utils.metrics import GenerationMetrics, PrometheusGenerationMetrics

logger = logging.getLogger(__name__)


def _require_subject(subject: str | None, what: str) -> str:
    if subject is None or not subject.strip():
        raise InvalidRequestError(f"{what} is required")
    return subject.strip()


class GenerationService:
    """Runs prompt -> client (normalize + validate per attempt) -> fallback."""

    def __init__(
        self,
        client: GenerativeClient | None,
        *,
        settings: Settings | None = None,
        metrics: GenerationMetrics | None = None,
    ) -> None:
        """Initialize service.

        Args:
            client: Generative client, or None to always use the fallback
            settings: Settings for defaults and currency (default: cached settings)
            metrics: Metrics recorder (optional, defaults to no-op)
        """
        self._client = client
        self._settings = settings or get_settings()
        self._metrics = metrics or GenerationMetrics()

    def _request(self, kind: GenerationKind, subject: str, count: int) -> GenerationRequest:
        return GenerationRequest(
            kind=kind,
            subject=subject,
            count=count,
            currency_symbol=self._settings.currency_symbol,
            currency_name=self._settings.currency_name,
        )

    async def _run(
        self, request: GenerationRequest, fallback: Callable[[], Any]
    ) -> tuple[Any, bool, int, str | None]:
        """Return (value, used_fallback, attempts, fallback_reason)."""
        kind = request.kind.value

        if self._client is None:
            self._metrics.inc_fallback(kind, "not_configured")
            return fallback(), True, 0, "not_configured"

        payload = build_prompt(request)
        result = await self._client.generate(
            payload, accept=lambda text: validate(normalize(text), request)
        )

        if result.succeeded:
            return result.value, False, result.attempts, None

        terminal = result.terminal
        reason = terminal.reason if terminal else "attempts_exhausted"
        logger.warning(
            f"Generation of {kind} for {request.subject!r} fell back after "
            f"{result.attempts} attempt(s): {reason}"
        )
        self._metrics.inc_fallback(kind, reason)
        return fallback(), True, result.attempts, reason

    async def generate_itinerary(
        self, destination: str | None, days: int | None = None
    ) -> GeneratedItinerary:
        """Generate a day-by-day itinerary, falling back to a synthesized one.

        Raises:
            InvalidRequestError: destination missing or blank
        """
        destination = _require_subject(destination, "Destination")
        days = resolve_count(days, self._settings.default_itinerary_days)
        request = self._request(GenerationKind.itinerary, destination, days)

        itinerary, used_fallback, attempts, reason = await self._run(
            request,
            lambda: synthesize_itinerary(destination, days, self._settings.currency_symbol),
        )
        return GeneratedItinerary(
            itinerary=itinerary,
            used_fallback=used_fallback,
            attempts=attempts,
            fallback_reason=reason,
        )

    async def generate_destinations(
        self, region: str | None, count: int | None = None
    ) -> GeneratedDestinations:
        """Generate popular destinations for a country or region.

        Raises:
            InvalidRequestError: region missing or blank
        """
        region = _require_subject(region, "Search query")
        count = resolve_count(count, self._settings.default_destination_count)
        request = self._request(GenerationKind.destinations, region, count)

        destinations, used_fallback, attempts, reason = await self._run(
            request, lambda: synthesize_destinations(region, count)
        )
        return GeneratedDestinations(
            destinations=destinations,
            used_fallback=used_fallback,
            attempts=attempts,
            fallback_reason=reason,
        )

    async def generate_restaurants(
        self, location: str | None, count: int | None = None
    ) -> GeneratedRestaurants:
        """Generate trending restaurants for a location.

        Raises:
            InvalidRequestError: location missing or blank
        """
        location = _require_subject(location, "Location")
        count = resolve_count(count, self._settings.default_restaurant_count)
        request = self._request(GenerationKind.restaurants, location, count)

        restaurants, used_fallback, attempts, reason = await self._run(
            request, lambda: synthesize_restaurants(location, count)
        )
        return GeneratedRestaurants(
            restaurants=restaurants,
            used_fallback=used_fallback,
            attempts=attempts,
            fallback_reason=reason,
        )


async def commit_itinerary(
    itinerary: ValidatedItinerary | None,
    trip_id: uuid.UUID | None,
    ctx: RequestContext,
    *,
    store: TripStore,
    today_fn: Callable[[], date] | None = None,
    metrics: GenerationMetrics | None = None,
) -> CommitResult:
    """Commit an itinerary to a trip the caller owns.

    Raises:
        InvalidRequestError: itinerary or trip id missing
        TripNotFound: Trip does not exist
        Forbidden: Caller does not own the trip
        CommitError: Persistence failed; nothing was written
    """
    if itinerary is None:
        raise InvalidRequestError("Invalid itinerary data")
    if trip_id is None:
        raise InvalidRequestError("Trip ID is required")

    materializer = ItineraryMaterializer(store, today_fn=today_fn, metrics=metrics)
    return await materializer.commit(itinerary, trip_id, ctx)


def get_generation_service(settings: Settings | None = None) -> GenerationService:
    """Factory for a service wired to the configured provider, Prometheus and logging."""
    settings = settings or get_settings()
    metrics = PrometheusGenerationMetrics()
    client = get_generative_client(
        settings, metrics=metrics, attempt_logger=StructuredGenerationLogger()
    )
    return GenerationService(client, settings=settings, metrics=metrics)


async def generate_itinerary(
    destination: str | None, days: int | None = None
) -> GeneratedItinerary:
    """Main entry point for itinerary generation.

    Args:
        destination: Destination name or region
        days: Day count (default from settings when absent or non-positive)

    Returns:
        GeneratedItinerary, genuine or fallback
    """
    return await get_generation_service().generate_itinerary(destination, days)
