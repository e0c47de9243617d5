"""Itinerary materializer - write a validated itinerary into a trip's graph.

One commit is one transaction: cities are resolved, stop orders are
allocated after the trip's current maximum, and one stop plus one
activity is written per planned activity. Any failure rolls the whole
commit back. Re-committing appends a second copy; nothing is deduplicated.
"""

import logging
import uuid
from collections.abc import Callable
from datetime import date, timedelta

from tripgen.db.context import RequestContext
from tripgen.db.repositories import NewActivity, TripRecord, TripStore
from tripgen.errors import CommitError, Forbidden, TripNotFound
from tripgen.materialize.cities import CityResolver
from tripgen.materialize.parsing import (
    activity_timestamp,
    extract_cost,
    extract_leading_amount,
    map_category,
)
from tripgen.models.commit import CommitResult
from tripgen.models.itinerary import ValidatedItinerary
from tripgen.utils.metrics import GenerationMetrics

logger = logging.getLogger(__name__)


def trip_display_name(itinerary: ValidatedItinerary) -> str:
    """Trip name after an itinerary has been added."""
    return f"{itinerary.destination} - {itinerary.total_days} Days AI Enhanced"


def trip_description(existing: str | None, itinerary: ValidatedItinerary) -> str:
    """Existing description with a summary paragraph of the itinerary appended."""
    summary = (
        f"AI-generated {itinerary.total_days}-day itinerary for {itinerary.destination} "
        f"with {itinerary.activity_count} places to visit"
    )
    if existing and existing.strip():
        return f"{existing.rstrip()}\n\n{summary}"
    return summary


def activity_notes(location: str, duration: str) -> str:
    return f"Location: {location}\nDuration: {duration}"


class ItineraryMaterializer:
    """Commits validated itineraries to trips through a TripStore."""

    def __init__(
        self,
        store: TripStore,
        *,
        today_fn: Callable[[], date] | None = None,
        metrics: GenerationMetrics | None = None,
    ) -> None:
        """Initialize materializer.

        Args:
            store: Trip store (SQL or in-memory)
            today_fn: Injectable clock for the base date of trips without a start date
            metrics: Metrics recorder (optional, defaults to no-op)
        """
        self._store = store
        self._today = today_fn or date.today
        self._metrics = metrics or GenerationMetrics()

    async def commit(
        self, itinerary: ValidatedItinerary, trip_id: uuid.UUID, ctx: RequestContext
    ) -> CommitResult:
        """Materialize an itinerary against a trip.

        Args:
            itinerary: Validated (generated or fallback) itinerary
            trip_id: Target trip
            ctx: Caller identity, must own the trip

        Returns:
            CommitResult describing what was written

        Raises:
            TripNotFound: Trip does not exist
            Forbidden: Caller does not own the trip
            CommitError: Persistence failed; nothing was written
        """
        try:
            async with self._store.transaction():
                trip = await self._store.get_trip(trip_id, for_update=True)
                if trip is None:
                    raise TripNotFound(f"trip {trip_id} not found")
                if trip.user_id != ctx.user_id:
                    raise Forbidden(f"trip {trip_id} is not owned by the caller")
                result = await self._write(itinerary, trip)
        except (TripNotFound, Forbidden):
            self._metrics.inc_commit("rejected")
            raise
        except Exception as e:
            logger.error(f"Itinerary commit to trip {trip_id} failed: {e}")
            self._metrics.inc_commit("error")
            raise CommitError(f"failed to save itinerary to trip {trip_id}") from e

        self._metrics.inc_commit("success")
        logger.info(
            f"Committed {itinerary.destination} itinerary to trip {trip_id}: "
            f"{result.stops_created} stops, {result.cities_created} new cities"
        )
        return result

    async def _write(self, itinerary: ValidatedItinerary, trip: TripRecord) -> CommitResult:
        cities = CityResolver(self._store, itinerary.destination)
        for day in itinerary.days:
            for planned in day.activities:
                await cities.resolve(planned.location)

        base_date = trip.start_date or self._today()
        next_order = await self._store.max_stop_order(trip.trip_id) + 1
        first_order = next_order

        stop_ids: list[uuid.UUID] = []
        activities_created = 0

        # One stop per activity: each activity may sit in a different city
        for day in sorted(itinerary.days, key=lambda d: d.day):
            stop_date = base_date + timedelta(days=day.day - 1)
            for planned in day.activities:
                city = await cities.resolve(planned.location)
                starts_at = activity_timestamp(planned.time, stop_date)

                stop = await self._store.create_stop(
                    trip.trip_id, city.city_id, next_order, starts_at, starts_at
                )
                await self._store.create_activity(
                    trip.trip_id,
                    stop.stop_id,
                    NewActivity(
                        name=planned.title,
                        description=planned.description,
                        category=map_category(planned.type),
                        start_time=starts_at,
                        cost=extract_cost(planned.cost),
                        order=1,
                        notes=activity_notes(planned.location, planned.duration),
                    ),
                )
                stop_ids.append(stop.stop_id)
                activities_created += 1
                next_order += 1

        budget = trip.total_budget
        budget_set = False
        if budget is None:
            extracted = extract_leading_amount(itinerary.estimated_budget)
            if extracted is not None:
                budget = extracted
                budget_set = True

        await self._store.update_trip(
            trip.trip_id,
            name=trip_display_name(itinerary),
            description=trip_description(trip.description, itinerary),
            total_budget=budget,
        )

        return CommitResult(
            trip_id=trip.trip_id,
            stop_ids=stop_ids,
            activities_created=activities_created,
            cities_created=cities.created,
            cities_reused=cities.reused,
            first_order=first_order if stop_ids else None,
            last_order=next_order - 1 if stop_ids else None,
            budget_set=budget_set,
        )
