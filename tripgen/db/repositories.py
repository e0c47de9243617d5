"""Trip store protocol and record types used by the materializer."""

import uuid
from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass
from datetime import date, datetime
from typing import Protocol

from tripgen.models.common import ActivityCategory


@dataclass
class TripRecord:
    """Trip data record."""

    trip_id: uuid.UUID
    user_id: uuid.UUID
    name: str
    description: str | None
    start_date: date | None
    total_budget: float | None


@dataclass
class CityRecord:
    """City data record."""

    city_id: uuid.UUID
    name: str
    country: str | None
    latitude: float
    longitude: float
    description: str | None


@dataclass
class StopRecord:
    """Stop data record."""

    stop_id: uuid.UUID
    trip_id: uuid.UUID
    city_id: uuid.UUID
    order: int
    start_date: datetime
    end_date: datetime


@dataclass
class ActivityRecord:
    """Activity data record."""

    activity_id: uuid.UUID
    trip_id: uuid.UUID
    stop_id: uuid.UUID
    name: str
    description: str | None
    category: ActivityCategory
    start_time: datetime
    cost: float | None
    order: int
    notes: str | None


@dataclass
class NewActivity:
    """Activity fields supplied by the materializer."""

    name: str
    description: str | None
    category: ActivityCategory
    start_time: datetime
    cost: float | None
    order: int
    notes: str | None


class TripStore(Protocol):
    """Persistence collaborator for the trip graph.

    All writes made inside ``transaction()`` commit together or not at all.
    """

    def transaction(self) -> AbstractAsyncContextManager[None]:
        """Open a unit of work; commit on clean exit, roll back on any exception."""
        ...

    async def get_trip(self, trip_id: uuid.UUID, *, for_update: bool = False) -> TripRecord | None:
        """Get trip by ID.

        Args:
            trip_id: Trip ID
            for_update: Lock the trip row until the transaction ends, serializing
                stop-order allocation for concurrent commits to the same trip

        Returns:
            Trip record or None if not found
        """
        ...

    async def find_city(self, name: str) -> CityRecord | None:
        """Find a city by exact name."""
        ...

    async def create_city(self, name: str, description: str | None) -> CityRecord:
        """Create a city with country unset and zero coordinates."""
        ...

    async def max_stop_order(self, trip_id: uuid.UUID) -> int:
        """Highest stop order on the trip, or 0 when it has no stops."""
        ...

    async def create_stop(
        self,
        trip_id: uuid.UUID,
        city_id: uuid.UUID,
        order: int,
        start_date: datetime,
        end_date: datetime,
    ) -> StopRecord:
        """Create a stop."""
        ...

    async def create_activity(
        self, trip_id: uuid.UUID, stop_id: uuid.UUID, activity: NewActivity
    ) -> ActivityRecord:
        """Create an activity under a stop."""
        ...

    async def update_trip(
        self,
        trip_id: uuid.UUID,
        *,
        name: str,
        description: str | None,
        total_budget: float | None,
    ) -> None:
        """Update a trip's display fields and budget."""
        ...
