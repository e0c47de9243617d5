"""In-memory implementation of the trip store."""

import asyncio
import copy
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from tripgen.db.repositories import (
    ActivityRecord,
    CityRecord,
    NewActivity,
    StopRecord,
    TripRecord,
)


@dataclass
class _Journal:
    """Writes and row locks of one open transaction."""

    created: list[tuple[dict[uuid.UUID, Any], uuid.UUID]] = field(default_factory=list)
    trip_backups: dict[uuid.UUID, TripRecord] = field(default_factory=dict)
    locks: list[asyncio.Lock] = field(default_factory=list)


_current_journal: ContextVar[_Journal | None] = ContextVar("inmemory_journal", default=None)


class InMemoryTripStore:
    """In-memory implementation of TripStore.

    ``get_trip(for_update=True)`` takes a per-trip lock held until the
    transaction ends, so commits to one trip serialize and commits to
    different trips do not contend. Rollback undoes the transaction's own
    writes from a journal.
    """

    def __init__(self) -> None:
        self._trips: dict[uuid.UUID, TripRecord] = {}
        self._cities: dict[uuid.UUID, CityRecord] = {}
        self._stops: dict[uuid.UUID, StopRecord] = {}
        self._activities: dict[uuid.UUID, ActivityRecord] = {}
        self._trip_locks: dict[uuid.UUID, asyncio.Lock] = {}

    def add_trip(
        self,
        user_id: uuid.UUID,
        name: str = "My Trip",
        *,
        description: str | None = None,
        start_date: date | None = None,
        total_budget: float | None = None,
    ) -> TripRecord:
        """Seed a trip (test/setup helper)."""
        trip = TripRecord(
            trip_id=uuid.uuid4(),
            user_id=user_id,
            name=name,
            description=description,
            start_date=start_date,
            total_budget=total_budget,
        )
        self._trips[trip.trip_id] = trip
        return trip

    def _record_created(self, table: dict[uuid.UUID, Any], record_id: uuid.UUID) -> None:
        journal = _current_journal.get()
        if journal is not None:
            journal.created.append((table, record_id))

    def _undo(self, journal: _Journal) -> None:
        for table, record_id in reversed(journal.created):
            table.pop(record_id, None)
        self._trips.update(journal.trip_backups)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        """Open a unit of work; undo its writes on any exception."""
        journal = _Journal()
        token = _current_journal.set(journal)
        try:
            yield
        except BaseException:
            self._undo(journal)
            raise
        finally:
            _current_journal.reset(token)
            for lock in reversed(journal.locks):
                lock.release()

    async def get_trip(self, trip_id: uuid.UUID, *, for_update: bool = False) -> TripRecord | None:
        """Get trip by ID, optionally locking it until the transaction ends."""
        journal = _current_journal.get()
        if for_update and journal is not None:
            lock = self._trip_locks.setdefault(trip_id, asyncio.Lock())
            if lock not in journal.locks:
                await lock.acquire()
                journal.locks.append(lock)
        return self._trips.get(trip_id)

    async def find_city(self, name: str) -> CityRecord | None:
        """Find a city by exact name."""
        for city in self._cities.values():
            if city.name == name:
                return city
        return None

    async def create_city(self, name: str, description: str | None) -> CityRecord:
        """Create a city with country unset and zero coordinates."""
        city = CityRecord(
            city_id=uuid.uuid4(),
            name=name,
            country=None,
            latitude=0.0,
            longitude=0.0,
            description=description,
        )
        self._cities[city.city_id] = city
        self._record_created(self._cities, city.city_id)
        return city

    async def max_stop_order(self, trip_id: uuid.UUID) -> int:
        """Highest stop order on the trip, or 0 when it has no stops."""
        orders = [s.order for s in self._stops.values() if s.trip_id == trip_id]
        return max(orders, default=0)

    async def create_stop(
        self,
        trip_id: uuid.UUID,
        city_id: uuid.UUID,
        order: int,
        start_date: datetime,
        end_date: datetime,
    ) -> StopRecord:
        """Create a stop, enforcing unique order per trip."""
        if any(s.trip_id == trip_id and s.order == order for s in self._stops.values()):
            raise ValueError(f"stop order {order} already used on trip {trip_id}")
        stop = StopRecord(
            stop_id=uuid.uuid4(),
            trip_id=trip_id,
            city_id=city_id,
            order=order,
            start_date=start_date,
            end_date=end_date,
        )
        self._stops[stop.stop_id] = stop
        self._record_created(self._stops, stop.stop_id)
        return stop

    async def create_activity(
        self, trip_id: uuid.UUID, stop_id: uuid.UUID, activity: NewActivity
    ) -> ActivityRecord:
        """Create an activity under a stop."""
        record = ActivityRecord(
            activity_id=uuid.uuid4(),
            trip_id=trip_id,
            stop_id=stop_id,
            name=activity.name,
            description=activity.description,
            category=activity.category,
            start_time=activity.start_time,
            cost=activity.cost,
            order=activity.order,
            notes=activity.notes,
        )
        self._activities[record.activity_id] = record
        self._record_created(self._activities, record.activity_id)
        return record

    async def update_trip(
        self,
        trip_id: uuid.UUID,
        *,
        name: str,
        description: str | None,
        total_budget: float | None,
    ) -> None:
        """Update a trip's display fields and budget."""
        trip = self._trips.get(trip_id)
        if trip is None:
            return
        journal = _current_journal.get()
        if journal is not None and trip_id not in journal.trip_backups:
            journal.trip_backups[trip_id] = copy.copy(trip)
        trip.name = name
        trip.description = description
        trip.total_budget = total_budget

    # Read helpers

    def list_stops(self, trip_id: uuid.UUID) -> list[StopRecord]:
        """Stops of a trip in order."""
        return sorted(
            (s for s in self._stops.values() if s.trip_id == trip_id), key=lambda s: s.order
        )

    def list_activities(self, trip_id: uuid.UUID) -> list[ActivityRecord]:
        """Activities of a trip (unordered across stops)."""
        return [a for a in self._activities.values() if a.trip_id == trip_id]

    def list_cities(self) -> list[CityRecord]:
        """All cities."""
        return list(self._cities.values())
