"""SQL implementation of the trip store."""

import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from tripgen.db.models import Activity, City, Stop, Trip
from tripgen.db.repositories import (
    ActivityRecord,
    CityRecord,
    NewActivity,
    StopRecord,
    TripRecord,
)


def _trip_record(trip: Trip) -> TripRecord:
    return TripRecord(
        trip_id=trip.trip_id,
        user_id=trip.user_id,
        name=trip.name,
        description=trip.description,
        start_date=trip.start_date,
        total_budget=trip.total_budget,
    )


def _city_record(city: City) -> CityRecord:
    return CityRecord(
        city_id=city.city_id,
        name=city.name,
        country=city.country,
        latitude=city.latitude,
        longitude=city.longitude,
        description=city.description,
    )


class SqlTripStore:
    """SQL implementation of TripStore over one AsyncSession."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        """Commit on clean exit, roll back on any exception (cancellation included)."""
        try:
            yield
            await self._session.commit()
        except BaseException:
            await self._session.rollback()
            raise

    async def get_trip(self, trip_id: uuid.UUID, *, for_update: bool = False) -> TripRecord | None:
        """Get trip by ID, optionally locking its row (SELECT ... FOR UPDATE)."""
        stmt = select(Trip).where(Trip.trip_id == trip_id)
        if for_update:
            stmt = stmt.with_for_update()
        trip = (await self._session.execute(stmt)).scalar_one_or_none()
        return _trip_record(trip) if trip else None

    async def find_city(self, name: str) -> CityRecord | None:
        """Find a city by exact name."""
        stmt = select(City).where(City.name == name).limit(1)
        city = (await self._session.execute(stmt)).scalar_one_or_none()
        return _city_record(city) if city else None

    async def create_city(self, name: str, description: str | None) -> CityRecord:
        """Create a city with country unset and zero coordinates."""
        city = City(
            city_id=uuid.uuid4(),
            name=name,
            country=None,
            latitude=0.0,
            longitude=0.0,
            description=description,
        )
        self._session.add(city)
        await self._session.flush()
        return _city_record(city)

    async def max_stop_order(self, trip_id: uuid.UUID) -> int:
        """Highest stop order on the trip, or 0 when it has no stops."""
        stmt = select(func.max(Stop.order)).where(Stop.trip_id == trip_id)
        value = (await self._session.execute(stmt)).scalar_one_or_none()
        return value or 0

    async def create_stop(
        self,
        trip_id: uuid.UUID,
        city_id: uuid.UUID,
        order: int,
        start_date: datetime,
        end_date: datetime,
    ) -> StopRecord:
        """Create a stop."""
        stop = Stop(
            stop_id=uuid.uuid4(),
            trip_id=trip_id,
            city_id=city_id,
            order=order,
            start_date=start_date,
            end_date=end_date,
        )
        self._session.add(stop)
        await self._session.flush()
        return StopRecord(
            stop_id=stop.stop_id,
            trip_id=stop.trip_id,
            city_id=stop.city_id,
            order=stop.order,
            start_date=stop.start_date,
            end_date=stop.end_date,
        )

    async def create_activity(
        self, trip_id: uuid.UUID, stop_id: uuid.UUID, activity: NewActivity
    ) -> ActivityRecord:
        """Create an activity under a stop."""
        row = Activity(
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
        self._session.add(row)
        await self._session.flush()
        return ActivityRecord(
            activity_id=row.activity_id,
            trip_id=row.trip_id,
            stop_id=row.stop_id,
            name=row.name,
            description=row.description,
            category=row.category,
            start_time=row.start_time,
            cost=row.cost,
            order=row.order,
            notes=row.notes,
        )

    async def update_trip(
        self,
        trip_id: uuid.UUID,
        *,
        name: str,
        description: str | None,
        total_budget: float | None,
    ) -> None:
        """Update a trip's display fields and budget."""
        trip = await self._session.get(Trip, trip_id)
        if trip is None:
            return
        trip.name = name
        trip.description = description
        trip.total_budget = total_budget
        await self._session.flush()

    # Read helpers

    async def list_stops(self, trip_id: uuid.UUID) -> list[StopRecord]:
        """Stops of a trip in order."""
        stmt = select(Stop).where(Stop.trip_id == trip_id).order_by(Stop.order)
        rows = (await self._session.execute(stmt)).scalars().all()
        return [
            StopRecord(
                stop_id=s.stop_id,
                trip_id=s.trip_id,
                city_id=s.city_id,
                order=s.order,
                start_date=s.start_date,
                end_date=s.end_date,
            )
            for s in rows
        ]
