"""Commit result model - what materializing an itinerary wrote."""

import uuid

from pydantic import BaseModel


class CommitResult(BaseModel):
    """Summary of one itinerary commit against a trip."""

    trip_id: uuid.UUID
    stop_ids: list[uuid.UUID]
    activities_created: int
    cities_created: int
    cities_reused: int
    first_order: int | None
    last_order: int | None
    budget_set: bool

    @property
    def stops_created(self) -> int:
        return len(self.stop_ids)
