"""Request context for ownership enforcement."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class RequestContext:
    """Identity of the caller committing an itinerary.

    Used to enforce trip ownership in materialization.
    """

    user_id: UUID
