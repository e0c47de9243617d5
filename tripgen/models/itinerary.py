"""Itinerary models - validated output of the generation pipeline."""

from pydantic import BaseModel, Field, model_validator

from tripgen.models.common import ActivityType


class ActivityPlan(BaseModel):
    """Single planned activity; location and cost are still free text."""

    time: str
    title: str
    description: str = ""
    location: str = ""
    duration: str = ""
    cost: str = ""
    type: ActivityType = ActivityType.other


class DayPlan(BaseModel):
    """Activities planned for one 1-based day."""

    day: int = Field(..., ge=1)
    title: str
    activities: list[ActivityPlan] = Field(..., min_length=1)


class ValidatedItinerary(BaseModel):
    """Accepted itinerary: days are exactly 1..total_days in order."""

    destination: str
    total_days: int = Field(..., ge=1)
    days: list[DayPlan]
    tips: list[str] = Field(default_factory=list)
    estimated_budget: str | None = None

    @model_validator(mode="after")
    def check_contiguous_days(self) -> "ValidatedItinerary":
        """Ensure day indices are 1..total_days with no gaps."""
        indices = [day.day for day in self.days]
        if indices != list(range(1, self.total_days + 1)):
            raise ValueError(f"day indices {indices} are not 1..{self.total_days}")
        return self

    @property
    def activity_count(self) -> int:
        return sum(len(day.activities) for day in self.days)


class GeneratedItinerary(BaseModel):
    """Caller-facing generation result with the fallback flag."""

    itinerary: ValidatedItinerary
    used_fallback: bool
    attempts: int = 0
    fallback_reason: str | None = None
