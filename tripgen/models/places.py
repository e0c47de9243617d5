"""Place list models - destination and restaurant suggestions."""

from pydantic import BaseModel, Field

from tripgen.models.common import RATING_MAX, RATING_MIN, DestinationType, PriceRange


class DestinationSuggestion(BaseModel):
    """Suggested destination for a country or region."""

    id: int = Field(..., ge=1)
    name: str
    city: str
    state: str
    country: str
    rating: float = Field(..., ge=RATING_MIN, le=RATING_MAX)
    type: DestinationType


class RestaurantSuggestion(BaseModel):
    """Suggested restaurant for a location."""

    id: int = Field(..., ge=1)
    name: str
    cuisine: str
    rating: float = Field(..., ge=RATING_MIN, le=RATING_MAX)
    price_range: PriceRange
    location: str
    description: str = ""
    specialties: list[str] = Field(default_factory=list, max_length=3)


class GeneratedDestinations(BaseModel):
    """Caller-facing destination list with the fallback flag."""

    destinations: list[DestinationSuggestion]
    used_fallback: bool
    attempts: int = 0
    fallback_reason: str | None = None


class GeneratedRestaurants(BaseModel):
    """Caller-facing restaurant list with the fallback flag."""

    restaurants: list[RestaurantSuggestion]
    used_fallback: bool
    attempts: int = 0
    fallback_reason: str | None = None
