"""Common types and enums shared across all models."""

from enum import Enum


class GenerationKind(str, Enum):
    """What a generation request asks the model for."""

    itinerary = "itinerary"
    destinations = "destinations"
    restaurants = "restaurants"


class ActivityType(str, Enum):
    """Activity tag accepted from generated itineraries."""

    sightseeing = "Sightseeing"
    food = "Food"
    shopping = "Shopping"
    cultural = "Cultural"
    adventure = "Adventure"
    relaxation = "Relaxation"
    entertainment = "Entertainment"
    other = "Other"


# Tags the prompt offers the model; "Other" is only the repair default
PROMPT_ACTIVITY_TYPES: tuple[ActivityType, ...] = (
    ActivityType.sightseeing,
    ActivityType.food,
    ActivityType.shopping,
    ActivityType.cultural,
    ActivityType.adventure,
    ActivityType.relaxation,
)


class DestinationType(str, Enum):
    """Destination tag accepted from generated destination lists."""

    cultural = "Cultural"
    beach = "Beach"
    adventure = "Adventure"
    nature = "Nature"
    urban = "Urban"
    historical = "Historical"


class PriceRange(str, Enum):
    """Restaurant price band."""

    budget = "$"
    moderate = "$$"
    upscale = "$$$"
    luxury = "$$$$"


class ActivityCategory(str, Enum):
    """Persisted activity category owned by the trip store."""

    SIGHTSEEING = "SIGHTSEEING"
    FOOD = "FOOD"
    ENTERTAINMENT = "ENTERTAINMENT"
    ADVENTURE = "ADVENTURE"
    CULTURE = "CULTURE"
    SHOPPING = "SHOPPING"
    RELAXATION = "RELAXATION"
    TRANSPORTATION = "TRANSPORTATION"
    ACCOMMODATION = "ACCOMMODATION"
    OTHER = "OTHER"


# Rating bounds enforced on destination and restaurant lists
RATING_MIN = 4.0
RATING_MAX = 5.0
RATING_DEFAULT = 4.5

# Activities per day requested from the model
ACTIVITIES_PER_DAY_MIN = 4
ACTIVITIES_PER_DAY_MAX = 6
