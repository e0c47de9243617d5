"""Models package - re-exports for convenience."""

from tripgen.models.commit import CommitResult
from tripgen.models.common import (
    ActivityCategory,
    ActivityType,
    DestinationType,
    GenerationKind,
    PriceRange,
)
from tripgen.models.generation import (
    AttemptOutcome,
    AttemptResult,
    GenerationParams,
    GenerationRequest,
    GenerationResult,
    PromptPayload,
    RawGenerationResult,
    TerminalError,
)
from tripgen.models.itinerary import (
    ActivityPlan,
    DayPlan,
    GeneratedItinerary,
    ValidatedItinerary,
)
from tripgen.models.places import (
    DestinationSuggestion,
    GeneratedDestinations,
    GeneratedRestaurants,
    RestaurantSuggestion,
)

__all__ = [
    # Common
    "GenerationKind",
    "ActivityType",
    "DestinationType",
    "PriceRange",
    "ActivityCategory",
    # Generation
    "GenerationParams",
    "GenerationRequest",
    "PromptPayload",
    "RawGenerationResult",
    "AttemptOutcome",
    "AttemptResult",
    "TerminalError",
    "GenerationResult",
    # Itinerary
    "ActivityPlan",
    "DayPlan",
    "ValidatedItinerary",
    "GeneratedItinerary",
    # Places
    "DestinationSuggestion",
    "RestaurantSuggestion",
    "GeneratedDestinations",
    "GeneratedRestaurants",
    # Commit
    "CommitResult",
]
