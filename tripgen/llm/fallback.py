"""Fallback synthesizer - deterministic results when generation is unusable.

Output depends only on the subject and the index of each entry, and
satisfies every invariant a validated result does.
"""

from tripgen.models.common import ActivityType, DestinationType, PriceRange
from tripgen.models.itinerary import ActivityPlan, DayPlan, ValidatedItinerary
from tripgen.models.places import DestinationSuggestion, RestaurantSuggestion

FALLBACK_TIPS = [
    "Plan your day early to avoid crowds",
    "Try local cuisine for authentic experience",
    "Carry comfortable walking shoes",
    "Check weather conditions before heading out",
]

_DESTINATION_TEMPLATES: tuple[tuple[str, DestinationType], ...] = (
    ("Old Town", DestinationType.historical),
    ("Heritage Quarter", DestinationType.cultural),
    ("City Centre", DestinationType.urban),
    ("National Park", DestinationType.nature),
    ("Coastline", DestinationType.beach),
    ("Highlands", DestinationType.adventure),
)

# (name, city, state, rating, type)
_CuratedEntry = tuple[str, str, str, float, DestinationType]

# Curated lists keyed by a substring of the lowercased query, with the country they name
_CURATED_DESTINATIONS: dict[str, tuple[str, tuple[_CuratedEntry, ...]]] = {
    "india": (
        "India",
        (
            ("Taj Mahal", "Agra", "Uttar Pradesh", 4.8, DestinationType.historical),
            ("Goa Beaches", "Panaji", "Goa", 4.6, DestinationType.beach),
            ("Kerala Backwaters", "Alleppey", "Kerala", 4.7, DestinationType.nature),
            ("Golden Temple", "Amritsar", "Punjab", 4.9, DestinationType.cultural),
            ("Himalayas", "Manali", "Himachal Pradesh", 4.8, DestinationType.adventure),
            ("Mumbai", "Mumbai", "Maharashtra", 4.4, DestinationType.urban),
        ),
    ),
    "japan": (
        "Japan",
        (
            ("Tokyo", "Tokyo", "Tokyo", 4.8, DestinationType.urban),
            ("Kyoto Temples", "Kyoto", "Kyoto", 4.9, DestinationType.cultural),
            ("Mount Fuji", "Fujiyoshida", "Yamanashi", 4.7, DestinationType.nature),
            ("Osaka Castle", "Osaka", "Osaka", 4.6, DestinationType.historical),
            ("Hiroshima", "Hiroshima", "Hiroshima", 4.5, DestinationType.historical),
            ("Nara Deer Park", "Nara", "Nara", 4.8, DestinationType.nature),
        ),
    ),
}

_RESTAURANT_TEMPLATES: tuple[tuple[str, str, PriceRange], ...] = (
    ("Spice Route", "Local", PriceRange.moderate),
    ("Trattoria Bella", "Italian", PriceRange.upscale),
    ("Sakura House", "Japanese", PriceRange.upscale),
    ("Harbour Catch", "Seafood", PriceRange.upscale),
    ("Green Leaf", "Vegetarian", PriceRange.budget),
    ("Golden Dragon", "Chinese", PriceRange.moderate),
)


def _fallback_day(destination: str, day: int, currency_symbol: str) -> DayPlan:
    s = currency_symbol
    return DayPlan(
        day=day,
        title=f"Day {day}: Explore {destination}",
        activities=[
            ActivityPlan(
                time="09:00 AM",
                title="Morning Exploration",
                description=f"Start your day exploring the main attractions of {destination}",
                location=f"Central {destination}",
                duration="3 hours",
                cost=f"{s}200-500",
                type=ActivityType.sightseeing,
            ),
            ActivityPlan(
                time="01:00 PM",
                title="Local Lunch",
                description="Try authentic local cuisine at popular restaurants",
                location="Local restaurant",
                duration="1 hour",
                cost=f"{s}300-600",
                type=ActivityType.food,
            ),
            ActivityPlan(
                time="03:00 PM",
                title="Cultural Experience",
                description="Visit cultural sites and local markets",
                location=f"{destination} cultural district",
                duration="2 hours",
                cost=f"{s}100-300",
                type=ActivityType.cultural,
            ),
            ActivityPlan(
                time="06:00 PM",
                title="Evening Leisure",
                description="Relax and enjoy the evening atmosphere",
                location="Popular evening spot",
                duration="2 hours",
                cost="Free",
                type=ActivityType.relaxation,
            ),
        ],
    )


def synthesize_itinerary(
    destination: str, days: int, currency_symbol: str = "₹"
) -> ValidatedItinerary:
    """Build a fixed-pattern itinerary with one templated day per requested day."""
    days = max(days, 1)
    return ValidatedItinerary(
        destination=destination,
        total_days=days,
        days=[_fallback_day(destination, day, currency_symbol) for day in range(1, days + 1)],
        tips=list(FALLBACK_TIPS),
        estimated_budget=f"{currency_symbol}3000-6000 per person",
    )


def _curated_destinations(subject: str) -> list[DestinationSuggestion]:
    query = subject.lower()
    for keyword, (country, entries) in _CURATED_DESTINATIONS.items():
        if keyword in query:
            return [
                DestinationSuggestion(
                    id=index,
                    name=name,
                    city=city,
                    state=state,
                    country=country,
                    rating=rating,
                    type=kind,
                )
                for index, (name, city, state, rating, kind) in enumerate(entries, start=1)
            ]
    return []


def synthesize_destinations(subject: str, count: int) -> list[DestinationSuggestion]:
    """Build count destinations for a country or region.

    Known regions start from a curated list; the rest is templated on the subject.
    """
    count = max(count, 1)
    results = _curated_destinations(subject)[:count]
    for index in range(len(results) + 1, count + 1):
        label, kind = _DESTINATION_TEMPLATES[(index - 1) % len(_DESTINATION_TEMPLATES)]
        results.append(
            DestinationSuggestion(
                id=index,
                name=f"{subject} {label}",
                city=subject,
                state=subject,
                country=subject,
                rating=4.5,
                type=kind,
            )
        )
    return results


def synthesize_restaurants(location: str, count: int) -> list[RestaurantSuggestion]:
    """Build count templated restaurants for a location."""
    results: list[RestaurantSuggestion] = []
    for index in range(1, max(count, 1) + 1):
        name, cuisine, price = _RESTAURANT_TEMPLATES[(index - 1) % len(_RESTAURANT_TEMPLATES)]
        results.append(
            RestaurantSuggestion(
                id=index,
                name=f"{name} {location}",
                cuisine=cuisine,
                rating=4.0 + (index % 6) / 10,
                price_range=price,
                location=location,
                description=f"Popular {cuisine.lower()} spot in {location}",
                specialties=[f"House {cuisine} Platter", "Chef's Special", "Seasonal Dessert"],
            )
        )
    return results
