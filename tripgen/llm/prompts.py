"""Prompt builder - deterministic instructions plus strict output shape.

Building a prompt cannot fail: subject presence is checked by the caller
and non-positive counts are replaced with the configured default before
a GenerationRequest exists.
"""

from tripgen.models.common import (
    ACTIVITIES_PER_DAY_MAX,
    ACTIVITIES_PER_DAY_MIN,
    PROMPT_ACTIVITY_TYPES,
    RATING_MAX,
    RATING_MIN,
    DestinationType,
    GenerationKind,
    PriceRange,
)
from tripgen.models.generation import GenerationParams, GenerationRequest, PromptPayload

ITINERARY_PARAMS = GenerationParams(
    temperature=0.7, top_k=40, top_p=0.95, max_output_tokens=8192
)
DESTINATION_PARAMS = GenerationParams(
    temperature=0.3, top_k=20, top_p=0.8, max_output_tokens=1024, safety_thresholds=True
)
RESTAURANT_PARAMS = GenerationParams(
    temperature=0.7, top_k=40, top_p=0.95, max_output_tokens=4096
)

CUISINE_MIX = (
    "Italian, Japanese, Local, International, Indian, Seafood, Chinese, Mexican, "
    "French, Thai, American, Vegetarian"
)


def resolve_count(count: int | None, default: int) -> int:
    """Return count, or default when count is absent or non-positive."""
    if count is None or count <= 0:
        return default
    return count


def build_prompt(request: GenerationRequest) -> PromptPayload:
    """Build the prompt payload for any generation kind."""
    if request.kind == GenerationKind.itinerary:
        return build_itinerary_prompt(request)
    if request.kind == GenerationKind.destinations:
        return build_destinations_prompt(request)
    return build_restaurants_prompt(request)


def build_itinerary_prompt(request: GenerationRequest) -> PromptPayload:
    """Build a multi-day itinerary prompt.

    Args:
        request: Itinerary request (subject = destination, count = days)

    Returns:
        PromptPayload with the exact JSON shape and constraints spelled out
    """
    days = request.count
    symbol = request.currency_symbol
    types = ", ".join(t.value for t in PROMPT_ACTIVITY_TYPES)

    prompt = f"""Generate a detailed {days}-day travel itinerary for "{request.subject}" focusing on the most trending and popular places. Return ONLY valid JSON in this exact format:

{{
  "itinerary": {{
    "destination": "Destination Name",
    "totalDays": {days},
    "days": [
      {{
        "day": 1,
        "title": "Day 1: Theme",
        "activities": [
          {{
            "time": "09:00 AM",
            "title": "Activity Name",
            "description": "Detailed description",
            "location": "Specific location",
            "duration": "2 hours",
            "cost": "Free/{symbol}500-1000",
            "type": "Sightseeing"
          }}
        ]
      }}
    ],
    "tips": [
      "Travel tip 1",
      "Travel tip 2"
    ],
    "estimatedBudget": "{symbol}5000-8000 per person"
  }}
}}

Requirements:
- Include exactly {days} days numbered 1 to {days}
- Include {ACTIVITIES_PER_DAY_MIN}-{ACTIVITIES_PER_DAY_MAX} activities per day
- Mix of trending places, cultural sites, local experiences, and food spots
- Realistic timing (9 AM - 8 PM), times written as "HH:MM AM" or "HH:MM PM"
- Include transportation suggestions
- Add local food recommendations
- Consider opening hours and practical logistics
- Use activity types: {types}
- Cost should be in {request.currency_name} ({symbol}) with ranges, or "Free"
- No additional text, just the JSON."""

    return PromptPayload(request=request, prompt=prompt, params=ITINERARY_PARAMS)


def build_destinations_prompt(request: GenerationRequest) -> PromptPayload:
    """Build a destination-list prompt for a country or region."""
    types = ", ".join(t.value for t in DestinationType)

    prompt = f"""Generate exactly {request.count} popular tourist destinations for "{request.subject}". Return ONLY valid JSON in this exact format:

{{
  "destinations": [
    {{
      "name": "Destination Name",
      "city": "City Name",
      "state": "State/Province Name",
      "country": "Country Name",
      "rating": 4.5,
      "type": "Cultural"
    }}
  ]
}}

Use these types only: {types}
Ratings must be between {RATING_MIN}-{RATING_MAX}
No additional text, just the JSON."""

    return PromptPayload(request=request, prompt=prompt, params=DESTINATION_PARAMS)


def build_restaurants_prompt(request: GenerationRequest) -> PromptPayload:
    """Build a trending-restaurant prompt for a location."""
    price_bands = ", ".join(p.value for p in PriceRange)

    prompt = f"""Generate a JSON list of {request.count} trending restaurants in {request.subject}. Include diverse cuisine types ({CUISINE_MIX}). For each restaurant, provide: name, cuisine, rating ({RATING_MIN}-{RATING_MAX}), priceRange ({price_bands}), description, and 3 specialties. Make them realistic and appealing. Return ONLY valid JSON in this exact format:

{{
  "restaurants": [
    {{
      "name": "Restaurant Name",
      "cuisine": "Cuisine Type",
      "rating": 4.5,
      "priceRange": "$$",
      "location": "{request.subject}",
      "description": "Brief description",
      "specialties": ["Specialty1", "Specialty2", "Specialty3"]
    }}
  ]
}}

No additional text, just the JSON."""

    return PromptPayload(request=request, prompt=prompt, params=RESTAURANT_PARAMS)
