"""Schema validator - project untrusted model JSON into typed results.

Field-level problems are repaired: out-of-range numbers are clamped and
unknown tags fall back to a default. Only a missing or malformed
container (the day list, an activity list, the place list) is rejected.
"""

import json
import math
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from tripgen.errors import ValidationError
from tripgen.models.common import (
    RATING_DEFAULT,
    RATING_MAX,
    RATING_MIN,
    ActivityType,
    DestinationType,
    GenerationKind,
    PriceRange,
)
from tripgen.models.generation import GenerationRequest
from tripgen.models.itinerary import ActivityPlan, DayPlan, ValidatedItinerary
from tripgen.models.places import DestinationSuggestion, RestaurantSuggestion


_ACTIVITY_ALIASES: dict[str, ActivityType] = {
    "culture": ActivityType.cultural,
    "dining": ActivityType.food,
    "restaurant": ActivityType.food,
    "nightlife": ActivityType.entertainment,
    "sightsee": ActivityType.sightseeing,
}


def parse_json_object(text: str) -> dict[str, Any]:
    """Parse text into a generic dict, or raise ValidationError."""
    try:
        data = json.loads(text)
    except (ValueError, TypeError, RecursionError) as e:
        raise ValidationError(f"response is not valid JSON: {type(e).__name__}: {e}") from e
    if not isinstance(data, dict):
        raise ValidationError(f"expected a JSON object, got {type(data).__name__}")
    return data


def clamp(value: float, lower: float, upper: float) -> float:
    """Force value into [lower, upper]."""
    return max(lower, min(upper, value))


def coerce_number(value: Any) -> float | None:
    """Return value as a finite float, or None when it is not numeric."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def clamp_rating(value: Any) -> float:
    """Clamp a rating into [4.0, 5.0]; non-numeric ratings get the default."""
    number = coerce_number(value)
    if number is None:
        return RATING_DEFAULT
    return clamp(number, RATING_MIN, RATING_MAX)


def _text(value: Any, default: str = "") -> str:
    if value is None:
        return default
    text = str(value).strip()
    return text or default


def map_activity_type(tag: Any) -> ActivityType:
    """Map a free-text activity tag onto the enumeration (default: Other)."""
    key = _text(tag).lower()
    for member in ActivityType:
        if member.value.lower() == key:
            return member
    return _ACTIVITY_ALIASES.get(key, ActivityType.other)


def map_destination_type(tag: Any) -> DestinationType:
    """Map a free-text destination tag onto the enumeration (default: Cultural)."""
    key = _text(tag).lower()
    for member in DestinationType:
        if member.value.lower() == key:
            return member
    return DestinationType.cultural


def map_price_range(value: Any) -> PriceRange:
    """Map a price band onto $..$$$$ (default: $$)."""
    key = _text(value)
    for member in PriceRange:
        if member.value == key:
            return member
    return PriceRange.moderate


def format_cost(value: Any, currency_symbol: str) -> str:
    """Render a cost field as free text, clamping numeric costs at zero."""
    number = coerce_number(value) if not isinstance(value, str) else None
    if number is not None:
        number = max(0.0, number)
        amount = int(number) if number.is_integer() else round(number, 2)
        return f"{currency_symbol}{amount}"
    return _text(value)


def _list_container(data: dict[str, Any], key: str) -> list[Any]:
    items = data.get(key)
    if not isinstance(items, list) or not items:
        raise ValidationError(f"missing or empty '{key}' list")
    return items


def _project_activity(raw: Any, position: int, currency_symbol: str) -> ActivityPlan:
    if not isinstance(raw, dict):
        raise ValidationError(f"activity {position} is not an object")
    return ActivityPlan(
        time=_text(raw.get("time")),
        title=_text(raw.get("title") or raw.get("name"), f"Activity {position}"),
        description=_text(raw.get("description")),
        location=_text(raw.get("location")),
        duration=_text(raw.get("duration")),
        cost=format_cost(raw.get("cost"), currency_symbol),
        type=map_activity_type(raw.get("type") or raw.get("category")),
    )


def _day_index(raw: dict[str, Any], position: int) -> int:
    value = raw.get("day")
    if value is None:
        return position
    number = coerce_number(value)
    if number is None or not number.is_integer():
        raise ValidationError(f"day {position} has a non-integer index {value!r}")
    return int(number)


def validate_itinerary(
    text: str,
    expected_days: int | None = None,
    *,
    subject: str = "",
    currency_symbol: str = "₹",
) -> ValidatedItinerary:
    """Validate an itinerary reply.

    Args:
        text: Normalized JSON text
        expected_days: Day count the caller asked for (None = accept any)
        subject: Requested destination, used when the reply names none
        currency_symbol: Symbol used when rendering numeric costs

    Returns:
        ValidatedItinerary with contiguous days 1..N

    Raises:
        ValidationError: Day/activity containers absent or malformed
    """
    data = parse_json_object(text)
    container = data.get("itinerary", data)
    if not isinstance(container, dict):
        raise ValidationError("'itinerary' is not an object")

    raw_days = _list_container(container, "days")

    days: list[DayPlan] = []
    for position, raw_day in enumerate(raw_days, start=1):
        if not isinstance(raw_day, dict):
            raise ValidationError(f"day {position} is not an object")
        index = _day_index(raw_day, position)
        if index < 1:
            raise ValidationError(f"day {position} has index {index} below 1")
        raw_activities = raw_day.get("activities")
        if not isinstance(raw_activities, list) or not raw_activities:
            raise ValidationError(f"day {index} has no activities")
        activities = [
            _project_activity(raw, i, currency_symbol)
            for i, raw in enumerate(raw_activities, start=1)
        ]
        days.append(
            DayPlan(
                day=index,
                title=_text(raw_day.get("title"), f"Day {index}"),
                activities=activities,
            )
        )

    days.sort(key=lambda d: d.day)
    indices = [d.day for d in days]
    if indices != list(range(1, len(days) + 1)):
        raise ValidationError(f"day indices {indices} are not contiguous from 1")
    if expected_days is not None and len(days) != expected_days:
        raise ValidationError(f"expected {expected_days} days, got {len(days)}")

    raw_tips = container.get("tips")
    tips = [_text(t) for t in raw_tips if _text(t)] if isinstance(raw_tips, list) else []
    budget = _text(container.get("estimatedBudget")) or None

    try:
        return ValidatedItinerary(
            destination=_text(container.get("destination"), subject or "Unknown Destination"),
            total_days=len(days),
            days=days,
            tips=tips,
            estimated_budget=budget,
        )
    except PydanticValidationError as e:
        raise ValidationError(f"itinerary failed final shape check: {e}") from e


def validate_destinations(text: str, count: int, *, subject: str) -> list[DestinationSuggestion]:
    """Validate a destination-list reply, truncating to count.

    Raises:
        ValidationError: 'destinations' list absent, empty or not objects
    """
    data = parse_json_object(text)
    items = _list_container(data, "destinations")

    results: list[DestinationSuggestion] = []
    for index, raw in enumerate(items[:count], start=1):
        if not isinstance(raw, dict):
            raise ValidationError(f"destination {index} is not an object")
        results.append(
            DestinationSuggestion(
                id=index,
                name=_text(raw.get("name"), "Unknown Destination"),
                city=_text(raw.get("city"), "Unknown City"),
                state=_text(raw.get("state"), "Unknown State"),
                country=_text(raw.get("country"), subject),
                rating=clamp_rating(raw.get("rating")),
                type=map_destination_type(raw.get("type")),
            )
        )
    return results


def validate_restaurants(text: str, count: int, *, subject: str) -> list[RestaurantSuggestion]:
    """Validate a restaurant-list reply, truncating to count.

    Raises:
        ValidationError: 'restaurants' list absent, empty or not objects
    """
    data = parse_json_object(text)
    items = _list_container(data, "restaurants")

    results: list[RestaurantSuggestion] = []
    for index, raw in enumerate(items[:count], start=1):
        if not isinstance(raw, dict):
            raise ValidationError(f"restaurant {index} is not an object")
        raw_specialties = raw.get("specialties")
        specialties = (
            [_text(s) for s in raw_specialties if _text(s)][:3]
            if isinstance(raw_specialties, list)
            else []
        )
        results.append(
            RestaurantSuggestion(
                id=index,
                name=_text(raw.get("name"), f"Restaurant {index}"),
                cuisine=_text(raw.get("cuisine"), "Local"),
                rating=clamp_rating(raw.get("rating")),
                price_range=map_price_range(raw.get("priceRange")),
                location=subject,
                description=_text(raw.get("description")),
                specialties=specialties,
            )
        )
    return results


def validate(text: str, request: GenerationRequest) -> Any:
    """Validate text against the shape implied by the request kind."""
    if request.kind == GenerationKind.itinerary:
        return validate_itinerary(
            text,
            request.count,
            subject=request.subject,
            currency_symbol=request.currency_symbol,
        )
    if request.kind == GenerationKind.destinations:
        return validate_destinations(text, request.count, subject=request.subject)
    return validate_restaurants(text, request.count, subject=request.subject)
