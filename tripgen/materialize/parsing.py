"""Free-text parsing for itinerary materialization.

Costs, budgets, clock times and location labels arrive as model-written
text; these helpers turn them into the values the trip store expects.
"""

import re
from datetime import date, datetime, time

from tripgen.models.common import ActivityCategory, ActivityType

UNKNOWN_LOCATION = "Unknown Location"
MIN_CITY_KEY_LENGTH = 3
GENERIC_LOCATION_WORDS = ("central", "main")

_LOCATION_PREFIX = re.compile(r"^(?:visit|go to|explore|see)\s+", re.IGNORECASE)
_LEADING_AMOUNT = re.compile(r"(\d[\d,]*(?:\.\d+)?)")
_CLOCK_TIME = re.compile(r"(\d{1,2}):(\d{2})\s*([AaPp][Mm])")

_CATEGORY_BY_TYPE: dict[ActivityType, ActivityCategory] = {
    ActivityType.sightseeing: ActivityCategory.SIGHTSEEING,
    ActivityType.food: ActivityCategory.FOOD,
    ActivityType.cultural: ActivityCategory.CULTURE,
    ActivityType.adventure: ActivityCategory.ADVENTURE,
    ActivityType.shopping: ActivityCategory.SHOPPING,
    ActivityType.relaxation: ActivityCategory.RELAXATION,
    ActivityType.entertainment: ActivityCategory.ENTERTAINMENT,
}


def extract_leading_amount(text: str | None) -> float | None:
    """Return the first numeric token in text ("₹5000-8000 per person" -> 5000)."""
    if not text:
        return None
    match = _LEADING_AMOUNT.search(text)
    if match is None:
        return None
    return float(match.group(1).replace(",", ""))


def extract_cost(text: str | None) -> float | None:
    """Parse an activity cost expression.

    "Free" (any case) is zero; "₹500-1000" is 500; text without a numeric
    token leaves the cost unset (None), not zero.
    """
    if text is not None and text.strip().lower() == "free":
        return 0.0
    return extract_leading_amount(text)


def parse_clock_time(label: str | None) -> time | None:
    """Parse a 12-hour "HH:MM AM/PM" label; None when unparseable."""
    if not label:
        return None
    match = _CLOCK_TIME.search(label)
    if match is None:
        return None

    hours, minutes = int(match.group(1)), int(match.group(2))
    if not 1 <= hours <= 12 or minutes > 59:
        return None

    period = match.group(3).upper()
    if period == "PM" and hours != 12:
        hours += 12
    elif period == "AM" and hours == 12:
        hours = 0
    return time(hours, minutes)


def activity_timestamp(label: str | None, on: date) -> datetime:
    """Combine a day's date with a clock label, defaulting to start of day."""
    return datetime.combine(on, parse_clock_time(label) or time.min)


def city_key(location: str | None) -> str:
    """Derive the canonical city key for a free-text location label.

    Descriptive prefixes ("Visit ", "Explore ", ...) are trimmed and the
    text before the first comma is kept. Results that are too short or
    dominated by generic words fall back to the raw label.
    """
    if not location or not location.strip():
        return UNKNOWN_LOCATION

    raw = location.strip()
    cleaned = _LOCATION_PREFIX.sub("", raw).strip()
    if "," in cleaned:
        cleaned = cleaned.split(",", 1)[0].strip()

    lowered = cleaned.lower()
    if len(cleaned) < MIN_CITY_KEY_LENGTH or any(w in lowered for w in GENERIC_LOCATION_WORDS):
        return raw
    return cleaned


def map_category(activity_type: ActivityType | str) -> ActivityCategory:
    """Map a validated activity type onto the persisted category (default OTHER)."""
    try:
        activity_type = ActivityType(activity_type)
    except ValueError:
        return ActivityCategory.OTHER
    return _CATEGORY_BY_TYPE.get(activity_type, ActivityCategory.OTHER)
