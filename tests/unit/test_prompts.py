"""Tests for the prompt builder."""

import pytest

from tripgen.llm.prompts import (
    DESTINATION_PARAMS,
    ITINERARY_PARAMS,
    build_prompt,
    resolve_count,
)
from tripgen.models.common import GenerationKind
from tripgen.models.generation import GenerationRequest


def _request(kind: GenerationKind, subject: str = "Kyoto", count: int = 3) -> GenerationRequest:
    return GenerationRequest(kind=kind, subject=subject, count=count)


@pytest.mark.parametrize(
    ("count", "expected"),
    [(None, 3), (0, 3), (-2, 3), (5, 5)],
)
def test_resolve_count_defaults_absent_or_non_positive(count: int | None, expected: int) -> None:
    assert resolve_count(count, 3) == expected


def test_itinerary_prompt_names_shape_and_constraints() -> None:
    """Test that the itinerary prompt spells out the JSON shape and constraints."""
    payload = build_prompt(_request(GenerationKind.itinerary, count=4))

    assert '"itinerary"' in payload.prompt
    assert '"totalDays": 4' in payload.prompt
    assert "4-day travel itinerary" in payload.prompt
    assert '"Kyoto"' in payload.prompt
    assert "4-6 activities per day" in payload.prompt
    assert "Sightseeing, Food, Shopping, Cultural, Adventure, Relaxation" in payload.prompt
    assert "Indian Rupees (₹)" in payload.prompt
    assert payload.params == ITINERARY_PARAMS
    assert payload.params.safety_thresholds is False


def test_prompt_is_deterministic() -> None:
    """Test that the same request always yields the same prompt."""
    request = _request(GenerationKind.itinerary)
    assert build_prompt(request) == build_prompt(request)


def test_destinations_prompt_bounds_ratings_and_types() -> None:
    payload = build_prompt(_request(GenerationKind.destinations, subject="Japan", count=6))

    assert "exactly 6 popular tourist destinations" in payload.prompt
    assert "Ratings must be between 4.0-5.0" in payload.prompt
    assert "Cultural, Beach, Adventure, Nature, Urban, Historical" in payload.prompt
    assert payload.params == DESTINATION_PARAMS
    assert payload.params.safety_thresholds is True


def test_restaurants_prompt_uses_location_and_price_bands() -> None:
    payload = build_prompt(_request(GenerationKind.restaurants, subject="Osaka", count=12))

    assert "12 trending restaurants in Osaka" in payload.prompt
    assert '"location": "Osaka"' in payload.prompt
    assert "$, $$, $$$, $$$$" in payload.prompt


def test_currency_hint_flows_into_prompt() -> None:
    request = GenerationRequest(
        kind=GenerationKind.itinerary,
        subject="Lisbon",
        count=2,
        currency_symbol="€",
        currency_name="Euros",
    )
    payload = build_prompt(request)

    assert "Euros (€)" in payload.prompt
    assert "€5000-8000 per person" in payload.prompt
