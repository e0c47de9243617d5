"""Tests for the generate-with-fallback service.

Tests cover:
1. Genuine itinerary shapes (day count, activity count)
2. Fallback on quota exhaustion and on repeated invalid replies
3. Missing provider configuration
4. Caller-input errors
5. Destination and restaurant clamping
"""

import json

import pytest

from tests.helpers import RecordingSleep, ScriptedTransport, itinerary_json
from tripgen.errors import InvalidRequestError, QuotaExhaustedError
from tripgen.llm.client import GenerativeClient
from tripgen.models.common import DestinationType, PriceRange
from tripgen.models.generation import AttemptResult
from tripgen.orchestration.service import GenerationService


def _service(transport, settings, sleep=None) -> GenerationService:
    client = GenerativeClient(transport, sleep_fn=sleep or RecordingSleep())
    return GenerationService(client, settings=settings)


@pytest.mark.asyncio
async def test_kyoto_three_days_is_genuine(settings) -> None:
    transport = ScriptedTransport([AttemptResult.ok(itinerary_json(3, activities_per_day=5))])
    service = _service(transport, settings)

    result = await service.generate_itinerary("Kyoto", 3)

    assert result.used_fallback is False
    assert result.attempts == 1
    itinerary = result.itinerary
    assert itinerary.total_days == 3
    assert [d.day for d in itinerary.days] == [1, 2, 3]
    assert all(4 <= len(d.activities) <= 6 for d in itinerary.days)


@pytest.mark.asyncio
async def test_prompt_carries_requested_day_count(settings) -> None:
    transport = ScriptedTransport([AttemptResult.ok(itinerary_json(4))])
    service = _service(transport, settings)

    await service.generate_itinerary("Goa", 4)

    assert '"totalDays": 4' in transport.calls[0].prompt
    assert transport.calls[0].request.count == 4


@pytest.mark.asyncio
async def test_quota_on_first_attempt_falls_back_without_retry(settings) -> None:
    transport = ScriptedTransport([AttemptResult.stop(QuotaExhaustedError("429"), 429)])
    sleep = RecordingSleep()
    service = _service(transport, settings, sleep)

    result = await service.generate_itinerary("Kyoto", 3)

    assert len(transport.calls) == 1
    assert sleep.delays == []
    assert result.used_fallback is True
    assert result.fallback_reason == "quota_exhausted"
    assert result.itinerary.total_days == 3
    assert len(result.itinerary.days) == 3


@pytest.mark.asyncio
async def test_invalid_json_three_times_falls_back_after_three_attempts(settings) -> None:
    transport = ScriptedTransport([AttemptResult.ok('{"itinerary": [unterminated')] * 3)
    service = _service(transport, settings)

    result = await service.generate_itinerary("Kyoto", 2)

    assert len(transport.calls) == 3
    assert result.used_fallback is True
    assert result.attempts == 3
    assert result.fallback_reason == "attempts_exhausted"
    assert [d.day for d in result.itinerary.days] == [1, 2]


@pytest.mark.asyncio
async def test_deeply_nested_reply_falls_back(settings) -> None:
    deep = '{"a": ' + "[" * 200_000 + "]" * 200_000 + "}"
    transport = ScriptedTransport([AttemptResult.ok(deep)] * 3)
    service = _service(transport, settings)

    result = await service.generate_itinerary("Kyoto", 3)

    assert len(transport.calls) == 3
    assert result.used_fallback is True
    assert result.itinerary.total_days == 3


@pytest.mark.asyncio
async def test_day_count_mismatch_is_retried(settings) -> None:
    transport = ScriptedTransport(
        [AttemptResult.ok(itinerary_json(2)), AttemptResult.ok(itinerary_json(3))]
    )
    service = _service(transport, settings)

    result = await service.generate_itinerary("Kyoto", 3)

    assert result.used_fallback is False
    assert result.attempts == 2
    assert result.itinerary.total_days == 3


@pytest.mark.asyncio
async def test_missing_client_uses_fallback(settings) -> None:
    service = GenerationService(None, settings=settings)

    result = await service.generate_itinerary("Lisbon", 2)

    assert result.used_fallback is True
    assert result.attempts == 0
    assert result.fallback_reason == "not_configured"
    assert result.itinerary.destination == "Lisbon"


@pytest.mark.asyncio
async def test_default_day_count_applies(settings) -> None:
    service = GenerationService(None, settings=settings)

    result = await service.generate_itinerary("Lisbon", 0)

    assert result.itinerary.total_days == settings.default_itinerary_days


@pytest.mark.asyncio
@pytest.mark.parametrize("subject", [None, "", "   "])
async def test_blank_subject_is_rejected(settings, subject) -> None:
    service = GenerationService(None, settings=settings)

    with pytest.raises(InvalidRequestError):
        await service.generate_itinerary(subject, 3)
    with pytest.raises(InvalidRequestError):
        await service.generate_destinations(subject)
    with pytest.raises(InvalidRequestError):
        await service.generate_restaurants(subject)


@pytest.mark.asyncio
async def test_destinations_are_truncated_and_clamped(settings) -> None:
    reply = json.dumps(
        {
            "destinations": [
                {"name": f"Spot {i}", "city": "Jaipur", "rating": 9.5, "type": "Desert"}
                for i in range(5)
            ]
        }
    )
    service = _service(ScriptedTransport([AttemptResult.ok(reply)]), settings)

    result = await service.generate_destinations("Rajasthan", 3)

    assert result.used_fallback is False
    assert len(result.destinations) == 3
    assert all(d.rating == 5.0 for d in result.destinations)
    assert all(d.type == DestinationType.cultural for d in result.destinations)


@pytest.mark.asyncio
async def test_restaurants_pin_location(settings) -> None:
    reply = json.dumps(
        {
            "restaurants": [
                {
                    "name": "Masala House",
                    "cuisine": "Indian",
                    "rating": 2,
                    "priceRange": "cheap",
                    "location": "Somewhere else",
                    "specialties": ["a", "b", "c", "d"],
                }
            ]
        }
    )
    service = _service(ScriptedTransport([AttemptResult.ok(reply)]), settings)

    result = await service.generate_restaurants("Mumbai", 4)

    restaurant = result.restaurants[0]
    assert restaurant.location == "Mumbai"
    assert restaurant.rating == 4.0
    assert restaurant.price_range == PriceRange.moderate
    assert len(restaurant.specialties) == 3


@pytest.mark.asyncio
async def test_restaurant_fallback_count(settings) -> None:
    service = GenerationService(None, settings=settings)

    result = await service.generate_restaurants("Pune", 5)

    assert result.used_fallback is True
    assert len(result.restaurants) == 5
    assert all(r.location == "Pune" for r in result.restaurants)
