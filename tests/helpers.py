"""Test doubles and payload builders shared across suites."""

import json
from typing import Any

from tripgen.models.generation import AttemptResult, PromptPayload

TIMES = ["09:00 AM", "11:00 AM", "01:30 PM", "04:00 PM", "06:00 PM", "08:00 PM"]


class ScriptedTransport:
    """Transport that replays a fixed list of attempt results."""

    def __init__(self, results: list[AttemptResult]) -> None:
        self._results = list(results)
        self.calls: list[PromptPayload] = []

    async def send(self, payload: PromptPayload) -> AttemptResult:
        self.calls.append(payload)
        if len(self.calls) > len(self._results):
            raise AssertionError("transport called more times than scripted")
        return self._results[len(self.calls) - 1]


class RecordingSleep:
    """Injectable sleep that records delays instead of waiting."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


def itinerary_json(
    days: int,
    activities_per_day: int = 2,
    destination: str = "Kyoto",
    **extra: Any,
) -> str:
    """Well-formed itinerary reply with the given shape."""
    container: dict[str, Any] = {
        "destination": destination,
        "totalDays": days,
        "days": [
            {
                "day": d,
                "title": f"Day {d}: Temples",
                "activities": [
                    {
                        "time": TIMES[a % len(TIMES)],
                        "title": f"Stop {d}-{a}",
                        "description": "Walk around",
                        "location": f"Place {d}-{a}, {destination}",
                        "duration": "2 hours",
                        "cost": "₹500-1000",
                        "type": "Sightseeing",
                    }
                    for a in range(activities_per_day)
                ],
            }
            for d in range(1, days + 1)
        ],
        "tips": ["Start early"],
        "estimatedBudget": "₹5000-8000 per person",
    }
    container.update(extra)
    return json.dumps({"itinerary": container}, ensure_ascii=False)
