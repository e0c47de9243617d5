"""Response normalizer - isolate the JSON object inside a model reply."""

import json
import re

from tripgen.errors import NormalizationFailure

_FENCE_LINE = re.compile(r"^\s*```[\w-]*\s*$", re.MULTILINE)
_INLINE_FENCE = re.compile(r"```(?:json)?")
_MAX_RESCANS = 64


def strip_fences(text: str) -> str:
    """Remove markdown code fences in either ```json or bare ``` form."""
    text = _FENCE_LINE.sub("", text)
    return _INLINE_FENCE.sub("", text).strip()


def _scan_object(text: str, start: int) -> int | None:
    """Index of the brace closing the object opened at start, or None."""
    depth = 0
    in_string = False
    escaped = False

    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue

        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i

    return None


def _balanced_objects(text: str) -> list[str]:
    """Return every balanced top-level {...} span, in order of appearance.

    An opening brace that never closes (a stray "{" in prose) is skipped and
    scanning resumes at the next one, up to _MAX_RESCANS times.
    """
    spans: list[str] = []
    rescans = 0
    start = text.find("{")

    while start != -1:
        end = _scan_object(text, start)
        if end is None:
            rescans += 1
            if rescans > _MAX_RESCANS:
                break
            start = text.find("{", start + 1)
            continue
        spans.append(text[start : end + 1])
        start = text.find("{", end + 1)

    return spans


def normalize(text: str) -> str:
    """Return the best-effort JSON object substring of a model reply.

    Leading explanation, trailing disclaimers and code fences are dropped.
    When several balanced objects are present the first one that parses
    wins; otherwise the first balanced one is returned for the validator
    to reject.

    Raises:
        NormalizationFailure: No balanced outer braces were found
    """
    if not text or not text.strip():
        raise NormalizationFailure("empty response text")

    candidates = _balanced_objects(strip_fences(text))
    if not candidates:
        raise NormalizationFailure("no balanced JSON object in response")

    for candidate in candidates:
        try:
            json.loads(candidate)
        except (ValueError, RecursionError):
            continue
        return candidate

    return candidates[0]
