"""Parse model output into a typed Review.

The model is asked for ``{"review": {...}}`` but nothing guarantees it
complies. A document that is not JSON, or whose shape is wrong, is rejected
as a whole with SchemaError; a Review is never partially built from it.
Inside a well-formed document, absent or null fields simply take their
empty default since the model is not required to fill every section.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from codecritique_core.errors import SchemaError
from codecritique_core.models import CodeQuality, Feedback, Review

logger = logging.getLogger(__name__)

EXCERPT_CHARS = 200

_OPEN_FENCE_RE = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_CLOSE_FENCE_RE = re.compile(r"\s*```$")


class _ShapeError(Exception):
    """Internal signal that a field has the wrong type."""


def _string(obj: dict, key: str) -> str:
    value = obj.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise _ShapeError(f"'{key}' must be a string, got {type(value).__name__}")
    return value


def _strings(obj: dict, key: str) -> tuple[str, ...]:
    value = obj.get(key)
    if value is None:
        return ()
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise _ShapeError(f"'{key}' must be a list of strings")
    return tuple(value)


def _object(obj: dict, key: str) -> dict:
    value = obj.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise _ShapeError(f"'{key}' must be an object, got {type(value).__name__}")
    return value


def _line(value: Any) -> int | None:
    """Return an integer line number, or None when the value is not numeric.

    bool is excluded explicitly because it is an int subclass in Python.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def _feedback(entries: Any) -> tuple[Feedback, ...]:
    if entries is None:
        return ()
    if not isinstance(entries, list):
        raise _ShapeError("'code_feedback' must be a list")
    result = []
    for entry in entries:
        if not isinstance(entry, dict):
            raise _ShapeError("'code_feedback' entries must be objects")
        result.append(
            Feedback(
                file=_string(entry, "file"),
                line=_line(entry.get("line")),
                suggestion=_string(entry, "suggestion"),
            )
        )
    return tuple(result)


class ReviewParser:
    def parse(self, raw: str) -> Review:
        """Decode ``raw`` into a Review or raise SchemaError."""
        excerpt = raw[:EXCERPT_CHARS]

        # Strip only the outer ```json ... ``` fence that models like to wrap
        # their answer in, not backticks inside string values.
        cleaned = _OPEN_FENCE_RE.sub("", raw.strip())
        cleaned = _CLOSE_FENCE_RE.sub("", cleaned.strip())

        try:
            document = json.loads(cleaned)
        except (json.JSONDecodeError, RecursionError) as e:
            logger.debug("Model output is not valid JSON: %s", e)
            raise SchemaError(f"Failed to unmarshal AI response: {e}", excerpt=excerpt) from e

        if not isinstance(document, dict) or not isinstance(document.get("review"), dict):
            raise SchemaError("AI response must be a JSON object with a 'review' object", excerpt=excerpt)
        data = document["review"]

        try:
            quality = _object(data, "code_quality")
            return Review(
                summary=_string(data, "summary"),
                overall_impression=_string(data, "overall_impression"),
                code_quality=CodeQuality(
                    strengths=_strings(quality, "strengths"),
                    areas_for_improvement=_strings(quality, "areas_for_improvement"),
                ),
                potential_issues=_strings(data, "potential_issues"),
                suggestions=_strings(data, "suggestions"),
                security_concerns=_string(data, "security_concerns"),
                testing=_string(data, "testing"),
                estimated_effort=_string(data, "estimated_effort_to_review"),
                code_feedback=_feedback(data.get("code_feedback")),
            )
        except _ShapeError as e:
            raise SchemaError(f"AI response does not match the review schema: {e}", excerpt=excerpt) from e
