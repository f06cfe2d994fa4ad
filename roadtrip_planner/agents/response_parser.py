"""
Parsing and validation of planning service responses.

The invocation mode picks the strategy; the response text is never
inspected to guess which one applies.
"""

import json
import logging
import re
from typing import Any

from pydantic import ValidationError

from roadtrip_planner.config import InvocationMode
from roadtrip_planner.errors import MalformedOutputError, SchemaViolationError, ServiceError
from roadtrip_planner.models import SegmentType, TripItinerary

logger = logging.getLogger(__name__)

# Top-level fields in the order they are checked
REQUIRED_FIELDS = ["tripName", "startLocation", "totalDays", "totalDistanceEstimateKm", "days"]

_LEADING_FENCE = re.compile(r"^```[A-Za-z0-9_-]*[ \t]*\n?")
_TRAILING_FENCE = re.compile(r"\n?```\s*$")


def strip_code_fences(text: str) -> str:
    """
    Remove a wrapping markdown code fence from a model response.

    Handles:
    - ```json ... ```
    - ``` ... ```
    - Raw JSON (returned unchanged apart from trimming)
    """
    text = text.strip()
    text = _LEADING_FENCE.sub("", text, count=1)
    text = _TRAILING_FENCE.sub("", text, count=1)
    return text.strip()


def extract_json_object(text: str) -> str:
    """Cut the outermost {...} out of text that has prose around it."""
    if text.startswith("{"):
        return text
    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end > start:
        return text[start:end + 1]
    return text


def format_field_path(loc: tuple) -> str:
    """Turn a pydantic error location into "days[0].segments[2].type"."""
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        elif path:
            path += f".{part}"
        else:
            path = str(part)
    return path or "<root>"


def validate_itinerary(data: Any) -> TripItinerary:
    """
    Structurally validate parsed response data.

    Raises:
        SchemaViolationError: Naming the first missing or invalid field
    """
    if not isinstance(data, dict):
        raise SchemaViolationError("<root>", "expected a JSON object")

    for name in REQUIRED_FIELDS:
        if data.get(name) is None:
            raise SchemaViolationError(name, "missing")

    try:
        itinerary = TripItinerary.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        reason = "missing" if first["type"] == "missing" else first["msg"]
        raise SchemaViolationError(format_field_path(first["loc"]), reason) from e

    # Named stops must be placeable on the map
    for i, day in enumerate(itinerary.days):
        for j, segment in enumerate(day.segments):
            if segment.type != SegmentType.DRIVE and segment.location_name and segment.coordinates is None:
                raise SchemaViolationError(f"days[{i}].segments[{j}].coordinates", "missing")

    return itinerary


class ResponseStrategy:
    """Turns raw response text into JSON data for one invocation mode."""

    mode: InvocationMode

    def preprocess(self, raw: str) -> str:
        return raw.strip()

    def unparseable(self, error: json.JSONDecodeError) -> Exception:
        raise NotImplementedError

    def load(self, raw: str) -> Any:
        text = self.preprocess(raw)
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise self.unparseable(e) from e


class StrictSchemaStrategy(ResponseStrategy):
    """The service was constrained to the schema and must return bare JSON."""

    mode = InvocationMode.STRICT_SCHEMA

    def unparseable(self, error: json.JSONDecodeError) -> Exception:
        # Non-JSON here means the service broke its own output guarantee
        return ServiceError(f"Planning service returned invalid JSON in strict schema mode: {error}")


class ToolAugmentedStrategy(ResponseStrategy):
    """Free-form text that may wrap the JSON in fences or prose."""

    mode = InvocationMode.TOOL_AUGMENTED

    def preprocess(self, raw: str) -> str:
        return extract_json_object(strip_code_fences(raw))

    def unparseable(self, error: json.JSONDecodeError) -> Exception:
        return MalformedOutputError(f"Could not parse planning response as JSON: {error}")


STRATEGIES = {
    InvocationMode.STRICT_SCHEMA: StrictSchemaStrategy(),
    InvocationMode.TOOL_AUGMENTED: ToolAugmentedStrategy(),
}


def parse_plan_response(raw: str, mode: InvocationMode) -> TripItinerary:
    """
    Parse and validate a raw planning response.

    Validation is structural only: inconsistent day numbers or drive hours
    are logged and passed through unchanged.

    Args:
        raw: Response text from the planning service
        mode: The invocation mode the request was made in

    Returns:
        The validated TripItinerary

    Raises:
        ServiceError: Strict mode output that is not JSON
        MalformedOutputError: Tool-augmented output that is not JSON
        SchemaViolationError: JSON that does not match the itinerary schema
    """
    strategy = STRATEGIES[InvocationMode(mode)]
    data = strategy.load(raw)
    itinerary = validate_itinerary(data)

    for issue in itinerary.consistency_issues():
        logger.warning("Itinerary '%s': %s", itinerary.trip_name, issue)

    return itinerary
