"""
Plan request construction.

Turns the user's destinations and preferences into the instructions and
output contract sent to the planning service.
"""

import json
from dataclasses import dataclass, field

from roadtrip_planner.config import InvocationMode
from roadtrip_planner.errors import InvalidInputError
from roadtrip_planner.models import Destination, TripPreferences, SegmentType


SYSTEM_INSTRUCTION = """You are an expert travel logistics algorithm. Your goal is to plan the perfect road trip.

Inputs provided:
1. A starting city.
2. A list of target destinations to visit, with preferred stay durations (e.g., "Paris (2 days stay)").
3. Constraints: Maximum driving hours per day.
4. Whether to return to the start (round trip).
5. Preferences for stop frequency and amenity types.
6. Return Route Style (if round trip): 'loop' (spoon shape, different path back) vs 'retrace' (same path back).

Your Tasks:
1. SOLVE THE TRAVELING SALESMAN PROBLEM: Keep the starting city fixed as the first stop and reorder the destinations to minimize total driving time.
2. ROUTE SHAPE:
   - If Round Trip is YES and style is 'loop', plan a "spoon" or circular route. The return leg must use different highways, routes and stopovers than the outbound leg. Do NOT backtrack on the same roads.
   - If Round Trip is YES and style is 'retrace', take the fastest path back (reversing the outbound route is fine).
3. SCHEDULE: Break the trip into days.
   - Account for the stay duration at each destination. A city with a 2 day stay occupies 2 full days with minimal driving on those days (mostly VISIT segments).
   - The total driving time per day must NOT exceed the user's limit.
4. INSERT BREAKS following the requested break interval, and tailor the *type* of break to the user's amenity preference (e.g., chains for "Fast Food & Chains", viewpoints for "Scenic").
5. INSERT OVERNIGHTS: End every day with an OVERNIGHT segment stating where to sleep.
6. DAYLIGHT: Prioritize driving during daylight hours.
7. GEOLOCATION: You MUST provide accurate, verifiable latitude and longitude coordinates for the start location and every named stop in the segments."""


USER_PROMPT_TEMPLATE = """Plan a road trip starting from: {start_city}.
Destinations to visit (and required stay duration): {destination_list}.
Max driving hours per day: {max_drive_hours:g}.
Round trip: {round_trip}.
{return_route_line}Start Date: {start_date}.
Stop Frequency: {stops_frequency} ({break_policy}).
Preferred Stop Type: {amenity_type}.

Please provide a structured itinerary with GPS coordinates for mapping."""


INLINE_CONTRACT_TEMPLATE = """

Respond with a single JSON object that follows this JSON Schema exactly:
{schema}

Every segment "type" must be one of {segment_types}.
Return ONLY the JSON, no other text."""


BREAK_POLICIES = {
    "high": "suggest a break every ~2 hours of driving",
    "medium": "suggest a break every ~3 hours of driving",
    "low": "minimize breaks and maximize continuous driving stints",
}

RETURN_ROUTE_STYLES = {
    "loop": "Loop/Spoon (Plan a different return path to see new areas; avoid backtracking on outbound roads and stopovers)",
    "retrace": "Retrace (Fastest/Same path back preferred)",
}


def _coordinates_schema(description: str | None = None) -> dict:
    schema = {
        "type": "object",
        "properties": {
            "latitude": {"type": "number"},
            "longitude": {"type": "number"},
        },
        "required": ["latitude", "longitude"],
    }
    if description:
        schema["description"] = description
    return schema


def build_output_contract() -> dict:
    """JSON Schema of the itinerary the planning service must return."""
    segment = {
        "type": "object",
        "properties": {
            "type": {
                "type": "string",
                "enum": [t.value for t in SegmentType],
                "description": "Type of activity",
            },
            "description": {"type": "string", "description": "Short description of what is happening"},
            "durationHours": {"type": "number", "description": "Estimated duration in hours"},
            "locationName": {"type": "string", "description": "The city or place name relevant to this segment"},
            "coordinates": _coordinates_schema("GPS coordinates of the locationName"),
            "notes": {"type": "string", "description": "Tips, warnings, or scenic route suggestions"},
        },
        "required": ["type", "description", "durationHours"],
    }
    day = {
        "type": "object",
        "properties": {
            "dayNumber": {"type": "integer"},
            "title": {"type": "string", "description": "Summary title for the day"},
            "totalDriveHours": {"type": "number"},
            "segments": {"type": "array", "items": segment},
        },
        "required": ["dayNumber", "title", "totalDriveHours", "segments"],
    }
    return {
        "type": "object",
        "properties": {
            "tripName": {"type": "string", "description": "A catchy name for this road trip"},
            "startLocation": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "coordinates": _coordinates_schema(),
                },
                "required": ["name", "coordinates"],
            },
            "totalDays": {"type": "integer"},
            "totalDistanceEstimateKm": {"type": "number"},
            "days": {"type": "array", "items": day},
        },
        "required": ["tripName", "startLocation", "totalDays", "days", "totalDistanceEstimateKm"],
    }


@dataclass
class PlanRequest:
    """Everything a planning agent needs for one generation call."""

    system_instruction: str
    instructions: str
    output_contract: dict = field(default_factory=build_output_contract)
    mode: InvocationMode = InvocationMode.STRICT_SCHEMA


def build_user_prompt(destinations: list[Destination], preferences: TripPreferences) -> str:
    destination_list = ", ".join(d.label() for d in destinations)

    return_style = preferences.effective_return_route_style()
    return_route_line = ""
    if return_style is not None:
        return_route_line = f"Return Route Style: {RETURN_ROUTE_STYLES[return_style]}.\n"

    return USER_PROMPT_TEMPLATE.format(
        start_city=preferences.start_city,
        destination_list=destination_list,
        max_drive_hours=preferences.max_drive_hours_per_day,
        round_trip="Yes, return to the start" if preferences.round_trip else "No, end at last destination",
        return_route_line=return_route_line,
        start_date=preferences.start_date.isoformat(),
        stops_frequency=preferences.stops_frequency,
        break_policy=BREAK_POLICIES[preferences.stops_frequency],
        amenity_type=preferences.amenity_type,
    )


def build_plan_request(
    destinations: list[Destination],
    preferences: TripPreferences,
    mode: InvocationMode = InvocationMode.STRICT_SCHEMA,
) -> PlanRequest:
    """
    Build the request for one plan generation.

    Args:
        destinations: Places to visit; their order is only a hint
        preferences: Driving and routing preferences
        mode: Strict-schema mode passes the contract as a formal schema;
            tool-augmented mode restates it inline in the instructions

    Returns:
        PlanRequest ready to hand to a PlannerAgent

    Raises:
        InvalidInputError: If there are no destinations
    """
    if not destinations:
        raise InvalidInputError("No destinations provided")

    contract = build_output_contract()
    instructions = build_user_prompt(destinations, preferences)

    if mode == InvocationMode.TOOL_AUGMENTED:
        instructions += INLINE_CONTRACT_TEMPLATE.format(
            schema=json.dumps(contract, indent=2),
            segment_types=", ".join(t.value for t in SegmentType),
        )

    return PlanRequest(
        system_instruction=SYSTEM_INSTRUCTION,
        instructions=instructions,
        output_contract=contract,
        mode=mode,
    )
