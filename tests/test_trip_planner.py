"""Tests for the plan generation workflow and the shared agent behaviour."""

import json

import pytest

from roadtrip_planner.config import InvocationMode
from roadtrip_planner.errors import (
    InvalidInputError,
    MalformedOutputError,
    PlanGenerationError,
    SchemaViolationError,
    ServiceError,
)
from roadtrip_planner.models import SegmentType
from roadtrip_planner.services.trip_planner import (
    GENERIC_ERROR_MESSAGE,
    NO_DESTINATIONS_MESSAGE,
    generate_trip,
    user_message_for,
)


@pytest.fixture
def seattle_store(store, preferences):
    store.add_destination("Portland", 2)
    store.set_preferences(preferences)
    return store


class TestPlanTrip:
    """Tests for PlannerAgent.plan_trip."""

    def test_returns_parsed_itinerary(self, make_agent, response_payload, destinations, preferences):
        agent = make_agent(json.dumps(response_payload))
        itinerary = agent.plan_trip(destinations, preferences)

        assert itinerary.trip_name == "Pacific Northwest Dash"
        assert len(agent.requests) == 1
        assert agent.requests[0].mode == InvocationMode.STRICT_SCHEMA

    def test_no_destinations_skips_service(self, make_agent, preferences):
        agent = make_agent("{}")
        with pytest.raises(InvalidInputError):
            agent.plan_trip([], preferences)
        assert agent.requests == []

    def test_provider_exception_wrapped(self, make_agent, destinations, preferences):
        agent = make_agent(error=ConnectionError("network unreachable"))
        with pytest.raises(ServiceError) as exc_info:
            agent.plan_trip(destinations, preferences)
        assert isinstance(exc_info.value.__cause__, ConnectionError)

    def test_planner_errors_pass_through(self, make_agent, destinations, preferences):
        agent = make_agent(error=ServiceError("quota exceeded"))
        with pytest.raises(ServiceError, match="quota exceeded"):
            agent.plan_trip(destinations, preferences)

    @pytest.mark.parametrize("response", ["", "   \n"])
    def test_empty_response(self, make_agent, destinations, preferences, response):
        agent = make_agent(response)
        with pytest.raises(ServiceError, match="No response from Fake"):
            agent.plan_trip(destinations, preferences)

    def test_tool_mode_accepts_fenced_output(self, make_agent, response_payload, destinations, preferences):
        raw = f"```json\n{json.dumps(response_payload)}\n```"
        agent = make_agent(raw, mode=InvocationMode.TOOL_AUGMENTED)
        itinerary = agent.plan_trip(destinations, preferences)

        assert itinerary.total_days == 3
        assert "Return ONLY the JSON" in agent.requests[0].instructions

    def test_tool_mode_unparseable(self, make_agent, destinations, preferences):
        agent = make_agent("No idea, sorry.", mode=InvocationMode.TOOL_AUGMENTED)
        with pytest.raises(MalformedOutputError):
            agent.plan_trip(destinations, preferences)

    def test_debug_response_saved(self, make_agent, response_payload, destinations, preferences, tmp_path):
        debug_dir = tmp_path / "debug"
        agent = make_agent(json.dumps(response_payload), debug_dir=debug_dir)
        agent.plan_trip(destinations, preferences)

        saved = list(debug_dir.glob("itinerary_fake_*.json"))
        assert len(saved) == 1
        assert json.loads(saved[0].read_text()) == response_payload

    def test_debug_non_json_saved_as_is(self, make_agent, tmp_path):
        agent = make_agent(debug_dir=tmp_path)
        path = agent.save_debug_response("not json", prefix="raw")
        assert path.name.startswith("raw_fake_")
        assert path.read_text() == "not json"


class TestGenerateTrip:
    """Tests for the generate-and-commit workflow."""

    def test_seattle_to_portland(self, make_agent, response_payload, seattle_store):
        """A one-way trip commits a three-day plan starting in Seattle."""
        agent = make_agent(json.dumps(response_payload))
        itinerary = generate_trip(agent, seattle_store)

        assert seattle_store.itinerary == itinerary
        assert itinerary.start_location.name == "Seattle"
        assert itinerary.total_days == 3
        assert all(seg.type == SegmentType.VISIT for seg in itinerary.days[2].segments)

        request = agent.requests[0]
        assert "Plan a road trip starting from: Seattle." in request.instructions
        assert "Portland (2 days stay)" in request.instructions
        assert "Max driving hours per day: 6." in request.instructions
        assert "Round trip: No" in request.instructions

    def test_no_destinations(self, make_agent, store):
        agent = make_agent("{}")
        with pytest.raises(InvalidInputError):
            generate_trip(agent, store)
        assert agent.requests == []

    def test_failure_keeps_previous_plan(self, make_agent, itinerary, seattle_store):
        seattle_store.set_itinerary(itinerary)
        agent = make_agent(error=TimeoutError("timed out"))

        with pytest.raises(ServiceError):
            generate_trip(agent, seattle_store)

        assert seattle_store.itinerary == itinerary

    def test_schema_violation_keeps_previous_plan(self, make_agent, itinerary, response_payload, seattle_store):
        seattle_store.set_itinerary(itinerary)
        del response_payload["startLocation"]
        agent = make_agent(json.dumps(response_payload))

        with pytest.raises(SchemaViolationError):
            generate_trip(agent, seattle_store)

        assert seattle_store.itinerary == itinerary

    def test_failure_without_previous_plan(self, make_agent, seattle_store):
        agent = make_agent("garbage")
        with pytest.raises(PlanGenerationError):
            generate_trip(agent, seattle_store)
        assert seattle_store.itinerary is None


class TestUserMessageFor:
    def test_no_destinations(self):
        assert user_message_for(InvalidInputError("No destinations provided")) == NO_DESTINATIONS_MESSAGE

    @pytest.mark.parametrize(
        "error",
        [
            ServiceError("timeout"),
            MalformedOutputError("bad json"),
            SchemaViolationError("days[0].segments"),
        ],
    )
    def test_generation_failures_share_one_message(self, error):
        assert user_message_for(error) == GENERIC_ERROR_MESSAGE
        assert "check your internet connection" in GENERIC_ERROR_MESSAGE
