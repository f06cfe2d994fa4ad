import copy
from datetime import date

import pytest

from roadtrip_planner.agents.base import PlannerAgent
from roadtrip_planner.config import InvocationMode
from roadtrip_planner.models import Destination, TripItinerary, TripPreferences
from roadtrip_planner.storage import TripStore


VALID_RESPONSE = {
    "tripName": "Pacific Northwest Dash",
    "startLocation": {
        "name": "Seattle",
        "coordinates": {"latitude": 47.6062, "longitude": -122.3321},
    },
    "totalDays": 3,
    "totalDistanceEstimateKm": 560,
    "days": [
        {
            "dayNumber": 1,
            "title": "Down the I-5 to Portland",
            "totalDriveHours": 3,
            "segments": [
                {
                    "type": "DRIVE",
                    "description": "Drive south on I-5",
                    "durationHours": 1.5,
                    "coordinates": {"latitude": 47.0379, "longitude": -122.9007},
                },
                {
                    "type": "BREAK",
                    "description": "Coffee and stretch",
                    "durationHours": 0.5,
                    "locationName": "Olympia",
                    "coordinates": {"latitude": 47.0379, "longitude": -122.9007},
                },
                {
                    "type": "DRIVE",
                    "description": "Continue to Portland",
                    "durationHours": 1.5,
                    "locationName": "Portland",
                    "coordinates": {"latitude": 45.5152, "longitude": -122.6784},
                },
                {
                    "type": "OVERNIGHT",
                    "description": "Hotel in the Pearl District",
                    "durationHours": 10,
                    "locationName": "Portland",
                    "coordinates": {"latitude": 45.5265, "longitude": -122.6819},
                    "notes": "Book ahead on weekends",
                },
            ],
        },
        {
            "dayNumber": 2,
            "title": "Exploring Portland",
            "totalDriveHours": 0,
            "segments": [
                {
                    "type": "VISIT",
                    "description": "Browse the world's largest independent bookstore",
                    "durationHours": 3,
                    "locationName": "Powell's City of Books",
                    "coordinates": {"latitude": 45.5231, "longitude": -122.6812},
                },
                {
                    "type": "OVERNIGHT",
                    "description": "Same hotel",
                    "durationHours": 10,
                    "locationName": "Portland",
                    "coordinates": {"latitude": 45.5265, "longitude": -122.6819},
                },
            ],
        },
        {
            "dayNumber": 3,
            "title": "Portland farewell",
            "totalDriveHours": 0,
            "segments": [
                {
                    "type": "VISIT",
                    "description": "Rose garden and Japanese garden",
                    "durationHours": 4,
                    "locationName": "Washington Park",
                    "coordinates": {"latitude": 45.5099, "longitude": -122.7161},
                },
            ],
        },
    ],
}


class FakeAgent(PlannerAgent):
    """Planner agent that returns a canned response instead of calling a provider."""

    def __init__(self, response: str = "", error: Exception | None = None, **kwargs):
        super().__init__("test-key", **kwargs)
        self.response = response
        self.error = error
        self.requests = []

    @property
    def name(self) -> str:
        return "Fake"

    @property
    def model_id(self) -> str:
        return "fake-model"

    def _generate(self, request):
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def response_payload():
    """A well-formed planning response as a dict (safe to mutate)."""
    return copy.deepcopy(VALID_RESPONSE)


@pytest.fixture
def itinerary(response_payload):
    return TripItinerary.model_validate(response_payload)


@pytest.fixture
def destinations():
    return [Destination(name="Portland", duration_days=2)]


@pytest.fixture
def preferences():
    return TripPreferences(
        start_city="Seattle",
        max_drive_hours_per_day=6,
        round_trip=False,
        start_date=date(2026, 6, 1),
    )


@pytest.fixture
def store(tmp_path):
    return TripStore(tmp_path / "trip_data")


@pytest.fixture
def make_agent():
    def _make(response: str = "", error: Exception | None = None, mode=InvocationMode.STRICT_SCHEMA, **kwargs):
        return FakeAgent(response=response, error=error, mode=mode, **kwargs)

    return _make
