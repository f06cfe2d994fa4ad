"""User-entered trip inputs: destinations and travel preferences."""

from datetime import date
from typing import Literal, Optional

from pydantic import Field, field_validator

from .itinerary import ContractModel

StopsFrequency = Literal["low", "medium", "high"]
ReturnRouteStyle = Literal["retrace", "loop"]

DEFAULT_AMENITY_TYPE = "Scenic & Local Gems"

AMENITY_OPTIONS = {
    "Scenic & Local Gems": "Scenic & Local Gems",
    "Fast Food & Chains": "Fast Food Chains (McDonald's, etc)",
    "Gas Stations & Rest Stops": "Gas Stations & Efficient Rest Stops",
    "Family Friendly": "Family Friendly (Parks, Playgrounds)",
}


class Destination(ContractModel):
    """A place to visit and how many days to stay there."""

    name: str = Field(min_length=1)
    duration_days: int = Field(default=1, ge=1)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v

    def label(self) -> str:
        """Prompt form, e.g. "Portland (2 days stay)"."""
        return f"{self.name} ({self.duration_days} days stay)"


class TripPreferences(ContractModel):
    start_city: str = ""
    max_drive_hours_per_day: float = Field(default=6, ge=2, le=12)
    round_trip: bool = False
    # Only meaningful when round_trip is set
    return_route_style: ReturnRouteStyle = "loop"
    start_date: date = Field(default_factory=date.today)
    stops_frequency: StopsFrequency = "medium"
    amenity_type: str = DEFAULT_AMENITY_TYPE

    def effective_return_route_style(self) -> Optional[ReturnRouteStyle]:
        """The return style, or None for one-way trips."""
        if not self.round_trip:
            return None
        return self.return_route_style
