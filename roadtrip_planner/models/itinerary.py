"""Itinerary schema shared by the request builder, the parser and the UI.

Attributes are snake_case in Python; the JSON contract with the planning
service (and the persisted form) uses camelCase aliases.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class ContractModel(BaseModel):
    """Base for models exchanged as camelCase JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_storage(self) -> dict:
        """Serialize to the camelCase JSON form, omitting absent optionals."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def to_json(self, indent: int | None = None) -> str:
        return self.model_dump_json(indent=indent, by_alias=True, exclude_none=True)


class SegmentType(str, Enum):
    DRIVE = "DRIVE"
    VISIT = "VISIT"
    OVERNIGHT = "OVERNIGHT"
    BREAK = "BREAK"


class Coordinates(ContractModel):
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class StartLocation(ContractModel):
    name: str
    coordinates: Coordinates


class RouteSegment(ContractModel):
    type: SegmentType
    description: str  # e.g. "Drive from Seattle to Portland"
    duration_hours: float = Field(ge=0)
    location_name: Optional[str] = None
    coordinates: Optional[Coordinates] = None
    notes: Optional[str] = None

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, v):
        """Accept case noise such as "drive" or " Visit "."""
        if isinstance(v, str):
            return v.strip().upper()
        return v

    def is_mappable(self) -> bool:
        """Whether this segment becomes a point on the map.

        Pure transit legs (DRIVE without a named stop) are not plotted.
        """
        if self.coordinates is None:
            return False
        return self.type != SegmentType.DRIVE or bool(self.location_name)


class DayPlan(ContractModel):
    day_number: int = Field(ge=1)
    title: str
    total_drive_hours: float = Field(ge=0)
    segments: list[RouteSegment]

    def drive_hours(self) -> float:
        """Sum of the DRIVE segment durations for this day."""
        return sum(s.duration_hours for s in self.segments if s.type == SegmentType.DRIVE)


class TripItinerary(ContractModel):
    trip_name: str
    start_location: Optional[StartLocation] = None
    total_days: int = Field(ge=1)
    total_distance_estimate_km: float = Field(ge=0)
    days: list[DayPlan]

    def consistency_issues(self, tolerance_hours: float = 1.0) -> list[str]:
        """
        Report semantic problems without correcting them.

        Args:
            tolerance_hours: Allowed gap between a day's totalDriveHours and
                the sum of its DRIVE segments before it is reported

        Returns:
            Human-readable descriptions, empty when the plan is consistent
        """
        issues = []

        numbers = [day.day_number for day in self.days]
        expected = list(range(1, len(self.days) + 1))
        if numbers != expected:
            issues.append(f"Day numbers {numbers} are not contiguous from 1")

        if self.total_days != len(self.days):
            issues.append(
                f"totalDays is {self.total_days} but {len(self.days)} days are planned"
            )

        for day in self.days:
            actual = day.drive_hours()
            if abs(actual - day.total_drive_hours) > tolerance_hours:
                issues.append(
                    f"Day {day.day_number} reports {day.total_drive_hours:g}h driving "
                    f"but its drive segments add up to {actual:g}h"
                )

        return issues
