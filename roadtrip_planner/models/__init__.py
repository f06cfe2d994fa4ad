from .itinerary import (
    ContractModel,
    SegmentType,
    Coordinates,
    StartLocation,
    RouteSegment,
    DayPlan,
    TripItinerary,
)
from .trip import (
    Destination,
    TripPreferences,
    DEFAULT_AMENITY_TYPE,
    AMENITY_OPTIONS,
)

__all__ = [
    "ContractModel",
    "SegmentType",
    "Coordinates",
    "StartLocation",
    "RouteSegment",
    "DayPlan",
    "TripItinerary",
    "Destination",
    "TripPreferences",
    "DEFAULT_AMENITY_TYPE",
    "AMENITY_OPTIONS",
]
