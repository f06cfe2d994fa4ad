from .unsplash import UnsplashService
from .route_map import build_route_map, map_points
from .calendar_export import itinerary_to_ical
from .trip_planner import generate_trip, user_message_for

__all__ = [
    "UnsplashService",
    "build_route_map",
    "map_points",
    "itinerary_to_ical",
    "generate_trip",
    "user_message_for",
]
