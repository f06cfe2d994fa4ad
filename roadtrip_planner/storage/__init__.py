from .trip_store import TripStore, migrate_destinations

__all__ = ["TripStore", "migrate_destinations"]
