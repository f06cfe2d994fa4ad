import json
import logging
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from roadtrip_planner.errors import StorageReadError
from roadtrip_planner.models import Destination, TripItinerary, TripPreferences

logger = logging.getLogger(__name__)

DESTINATIONS_KEY = "roadtrip_destinations"
PREFERENCES_KEY = "roadtrip_preferences"
ITINERARY_KEY = "roadtrip_plan"

SLOT_KEYS = (DESTINATIONS_KEY, PREFERENCES_KEY, ITINERARY_KEY)


def migrate_destinations(data: Any) -> Any:
    """
    Upgrade the legacy destination list shape.

    Older versions stored destinations as plain names; each one becomes a
    one-day stay. Any other shape is returned untouched for validation.
    """
    if isinstance(data, list) and data and all(isinstance(item, str) for item in data):
        return [{"name": item, "durationDays": 1} for item in data]
    return data


class TripStore:
    """Persisted trip state: destinations, preferences and the current plan.

    Each slot is a separate JSON file and is loaded and saved on its own,
    so a corrupt slot only falls back to its own default.
    """

    def __init__(self, storage_dir: Path | str = "trip_data"):
        self.storage_dir = Path(storage_dir)
        self.storage_dir.mkdir(parents=True, exist_ok=True)

        self._destinations: list[Destination] = self._load_destinations()
        self._preferences: TripPreferences = self._load_preferences()
        self._itinerary: Optional[TripItinerary] = self._load_itinerary()

    def _get_slot_path(self, key: str) -> Path:
        return self.storage_dir / f"{key}.json"

    # -- reading ---------------------------------------------------------

    def _read_slot(self, key: str) -> Any:
        """
        Read the raw JSON stored under a key.

        Returns:
            Parsed JSON, or None if nothing is stored

        Raises:
            StorageReadError: If the record exists but cannot be read
        """
        path = self._get_slot_path(key)
        if not path.exists():
            return None
        try:
            with open(path, encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError, RecursionError) as e:
            raise StorageReadError(key, str(e)) from e

    def _load_destinations(self) -> list[Destination]:
        try:
            data = self._read_slot(DESTINATIONS_KEY)
            if data is None:
                return []
            data = migrate_destinations(data)
            if not isinstance(data, list):
                raise StorageReadError(DESTINATIONS_KEY, "expected a list")
            try:
                return [Destination.model_validate(item) for item in data]
            except ValidationError as e:
                raise StorageReadError(DESTINATIONS_KEY, str(e)) from e
        except StorageReadError as e:
            logger.warning("Failed to load destinations from storage: %s", e)
            return []

    def _load_preferences(self) -> TripPreferences:
        try:
            data = self._read_slot(PREFERENCES_KEY)
            if data is None:
                return TripPreferences()
            if not isinstance(data, dict):
                raise StorageReadError(PREFERENCES_KEY, "expected an object")
            # Missing keys take their defaults
            try:
                return TripPreferences.model_validate(data)
            except ValidationError as e:
                raise StorageReadError(PREFERENCES_KEY, str(e)) from e
        except StorageReadError as e:
            logger.warning("Failed to load preferences from storage: %s", e)
            return TripPreferences()

    def _load_itinerary(self) -> Optional[TripItinerary]:
        try:
            data = self._read_slot(ITINERARY_KEY)
            if data is None:
                return None
            try:
                return TripItinerary.model_validate(data)
            except ValidationError as e:
                raise StorageReadError(ITINERARY_KEY, str(e)) from e
        except StorageReadError as e:
            logger.warning("Failed to load trip plan from storage: %s", e)
            return None

    # -- writing ---------------------------------------------------------

    def _write_slot(self, key: str, data: Any) -> bool:
        """Persist one slot. Failures are logged, never raised."""
        path = self._get_slot_path(key)
        try:
            with open(path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, default=str)
        except OSError as e:
            logger.error("Failed to save %s: %s", key, e)
            return False
        return True

    def _remove_slot(self, key: str) -> bool:
        try:
            self._get_slot_path(key).unlink(missing_ok=True)
        except OSError as e:
            logger.error("Failed to remove %s: %s", key, e)
            return False
        return True

    def _save_destinations(self) -> bool:
        return self._write_slot(DESTINATIONS_KEY, [d.to_storage() for d in self._destinations])

    def _save_preferences(self) -> bool:
        return self._write_slot(PREFERENCES_KEY, self._preferences.to_storage())

    def _save_itinerary(self) -> bool:
        if self._itinerary is None:
            return self._remove_slot(ITINERARY_KEY)
        return self._write_slot(ITINERARY_KEY, self._itinerary.to_storage())

    # -- public API ------------------------------------------------------

    @property
    def destinations(self) -> list[Destination]:
        return list(self._destinations)

    @property
    def preferences(self) -> TripPreferences:
        return self._preferences

    @property
    def itinerary(self) -> Optional[TripItinerary]:
        return self._itinerary

    def set_destinations(self, destinations: list[Destination]) -> None:
        self._destinations = list(destinations)
        self._save_destinations()

    def add_destination(self, name: str, duration_days: int = 1) -> Destination:
        """
        Append a destination.

        Raises:
            ValidationError: If the name is blank or the duration is below 1
        """
        destination = Destination(name=name, duration_days=duration_days)
        self.set_destinations([*self._destinations, destination])
        return destination

    def remove_destination(self, index: int) -> None:
        destinations = list(self._destinations)
        del destinations[index]
        self.set_destinations(destinations)

    def update_destination_duration(self, index: int, duration_days: int) -> None:
        destinations = list(self._destinations)
        destinations[index] = Destination(name=destinations[index].name, duration_days=duration_days)
        self.set_destinations(destinations)

    def set_preferences(self, preferences: TripPreferences) -> None:
        self._preferences = preferences
        self._save_preferences()

    def update_preferences(self, **changes) -> TripPreferences:
        """
        Change some preference fields (snake_case names) and persist.

        Raises:
            ValidationError: If the resulting preferences are invalid
        """
        data = self._preferences.model_dump()
        data.update(changes)
        self.set_preferences(TripPreferences.model_validate(data))
        return self._preferences

    def set_itinerary(self, itinerary: Optional[TripItinerary]) -> None:
        """Replace the current plan; None removes the stored record."""
        self._itinerary = itinerary
        self._save_itinerary()

    def reset(self) -> list[str]:
        """
        Clear all three slots back to their defaults.

        The in-memory reset always completes; persistence is attempted for
        every slot even if an earlier one fails.

        Returns:
            Keys of slots whose persisted record could not be updated
        """
        self._destinations = []
        self._preferences = TripPreferences()
        self._itinerary = None

        failed = []
        for key, save in (
            (DESTINATIONS_KEY, self._save_destinations),
            (PREFERENCES_KEY, self._save_preferences),
            (ITINERARY_KEY, self._save_itinerary),
        ):
            if not save():
                failed.append(key)

        if failed:
            logger.error("Reset could not persist: %s", ", ".join(failed))
        return failed
