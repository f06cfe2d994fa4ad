"""Exceptions raised while planning trips and loading saved state."""


class PlannerError(Exception):
    """Base class for all road trip planner errors."""


class PlanGenerationError(PlannerError):
    """Any failure on the plan generation path.

    The UI collapses every subclass into one generic banner; the detail
    only goes to the log.
    """


class InvalidInputError(PlanGenerationError):
    """The trip inputs cannot produce a plan (e.g. no destinations)."""


class ServiceError(PlanGenerationError):
    """The planning service call itself failed or returned nothing usable."""


class MalformedOutputError(PlanGenerationError):
    """The service response could not be parsed as JSON."""


class SchemaViolationError(PlanGenerationError):
    """The response parsed but does not match the itinerary schema."""

    def __init__(self, field_path: str, reason: str = "missing or invalid"):
        self.field_path = field_path
        self.reason = reason
        super().__init__(f"Invalid itinerary field '{field_path}': {reason}")


class StorageReadError(PlannerError):
    """A persisted slot exists but cannot be read back."""

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"Could not read stored '{key}': {reason}")
