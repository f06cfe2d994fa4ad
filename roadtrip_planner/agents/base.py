import json
import logging
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path

from roadtrip_planner.config import InvocationMode, PLANNER_TEMPERATURE, get_debug_dir
from roadtrip_planner.errors import PlanGenerationError, ServiceError
from roadtrip_planner.models import Destination, TripItinerary, TripPreferences
from .prompts import PlanRequest, build_plan_request
from .response_parser import parse_plan_response

logger = logging.getLogger(__name__)


class PlannerAgent(ABC):
    """Abstract base class for road trip planning agents.

    Subclasses only implement the provider call; request construction,
    error wrapping and response parsing are shared.
    """

    def __init__(
        self,
        api_key: str,
        mode: InvocationMode = InvocationMode.STRICT_SCHEMA,
        temperature: float = PLANNER_TEMPERATURE,
        debug_dir: Path | str | None = None,
    ):
        self.api_key = api_key
        self.mode = InvocationMode(mode)
        self.temperature = temperature
        self.debug_dir = Path(debug_dir) if debug_dir else None

    def plan_trip(
        self, destinations: list[Destination], preferences: TripPreferences
    ) -> TripItinerary:
        """
        Generate a complete itinerary in a single planning call.

        Args:
            destinations: Places to visit
            preferences: Driving and routing preferences

        Returns:
            The validated TripItinerary

        Raises:
            InvalidInputError: No destinations; the service is not called
            ServiceError: The provider call failed or returned nothing
            MalformedOutputError: The response could not be parsed
            SchemaViolationError: The response did not match the schema
        """
        request = build_plan_request(destinations, preferences, self.mode)

        logger.info(
            "Requesting %s plan from %s (%s) for %d destinations",
            self.mode.value,
            self.name,
            self.model_id,
            len(destinations),
        )

        try:
            raw_response = self._generate(request)
        except PlanGenerationError:
            raise
        except Exception as e:
            logger.exception("%s planning call failed", self.name)
            raise ServiceError(f"{self.name} planning call failed: {e}") from e

        if not raw_response or not raw_response.strip():
            raise ServiceError(f"No response from {self.name}")

        if self.debug_dir:
            debug_path = self.save_debug_response(raw_response)
            logger.debug("Debug response saved to: %s", debug_path)

        return parse_plan_response(raw_response, self.mode)

    def save_debug_response(self, response: str, prefix: str = "itinerary") -> Path:
        """
        Save raw AI response for debugging.

        Args:
            response: The raw response string from the AI
            prefix: Prefix for the filename

        Returns:
            Path to the saved debug file
        """
        debug_dir = self.debug_dir or get_debug_dir()
        debug_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filepath = debug_dir / f"{prefix}_{self.name.lower()}_{timestamp}.json"

        # Pretty-print if it's valid JSON, otherwise save as-is
        try:
            content = json.dumps(json.loads(response), indent=2)
        except json.JSONDecodeError:
            content = response

        filepath.write_text(content)
        return filepath

    @abstractmethod
    def _generate(self, request: PlanRequest) -> str:
        """
        Send one request to the provider.

        Args:
            request: System instruction, user instructions and contract

        Returns:
            The raw response text
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the display name of this agent."""
        pass

    @property
    @abstractmethod
    def model_id(self) -> str:
        """Return the model ID being used."""
        pass
