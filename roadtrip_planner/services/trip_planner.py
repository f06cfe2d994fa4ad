"""Plan generation workflow: inputs from the store, plan back into it."""

import logging

from roadtrip_planner.agents.base import PlannerAgent
from roadtrip_planner.errors import InvalidInputError, PlanGenerationError
from roadtrip_planner.models import TripItinerary
from roadtrip_planner.storage import TripStore

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = (
    "Failed to generate trip plan. Please check your internet connection or try fewer destinations."
)
NO_DESTINATIONS_MESSAGE = "Add at least one destination before creating an itinerary."


def generate_trip(agent: PlannerAgent, store: TripStore) -> TripItinerary:
    """
    Generate a plan for the stored trip inputs and commit it.

    The stored plan is only replaced on full success; on any error it is
    left exactly as it was.

    Raises:
        InvalidInputError: No destinations; the agent is not called
        PlanGenerationError: Any other generation failure
    """
    destinations = store.destinations
    if not destinations:
        raise InvalidInputError("No destinations provided")

    try:
        itinerary = agent.plan_trip(destinations, store.preferences)
    except PlanGenerationError as e:
        logger.error("Trip generation failed: %s", e, exc_info=True)
        raise

    store.set_itinerary(itinerary)
    logger.info("Committed itinerary '%s' (%d days)", itinerary.trip_name, itinerary.total_days)
    return itinerary


def user_message_for(error: Exception) -> str:
    """The banner text shown for a generation error."""
    if isinstance(error, InvalidInputError):
        return NO_DESTINATIONS_MESSAGE
    return GENERIC_ERROR_MESSAGE
