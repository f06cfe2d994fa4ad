"""Application configuration.

Values come from the environment (optionally via a ``.env`` file) so the
same code runs locally and in a container deployment.
"""

import logging
import os
from enum import Enum
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)


class InvocationMode(str, Enum):
    """How the planning service is asked for an itinerary.

    STRICT_SCHEMA passes the output contract as a formal response schema.
    TOOL_AUGMENTED lets the model consult live map/search data instead, and
    the contract is restated inline in the prompt.
    """

    STRICT_SCHEMA = "strict"
    TOOL_AUGMENTED = "tools"


PROVIDERS = ["Gemini", "Claude", "OpenAI"]

PROVIDER_MODELS = {
    "Gemini": [
        "gemini-2.5-flash",
        "gemini-2.5-pro",
        "gemini-2.5-flash-lite",
    ],
    "Claude": [
        "claude-sonnet-4-5",
        "claude-opus-4-5",
        "claude-haiku-4-5",
    ],
    "OpenAI": [
        "gpt-4.1",
        "gpt-4.1-mini",
        "gpt-4o",
    ],
}

# Low-variance generation; the plan should not change much between runs.
PLANNER_TEMPERATURE = 0.2

# Keyring service name for storing API keys
KEYRING_SERVICE = "roadtrip-planner"

KEYRING_KEYS = {
    "Gemini": "google_api_key",
    "Claude": "anthropic_api_key",
    "OpenAI": "openai_api_key",
    "Unsplash": "unsplash_access_key",
}

ENV_VAR_KEYS = {
    "Gemini": "GOOGLE_API_KEY",
    "Claude": "ANTHROPIC_API_KEY",
    "OpenAI": "OPENAI_API_KEY",
    "Unsplash": "UNSPLASH_ACCESS_KEY",
}

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_invocation_mode() -> InvocationMode:
    """Read the default invocation mode from ROADTRIP_INVOCATION_MODE."""
    value = os.getenv("ROADTRIP_INVOCATION_MODE", InvocationMode.STRICT_SCHEMA.value)
    try:
        return InvocationMode(value.strip().lower())
    except ValueError:
        logger.warning(
            "Unknown ROADTRIP_INVOCATION_MODE %r, falling back to %s",
            value,
            InvocationMode.STRICT_SCHEMA.value,
        )
        return InvocationMode.STRICT_SCHEMA


def get_data_dir() -> Path:
    """Directory holding the persisted trip state."""
    return Path(os.getenv("ROADTRIP_DATA_DIR", "trip_data"))


def get_debug_dir() -> Path:
    """Directory where raw model responses are saved in debug mode."""
    return Path(os.getenv("ROADTRIP_DEBUG_DIR", "debug"))


def configure_logging(debug: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format=LOG_FORMAT,
    )
