import json
import logging

import anthropic

from roadtrip_planner.config import InvocationMode
from roadtrip_planner.errors import ServiceError
from .base import PlannerAgent
from .prompts import PlanRequest

logger = logging.getLogger(__name__)

ITINERARY_TOOL_NAME = "record_itinerary"

WEB_SEARCH_TOOL = {
    "type": "web_search_20250305",
    "name": "web_search",
    "max_uses": 5,
}


class ClaudeAgent(PlannerAgent):
    """Claude-powered road trip planner.

    Strict mode forces a single tool call whose input schema is the
    itinerary contract, so the tool input is the machine-validated plan.
    """

    def __init__(self, api_key: str, model: str = "claude-sonnet-4-5", **kwargs):
        super().__init__(api_key, **kwargs)
        self.client = anthropic.Anthropic(api_key=api_key)
        self.model = model

    @property
    def name(self) -> str:
        return "Claude"

    @property
    def model_id(self) -> str:
        return self.model

    def _generate(self, request: PlanRequest) -> str:
        if request.mode == InvocationMode.TOOL_AUGMENTED:
            return self._generate_with_search(request)
        return self._generate_structured(request)

    def _generate_structured(self, request: PlanRequest) -> str:
        response = self.client.messages.create(
            model=self.model,
            max_tokens=16000,
            temperature=self.temperature,
            system=request.system_instruction,
            messages=[{"role": "user", "content": request.instructions}],
            tools=[
                {
                    "name": ITINERARY_TOOL_NAME,
                    "description": "Record the planned road trip itinerary.",
                    "input_schema": request.output_contract,
                }
            ],
            tool_choice={"type": "tool", "name": ITINERARY_TOOL_NAME},
        )

        for block in response.content:
            if block.type == "tool_use" and block.name == ITINERARY_TOOL_NAME:
                return json.dumps(block.input)

        raise ServiceError("Claude did not return an itinerary tool call")

    def _generate_with_search(self, request: PlanRequest) -> str:
        response = self.client.messages.create(
            model=self.model,
            max_tokens=16000,
            temperature=self.temperature,
            system=request.system_instruction,
            messages=[{"role": "user", "content": request.instructions}],
            tools=[WEB_SEARCH_TOOL],
        )

        parts = []
        for block in response.content:
            if block.type != "text":
                continue
            parts.append(block.text)
            for citation in getattr(block, "citations", None) or []:
                logger.info("Grounding source: %s (%s)", citation.title, citation.url)

        return "".join(parts)
