import copy
import logging

from openai import OpenAI

from roadtrip_planner.config import InvocationMode
from .base import PlannerAgent
from .prompts import PlanRequest

logger = logging.getLogger(__name__)


def to_strict_schema(schema: dict) -> dict:
    """
    Adapt a JSON Schema for OpenAI structured outputs with strict=True.

    Strict mode requires every property to be listed as required and no
    additional properties, so optional properties become nullable instead.
    The input schema is not modified.
    """
    schema = copy.deepcopy(schema)
    _make_strict(schema)
    return schema


def _make_strict(node: dict) -> None:
    if node.get("type") == "array":
        _make_strict(node["items"])
        return
    if node.get("type") != "object":
        return

    properties = node.get("properties", {})
    required = set(node.get("required", []))
    for name, prop in properties.items():
        _make_strict(prop)
        if name not in required:
            properties[name] = _nullable(prop)

    node["required"] = list(properties)
    node["additionalProperties"] = False


def _nullable(prop: dict) -> dict:
    if prop.get("type") == "object":
        return {"anyOf": [prop, {"type": "null"}]}
    return {**prop, "type": [prop["type"], "null"]}


class OpenAIAgent(PlannerAgent):
    """OpenAI-powered road trip planner."""

    def __init__(self, api_key: str, model: str = "gpt-4.1", **kwargs):
        super().__init__(api_key, **kwargs)
        self.client = OpenAI(api_key=api_key)
        self.model = model

    @property
    def name(self) -> str:
        return "OpenAI"

    @property
    def model_id(self) -> str:
        return self.model

    def _generate(self, request: PlanRequest) -> str:
        if request.mode == InvocationMode.TOOL_AUGMENTED:
            return self._generate_with_search(request)
        return self._generate_structured(request)

    def _generate_structured(self, request: PlanRequest) -> str:
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": request.system_instruction},
                {"role": "user", "content": request.instructions},
            ],
            temperature=self.temperature,
            response_format={
                "type": "json_schema",
                "json_schema": {
                    "name": "trip_itinerary",
                    "schema": to_strict_schema(request.output_contract),
                    "strict": True,
                },
            },
        )
        return response.choices[0].message.content or ""

    def _generate_with_search(self, request: PlanRequest) -> str:
        response = self.client.responses.create(
            model=self.model,
            instructions=request.system_instruction,
            input=request.instructions,
            temperature=self.temperature,
            tools=[{"type": "web_search"}],
        )
        return response.output_text or ""
