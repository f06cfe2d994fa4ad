import logging

from google import genai
from google.genai import types

from roadtrip_planner.config import InvocationMode
from .base import PlannerAgent
from .prompts import PlanRequest

logger = logging.getLogger(__name__)


class GeminiAgent(PlannerAgent):
    """Google Gemini-powered road trip planner."""

    def __init__(self, api_key: str, model: str = "gemini-2.5-flash", **kwargs):
        super().__init__(api_key, **kwargs)
        self.client = genai.Client(api_key=api_key)
        self._model_id = model

    @property
    def name(self) -> str:
        return "Gemini"

    @property
    def model_id(self) -> str:
        return self._model_id

    def _build_config(self, request: PlanRequest) -> types.GenerateContentConfig:
        if request.mode == InvocationMode.TOOL_AUGMENTED:
            # Maps grounding cannot be combined with a response schema
            return types.GenerateContentConfig(
                system_instruction=request.system_instruction,
                temperature=self.temperature,
                tools=[types.Tool(google_maps=types.GoogleMaps())],
            )
        return types.GenerateContentConfig(
            system_instruction=request.system_instruction,
            temperature=self.temperature,
            response_mime_type="application/json",
            response_json_schema=request.output_contract,
        )

    def _generate(self, request: PlanRequest) -> str:
        response = self.client.models.generate_content(
            model=self._model_id,
            contents=request.instructions,
            config=self._build_config(request),
        )
        self._log_grounding(response)
        return response.text or ""

    def _log_grounding(self, response) -> None:
        """Log the map/search sources the answer was grounded on, if any."""
        candidates = getattr(response, "candidates", None) or []
        if not candidates:
            return
        metadata = getattr(candidates[0], "grounding_metadata", None)
        if metadata is None:
            return
        for chunk in getattr(metadata, "grounding_chunks", None) or []:
            source = getattr(chunk, "maps", None) or getattr(chunk, "web", None)
            if source is not None:
                logger.info("Grounding source: %s (%s)", source.title, source.uri)
