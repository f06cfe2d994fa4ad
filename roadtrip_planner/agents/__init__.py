from .base import PlannerAgent
from .claude_agent import ClaudeAgent
from .openai_agent import OpenAIAgent
from .gemini_agent import GeminiAgent

__all__ = ["PlannerAgent", "ClaudeAgent", "OpenAIAgent", "GeminiAgent"]
