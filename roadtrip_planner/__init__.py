"""Road trip planner: collects destinations, asks an LLM for a route, renders it."""

__version__ = "0.1.0"
