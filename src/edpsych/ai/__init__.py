"""
AI Services

Provider-agnostic text generation used by the pacing planner.
"""

from .client import AIClient, get_ai_client

__all__ = [
    "AIClient",
    "get_ai_client",
]
