"""
Pydantic models for prompts, thoughts and the JSON-RPC envelope.
"""

from .core_models import EnhancedPrompt, EnhancementOptions, Prompt
from .thought_models import ThoughtData, ThoughtSummary
from .protocols import LLMProvider

__all__ = [
    "Prompt",
    "EnhancementOptions",
    "EnhancedPrompt",
    "ThoughtData",
    "ThoughtSummary",
    "LLMProvider",
]
