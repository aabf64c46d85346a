"""Request handlers: the enhancement orchestrator and the thinking engine."""

from .enhance_prompt import EnhancePrompt
from .thought_processor import SequentialThinking

__all__ = ["EnhancePrompt", "SequentialThinking"]
