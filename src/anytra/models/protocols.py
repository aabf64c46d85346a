"""
Protocol definitions for type safety across the codebase.
"""

from typing import Protocol
from abc import abstractmethod

from anytra.models.core_models import EnhancedPrompt, EnhancementOptions, Prompt


class LLMProvider(Protocol):
    """Capability interface of a completion backend used by the orchestrator."""

    @abstractmethod
    async def enhance(
        self, prompt: Prompt, options: EnhancementOptions
    ) -> EnhancedPrompt:
        """
        Enhance ``prompt`` according to ``options``.

        Raises:
            ProviderError: If the backend cannot produce a usable answer
        """
        ...
