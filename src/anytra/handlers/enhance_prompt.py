"""
Enhancement orchestrator: one request end-to-end through the provider, the
validation gate and the optional sequential thinking loop.
"""

import logging

from anytra.config import DEFAULT_THOUGHT_COUNT, Config
from anytra.exceptions import ThoughtValidationError
from anytra.handlers.thought_processor import SequentialThinking
from anytra.models.core_models import EnhancedPrompt, EnhancementOptions, Prompt
from anytra.models.protocols import LLMProvider
from anytra.validation import (
    compute_confidence,
    quality_issues,
    validate_enhanced_prompt,
)

logger = logging.getLogger(__name__)


class EnhancePrompt:
    """Executes enhancement requests against a single provider."""

    def __init__(self, provider: LLMProvider, config: Config):
        """
        Initialize the orchestrator.

        Args:
            provider: Backend used for the first pass and every refinement step
            config: Application configuration (sequential thinking default)
        """
        self.provider = provider
        self.config = config

    def sequential_thinking_enabled(self, options: EnhancementOptions) -> bool:
        if options.enable_sequential_thinking is not None:
            return options.enable_sequential_thinking
        return self.config.sequential_thinking_enabled

    async def execute(
        self, prompt: Prompt, options: EnhancementOptions
    ) -> EnhancedPrompt:
        """
        Enhance ``prompt``.

        Only the first provider result goes through the validation gate;
        refinement steps replace the text without re-validating it.

        Raises:
            ProviderError: If a provider call fails
            PromptValidationError: If the first result fails the gate
        """
        enhanced = await self.provider.enhance(prompt, options)

        validate_enhanced_prompt(enhanced.text)
        enhanced = enhanced.model_copy(
            update={"confidence": compute_confidence(enhanced.text)}
        )

        issues = quality_issues(enhanced.text)
        if issues:
            logger.debug(f"Quality issues in enhanced prompt: {issues}")

        if self.sequential_thinking_enabled(options):
            enhanced = await self._refine(enhanced, options)

        return enhanced

    async def _refine(
        self, enhanced: EnhancedPrompt, options: EnhancementOptions
    ) -> EnhancedPrompt:
        session = SequentialThinking()
        total = options.thought_count or DEFAULT_THOUGHT_COUNT
        nested_options = options.without_sequential_thinking()

        for thought_number in range(1, total + 1):
            last = thought_number == total
            record = {
                "thought": enhanced.text,
                "thoughtNumber": thought_number,
                "totalThoughts": total,
                "nextThoughtNeeded": not last,
            }

            try:
                session.process_thought(record)
            except ThoughtValidationError as e:
                logger.warning(
                    f"Sequential thinking stopped at thought {thought_number}/{total}: {e}"
                )
                break

            if not last:
                enhanced = await self.provider.enhance(
                    Prompt(text=enhanced.text), nested_options
                )

        return enhanced
