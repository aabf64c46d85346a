"""
Core models for prompt enhancement.
Contains the request-scoped prompt, its enhancement options and the result.
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class Prompt(BaseModel):
    """Raw prompt text supplied by the caller."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(..., description="The prompt to enhance")


class EnhancementOptions(BaseModel):
    """Per-request knobs steering the enhancement."""

    model_config = ConfigDict(frozen=True)

    goal: Optional[str] = Field(
        None, description="Overall purpose or outcome the model should achieve"
    )
    style: Optional[str] = Field(
        None, description="Writing style, e.g. concise, formal, friendly"
    )
    tone: Optional[str] = Field(
        None, description="Tone, e.g. neutral, persuasive, enthusiastic"
    )
    level: Optional[int] = Field(
        None,
        ge=1,
        le=5,
        description="How strongly to enhance (1 = minimal edits, 5 = substantial refactor)",
    )
    audience: Optional[str] = Field(None, description="Target audience")
    language: Optional[str] = Field(
        None, description="Language code for the output, e.g. en, id, es"
    )
    enable_sequential_thinking: Optional[bool] = Field(
        None, description="Run the refinement loop; None falls back to the process default"
    )
    thought_count: Optional[int] = Field(
        None, ge=1, description="Number of refinement steps; None means the default of 3"
    )

    def without_sequential_thinking(self) -> "EnhancementOptions":
        """Copy of these options with the refinement loop forced off."""
        return self.model_copy(update={"enable_sequential_thinking": False})


class EnhancedPrompt(BaseModel):
    """Enhancement result returned by a provider and scored by the orchestrator."""

    text: str = Field(..., description="The enhanced prompt text")
    rationale: Optional[str] = Field(None, description="Why the text looks this way")
    confidence: Optional[float] = Field(
        None, ge=0.0, le=1.0, description="Quality estimate in [0, 1]"
    )
