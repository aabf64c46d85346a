"""
Pydantic models for sequential thinking records.
"""

from typing import Any, List, Optional
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidatorFunctionWrapHandler,
    computed_field,
    field_validator,
)


class ThoughtData(BaseModel):
    """
    One refinement step.

    Wire names are camelCase (thoughtNumber, nextThoughtNeeded, ...); the
    snake_case field names are accepted as well.
    """

    model_config = ConfigDict(strict=True, populate_by_name=True)

    # Required core fields
    thought: str = Field(..., description="The thought content")
    thought_number: int = Field(
        ..., ge=0, alias="thoughtNumber", description="1-based position in the sequence"
    )
    total_thoughts: int = Field(
        ..., ge=0, alias="totalThoughts", description="Expected number of thoughts"
    )
    next_thought_needed: bool = Field(
        ..., alias="nextThoughtNeeded", description="Whether another thought follows"
    )

    # Optional revision / branch metadata
    is_revision: Optional[bool] = Field(None, alias="isRevision")
    revises_thought: Optional[int] = Field(None, ge=0, alias="revisesThought")
    branch_from_thought: Optional[int] = Field(None, ge=0, alias="branchFromThought")
    branch_id: Optional[str] = Field(None, alias="branchId")
    needs_more_thoughts: Optional[bool] = Field(None, alias="needsMoreThoughts")

    @field_validator(
        "is_revision",
        "revises_thought",
        "branch_from_thought",
        "branch_id",
        "needs_more_thoughts",
        mode="wrap",
    )
    @classmethod
    def drop_mistyped_metadata(
        cls, v: Any, handler: ValidatorFunctionWrapHandler
    ) -> Any:
        """Mistyped optional metadata is treated as absent."""
        try:
            return handler(v)
        except ValidationError:
            return None

    @computed_field
    @property
    def is_branch(self) -> bool:
        """True when the record carries both branch fields."""
        return self.branch_from_thought is not None and self.branch_id is not None


class ThoughtSummary(BaseModel):
    """State of a thinking session after one processed thought."""

    model_config = ConfigDict(populate_by_name=True)

    thought_number: int = Field(..., alias="thoughtNumber")
    total_thoughts: int = Field(..., alias="totalThoughts")
    next_thought_needed: bool = Field(..., alias="nextThoughtNeeded")
    branches: List[str] = Field(default_factory=list)
    thought_history_length: int = Field(..., alias="thoughtHistoryLength")
