"""
Sequential thinking engine: an in-memory record of refinement steps for one
enhancement request, with branch tracking.
"""

import logging
from typing import Any, Dict, List, Mapping

from pydantic import ValidationError

from anytra.exceptions import ThoughtValidationError
from anytra.models.thought_models import ThoughtData, ThoughtSummary

logger = logging.getLogger(__name__)


class SequentialThinking:
    """
    A single thinking session.

    Records are kept in insertion order in ``thought_history``. Records that
    carry both ``branch_from_thought`` and ``branch_id`` are additionally
    appended to ``branches[branch_id]``.
    """

    def __init__(self):
        self.thought_history: List[ThoughtData] = []
        self.branches: Dict[str, List[ThoughtData]] = {}

    def validate_thought_data(self, raw: Any) -> ThoughtData:
        """
        Parse a raw record into ThoughtData.

        Raises:
            ThoughtValidationError: Naming the first missing or mistyped field
        """
        if not isinstance(raw, Mapping):
            raise ThoughtValidationError("input", raw, "must be an object")

        try:
            return ThoughtData.model_validate(dict(raw))
        except ValidationError as e:
            first = e.errors()[0]
            field = str(first["loc"][0]) if first["loc"] else "input"
            raise ThoughtValidationError(field, first.get("input"), first["msg"]) from e

    def format_thought(self, thought_data: ThoughtData) -> str:
        if thought_data.is_revision:
            prefix = "🔄 Revision"
        elif thought_data.branch_from_thought is not None:
            prefix = "🌿 Branch"
        else:
            prefix = "💭 Thought"

        if thought_data.revises_thought is not None:
            context = f" (revising thought {thought_data.revises_thought})"
        elif thought_data.branch_from_thought is not None:
            context = (
                f" (from thought {thought_data.branch_from_thought}, "
                f"ID: {thought_data.branch_id})"
            )
        else:
            context = ""

        header = (
            f"{prefix} {thought_data.thought_number}/"
            f"{thought_data.total_thoughts}{context}"
        )
        return f"{header}\n{thought_data.thought}"

    def process_thought(self, raw: Mapping[str, Any]) -> ThoughtSummary:
        """
        Validate, record and report one thought.

        Args:
            raw: Thought record using wire (camelCase) or field names

        Returns:
            ThoughtSummary describing the session after this thought

        Raises:
            ThoughtValidationError: If the record is malformed
        """
        thought_data = self.validate_thought_data(raw)

        if thought_data.thought_number > thought_data.total_thoughts:
            thought_data.total_thoughts = thought_data.thought_number

        self.thought_history.append(thought_data)
        if thought_data.is_branch:
            self.branches.setdefault(thought_data.branch_id, []).append(thought_data)

        logger.info(self.format_thought(thought_data))

        return ThoughtSummary(
            thought_number=thought_data.thought_number,
            total_thoughts=thought_data.total_thoughts,
            next_thought_needed=thought_data.next_thought_needed,
            branches=list(self.branches),
            thought_history_length=len(self.thought_history),
        )
