"""
Validation gate and quality scoring for enhanced prompts.

``validate_enhanced_prompt`` is a fail-fast sequence of checks: the first
failing check raises and nothing is accumulated. Lengths are measured in
UTF-8 bytes.
"""

import re
from typing import List

from anytra.config import (
    CONFIDENCE_LENGTH_TARGET,
    CONFIDENCE_WORD_TARGET,
    DENYLIST,
    MAX_PROMPT_BYTES,
    MIN_PROMPT_BYTES,
    MIN_WORD_COUNT,
)
from anytra.exceptions import (
    EmptyPromptError,
    InappropriateContentError,
    TooLongError,
    TooShortError,
    TooSimpleError,
)

_SENTENCE_SPLIT = re.compile(r"[.!?]")


def byte_length(text: str) -> int:
    return len(text.encode("utf-8"))


def word_count(text: str) -> int:
    """Number of whitespace-delimited words."""
    return len(text.split())


def validate_enhanced_prompt(text: str) -> None:
    """
    Check an enhanced prompt against the gate's constraints.

    Raises:
        EmptyPromptError: Text is blank
        TooShortError: Fewer than 10 bytes
        TooLongError: More than 5000 bytes
        TooSimpleError: Fewer than 10 words
        InappropriateContentError: Text contains a denylisted word
    """
    if not text.strip():
        raise EmptyPromptError()

    length = byte_length(text)
    if length < MIN_PROMPT_BYTES:
        raise TooShortError(length=length)
    if length > MAX_PROMPT_BYTES:
        raise TooLongError(length=length)

    if word_count(text) < MIN_WORD_COUNT:
        raise TooSimpleError(word_count=word_count(text))

    lowered = text.lower()
    for word in DENYLIST:
        if word in lowered:
            raise InappropriateContentError(word)


def compute_confidence(text: str) -> float:
    """Average of the capped length ratio and the capped word-count ratio."""
    length_score = min(byte_length(text) / CONFIDENCE_LENGTH_TARGET, 1.0)
    word_score = min(word_count(text) / CONFIDENCE_WORD_TARGET, 1.0)
    return (length_score + word_score) / 2.0


# =============================================================================
# Advisory quality checks (never block a result)
# =============================================================================


def _sentences(text: str) -> List[str]:
    return _SENTENCE_SPLIT.split(text)


def check_grammar_and_clarity(text: str) -> List[str]:
    issues = []

    if "  " in text:
        issues.append("Contains double spaces")

    if any(line.endswith(" ") for line in text.splitlines()):
        issues.append("Some lines end with space")

    sentences = _sentences(text)
    avg_length = sum(len(s) for s in sentences) // max(len(sentences), 1)
    if avg_length > 100:
        issues.append(
            "Average sentence length is too long (>100 chars), may affect clarity"
        )
    if avg_length < 10:
        issues.append(
            "Average sentence length is too short (<10 chars), may be too choppy"
        )

    return issues


def check_consistency(text: str) -> List[str]:
    issues = []
    seen = set()
    for sentence in _sentences(text):
        normalized = sentence.strip().lower()
        if not normalized:
            continue
        if normalized in seen:
            issues.append("Duplicate sentence found")
            break
        seen.add(normalized)
    return issues


def check_formatting(text: str) -> List[str]:
    issues = []
    if any(marker in text for marker in (" ,", " .", " !", " ?")):
        issues.append("Inconsistent spacing around punctuation")
    if any(marker in text for marker in ("..", "!!", "??")):
        issues.append("Missing spaces after punctuation")
    return issues


def quality_issues(text: str) -> List[str]:
    """All advisory issues found in ``text``."""
    return check_grammar_and_clarity(text) + check_consistency(text) + check_formatting(text)
