"""
Static few-shot examples and the keyword heuristic that picks a category.
"""

from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class FewShotExample:
    input: str
    output: str
    category: str
    quality_score: float


_EXAMPLES = (
    FewShotExample(
        input="Write a function to calculate factorial",
        output=(
            "```rust\n"
            "fn factorial(n: u32) -> u32 {\n"
            "    if n == 0 {\n"
            "        1\n"
            "    } else {\n"
            "        n * factorial(n - 1)\n"
            "    }\n"
            "}\n"
            "```"
        ),
        category="code",
        quality_score=0.9,
    ),
    FewShotExample(
        input="Explain what a loop is in programming",
        output=(
            "A loop is a control structure that allows code to be executed "
            "repeatedly based on a condition. There are different types of loops "
            "like for loops, while loops, and do-while loops."
        ),
        category="explanation",
        quality_score=0.8,
    ),
    FewShotExample(
        input="Write a simple hello world program",
        output="```python\nprint('Hello, World!')\n```",
        category="code",
        quality_score=0.95,
    ),
    FewShotExample(
        input="What is machine learning?",
        output=(
            "Machine learning is a subset of artificial intelligence that enables "
            "computers to learn and make decisions from data without being "
            "explicitly programmed for every scenario."
        ),
        category="definition",
        quality_score=0.85,
    ),
)

# Checked in order; the first category with a matching keyword wins.
CATEGORY_KEYWORDS = (
    ("code", ("code", "function", "program")),
    ("explanation", ("explain", "what is")),
    ("definition", ("define", "definition")),
)


def get_examples() -> List[FewShotExample]:
    return list(_EXAMPLES)


def detect_category(text: str) -> str:
    """Classify a prompt as code, explanation, definition or general."""
    lowered = text.lower()
    for category, keywords in CATEGORY_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return category
    return "general"


def select_examples(category: str, limit: int) -> List[FewShotExample]:
    """Up to ``limit`` examples of ``category``, best quality first."""
    matching = [example for example in _EXAMPLES if example.category == category]
    matching.sort(key=lambda example: example.quality_score, reverse=True)
    return matching[:limit]
