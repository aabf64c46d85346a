"""Prompt templates and few-shot examples for the backend."""

from .fewshot import FewShotExample, detect_category, get_examples, select_examples
from .templates import (
    SYSTEM_PROMPT,
    build_chat_messages,
    build_instruction_block,
    build_user_message,
)

__all__ = [
    "FewShotExample",
    "detect_category",
    "get_examples",
    "select_examples",
    "SYSTEM_PROMPT",
    "build_chat_messages",
    "build_instruction_block",
    "build_user_message",
]
