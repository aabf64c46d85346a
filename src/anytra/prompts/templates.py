"""
Prompt templates for the enhancement backend.
"""

from typing import Dict, List

from anytra.config import FEW_SHOT_LIMIT
from anytra.models.core_models import EnhancementOptions, Prompt
from anytra.prompts.fewshot import detect_category, select_examples

SYSTEM_PROMPT = """You are an expert prompt engineering assistant. Your ONLY task is to refine and enhance user prompts for Large Language Models. You must return ONLY the enhanced prompt text - no introductions, no explanations, no additional commentary of any kind. Simply output the improved prompt directly.

CRITICAL: Your response must contain ONLY the enhanced prompt. No prefixes like 'Enhanced prompt:' or 'Here is the enhanced version:'. No meta-commentary. No acknowledgments. Just the enhanced prompt text itself.

Guidelines for enhancement:
- Maximize clarity and specificity
- Specify clear goals and constraints
- Resolve ambiguities while staying faithful to original intent
- Structure the prompt for optimal LLM performance
- If a specific language is requested, write the entire enhanced prompt in that language

Remember: Output ONLY the enhanced prompt. Nothing else."""

EXAMPLES_HEADER = "Here are some examples to guide your response:"


def build_instruction_block(options: EnhancementOptions) -> str:
    """
    Render the options that steer the enhancement, one ``Label: value`` line
    each. Returns an empty string when no option is set.
    """
    lines = []
    if options.goal:
        lines.append(f"Goal: {options.goal}")
    if options.style:
        lines.append(f"Style: {options.style}")
    if options.tone:
        lines.append(f"Tone: {options.tone}")
    if options.level is not None:
        lines.append(f"Enhancement level: {options.level} (1-5)")
    if options.audience:
        lines.append(f"Audience: {options.audience}")
    if options.language:
        lines.append(f"Language: {options.language}")
    return "".join(f"{line}\n" for line in lines)


def build_user_message(prompt: Prompt, options: EnhancementOptions) -> str:
    """
    Compose the user message: optional few-shot examples, the instruction
    block and the original prompt.
    """
    instruction = build_instruction_block(options)
    if instruction:
        user = f"{instruction}\n\n---\nOriginal prompt:\n{prompt.text}"
    else:
        user = prompt.text

    examples = select_examples(detect_category(prompt.text), FEW_SHOT_LIMIT)
    if examples:
        examples_text = "\n\n".join(
            f"Example Input: {example.input}\nExample Output: {example.output}"
            for example in examples
        )
        user = f"{EXAMPLES_HEADER}\n\n{examples_text}\n\n{user}"

    return user


def build_chat_messages(
    prompt: Prompt, options: EnhancementOptions
) -> List[Dict[str, str]]:
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": build_user_message(prompt, options)},
    ]
