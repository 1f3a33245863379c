"""Fixed prompts used when keyword expansion is unavailable."""

from typing import List

from aigrader.visibility_models import Prompt, PromptIntent, PromptType


def fallback_prompts(keyword: str) -> List[Prompt]:
    keyword = keyword.strip()
    return [
        Prompt(text=f"What is {keyword}?", intent=PromptIntent.INFORMATIONAL, type=PromptType.WHAT),
        Prompt(text=f"Best {keyword}", intent=PromptIntent.COMPARISON, type=PromptType.BEST),
        Prompt(text=f"How much does {keyword} cost?", intent=PromptIntent.INFORMATIONAL, type=PromptType.COST),
    ]
