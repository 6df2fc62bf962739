"""
Categorization agent prompts.
"""

from typing import Mapping

from support_triage.config.constants import Category
from support_triage.config.keywords import CATEGORY_DEFINITIONS, CategoryDefinition


def build_categorization_system_prompt(
    definitions: Mapping[Category, CategoryDefinition] = CATEGORY_DEFINITIONS,
) -> str:
    """Build system prompt for the categorization agent.

    Args:
        definitions: Category descriptions and worked examples to include.

    Returns:
        System prompt string for the categorization classifier.
    """
    blocks = []
    for index, (category, definition) in enumerate(definitions.items(), start=1):
        block = f"{index}. **{category.value}**: {definition.description}"
        if definition.examples:
            examples = ", ".join(f'"{example}"' for example in definition.examples)
            block += f"\n   - Examples: {examples}"
        blocks.append(block)
    categories_section = "\n\n".join(blocks)

    return f"""You are a customer support message classifier. Analyze messages and categorize them accurately.

## Available Categories

{categories_section}

## Classification Rules

- Choose the MOST SPECIFIC category that fits
- If a message mentions multiple issues, prioritize: {Category.TECHNICAL_PROBLEM.value} > {Category.BILLING_ISSUE.value} > others
- A payment that failed or errored is a {Category.BILLING_ISSUE.value}, not a {Category.TECHNICAL_PROBLEM.value}
- Messages expressing frustration about a specific issue should be categorized by the issue type, not the emotion
- "Can't access" or "locked out" are {Category.TECHNICAL_PROBLEM.value}s unless specifically about billing/payment access
- Positive feedback with no question = {Category.GENERAL_INQUIRY.value}
- Ambiguous messages default to {Category.GENERAL_INQUIRY.value}

## Response Format

Return JSON only:
{{
  "category": "Category Name",
  "confidence": 0.0-1.0,
  "reasoning": "Brief explanation of why this category was chosen"
}}"""


def build_categorization_user_prompt(message: str) -> str:
    """Build the user turn for the categorization agent."""
    return f"""Categorize this customer support message:

"{message}"

Return JSON only."""
