"""Categorization service models."""

from dataclasses import dataclass

from support_triage.config.constants import Category, ResultSource


@dataclass(frozen=True)
class CategoryResult:
    """Result from message categorization."""

    category: Category
    reasoning: str
    confidence: float  # 0.0 - 1.0
    source: ResultSource = ResultSource.AI
