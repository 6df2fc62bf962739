"""Categorization service module."""

from support_triage.services.categorization.classifier import CategoryClassifier
from support_triage.services.categorization.models import CategoryResult

__all__ = ["CategoryClassifier", "CategoryResult"]
