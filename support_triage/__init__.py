"""Support message triage: categorization, urgency scoring and action recommendation."""

__version__ = "0.1.0"
