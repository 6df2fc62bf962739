"""Dataset loader for labelled support messages."""

import csv
import logging
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass
class LabelledMessage:
    """A single evaluation message with its expected triage."""

    id: int
    message: str
    category: str
    urgency: str
    escalate: str = ""

    @property
    def expected_escalate(self) -> bool | None:
        """Parse the escalate column; blank means unlabelled."""
        value = self.escalate.strip().lower()
        if not value:
            return None
        return value in {"true", "yes", "1"}


def load_messages(path: Path) -> list[LabelledMessage]:
    """Load labelled messages from CSV file."""
    if not path.exists():
        raise FileNotFoundError(f"Dataset not found: {path}")

    messages = []

    with open(path, encoding="utf-8-sig") as f:
        reader = csv.DictReader(f)

        for idx, row in enumerate(reader):
            item = LabelledMessage(
                id=idx,
                message=(row.get("message") or "").strip(),
                category=(row.get("category") or "").strip(),
                urgency=(row.get("urgency") or "").strip(),
                escalate=(row.get("escalate") or "").strip(),
            )

            if item.message:
                messages.append(item)

    logger.info(f"Loaded {len(messages)} messages from {path}")
    return messages


def sample_messages(messages: list[LabelledMessage], n: int = 10) -> list[LabelledMessage]:
    """Sample n messages stratified by expected category."""
    if n >= len(messages):
        return messages

    groups: dict[str, list[LabelledMessage]] = {}
    for m in messages:
        groups.setdefault(m.category, []).append(m)

    samples_per_group = max(1, n // len(groups))
    sampled: list[LabelledMessage] = []

    for group_messages in groups.values():
        sampled.extend(group_messages[:samples_per_group])

    return sampled[:n]
