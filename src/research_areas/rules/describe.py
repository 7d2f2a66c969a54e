"""Player-facing text: tooltips and research unlock descriptions."""
from __future__ import annotations

from typing import List, Optional

from ..constants import CATEGORY_LABELS
from .gate import GateDecision
from .models import Requirement
from .registry import RequirementRegistry


def tooltip_for(gate: GateDecision, category: str) -> Optional[str]:
    """Tooltip for a locked category, or None when nothing blocks it."""
    result = gate.check_category(category)
    if result.allowed:
        return None
    return result.reason


def describe_unlocks(registry: RequirementRegistry, requirement: Optional[Requirement]) -> Optional[str]:
    """Text appended to a research description, e.g. "Unlocks: Stockpile zones"."""
    if requirement is None:
        return None
    labels: List[str] = []
    for category in registry.categories_unlocked_by(requirement):
        label = CATEGORY_LABELS.get(category, category)
        if label not in labels:
            labels.append(label)
    if not labels:
        return None
    return f"Unlocks: {', '.join(labels)}"
