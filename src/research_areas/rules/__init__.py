"""Classification, requirement resolution and gating."""

from .models import Area, EntityShape, GateResult, Requirement, Zone
from .registry import RequirementRegistry
from .completion import RequirementCompletionCache
from .classifier import EntityClassifier, ZoneLabelIndex, LABEL_RULES, classify_label
from .gate import GateDecision
from .describe import describe_unlocks, tooltip_for

__all__ = [
    "Area",
    "Zone",
    "EntityShape",
    "GateResult",
    "Requirement",
    "RequirementRegistry",
    "RequirementCompletionCache",
    "EntityClassifier",
    "ZoneLabelIndex",
    "LABEL_RULES",
    "classify_label",
    "GateDecision",
    "describe_unlocks",
    "tooltip_for",
]
