"""
Research Areas - areas and zones locked behind research.

Provides:
- RequirementRegistry: category key -> research project
- RequirementCompletionCache: memoized research completion
- EntityClassifier: area/zone -> category key
- GateDecision: allow/deny creation
- ReconciliationSweeper: remove violators from a loaded save
- GateEngine: per-session entry points for the host
"""

from .config import OverrideMapping, Settings
from .engine import GateEngine
from .errors import (
    BridgeError,
    DuplicateCategoryError,
    InvalidOverrideError,
    ResearchAreasError,
    UnknownCategoryError,
)
from .rules import (
    Area,
    EntityClassifier,
    EntityShape,
    GateDecision,
    GateResult,
    Requirement,
    RequirementCompletionCache,
    RequirementRegistry,
    Zone,
)
from .sweep import ReconciliationSweeper, SweepReport

__all__ = [
    "OverrideMapping",
    "Settings",
    "GateEngine",
    "BridgeError",
    "DuplicateCategoryError",
    "InvalidOverrideError",
    "ResearchAreasError",
    "UnknownCategoryError",
    "Area",
    "Zone",
    "EntityShape",
    "EntityClassifier",
    "GateDecision",
    "GateResult",
    "Requirement",
    "RequirementCompletionCache",
    "RequirementRegistry",
    "ReconciliationSweeper",
    "SweepReport",
]
