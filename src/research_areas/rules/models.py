"""Dataclasses for gated entities, requirements and gate results."""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


def _new_id() -> str:
    return uuid.uuid4().hex[:12]


class EntityShape(Enum):
    """Which host collection an entity lives in."""
    AREA = "area"
    ZONE = "zone"


@dataclass(frozen=True)
class Requirement:
    """Handle to a host research project."""
    def_name: str
    label: str = ""

    @property
    def display_name(self) -> str:
        return self.label or self.def_name


@dataclass(eq=False)
class Area:
    """Named tile-membership region (allowed area, home area, roof area...)."""
    label: str
    entity_id: str = field(default_factory=_new_id)
    structural_kind: Optional[str] = None
    shape: EntityShape = field(default=EntityShape.AREA, init=False)


@dataclass(eq=False)
class Zone:
    """Typed region that may hold items or plants."""
    label: str
    structural_kind: Optional[str] = None
    entity_id: str = field(default_factory=_new_id)
    contents: List[str] = field(default_factory=list)
    shape: EntityShape = field(default=EntityShape.ZONE, init=False)

    @property
    def is_occupied(self) -> bool:
        return bool(self.contents)


@dataclass
class GateResult:
    """Outcome of a creation check."""
    allowed: bool
    category: str
    reason: str = ""
    requirement: Optional[Requirement] = None

    @classmethod
    def allow(cls, category: str, requirement: Optional[Requirement] = None) -> "GateResult":
        return cls(allowed=True, category=category, requirement=requirement)

    @classmethod
    def deny(cls, category: str, requirement: Requirement) -> "GateResult":
        return cls(
            allowed=False,
            category=category,
            reason=f"Requires research: {requirement.display_name}",
            requirement=requirement,
        )
