"""Category key -> research requirement mapping."""
from __future__ import annotations

import logging
from typing import Dict, List, Optional

from ..constants import DEFAULT_REQUIREMENT_IDENTIFIERS
from ..errors import DuplicateCategoryError
from .models import Requirement

logger = logging.getLogger(__name__)


class RequirementRegistry:
    """
    Resolves category keys to the research project that unlocks them.

    Populated once from host research data. Identifiers the host does not know
    resolve to None, which turns gating off for that category rather than
    failing. Extension categories can be registered later but existing keys
    are never overwritten.
    """

    def __init__(self, research, identifiers: Optional[Dict[str, str]] = None):
        self.research = research
        self._identifiers: Dict[str, str] = dict(identifiers or DEFAULT_REQUIREMENT_IDENTIFIERS)
        self._requirements: Dict[str, Optional[Requirement]] = {}
        self._built = False

    def build(self) -> None:
        self._requirements = {}
        for category, identifier in self._identifiers.items():
            self._requirements[category] = self._lookup(category, identifier)
        self._built = True
        logger.info(
            f"RequirementRegistry: {len(self._requirements)} categories, "
            f"{len(self.missing())} without research"
        )

    def _lookup(self, category: str, identifier: str) -> Optional[Requirement]:
        requirement = self.research.lookup(identifier)
        if requirement is None:
            logger.warning(f"No research '{identifier}' found for {category}, gating disabled")
        return requirement

    def _ensure_built(self) -> None:
        if not self._built:
            self.build()

    def resolve(self, category: str) -> Optional[Requirement]:
        self._ensure_built()
        return self._requirements.get(category)

    def register(self, category: str, identifier: str) -> Optional[Requirement]:
        """Add an extension category (e.g. from another mod)."""
        self._ensure_built()
        if category in self._requirements:
            raise DuplicateCategoryError(category)
        self._identifiers[category] = identifier
        requirement = self._lookup(category, identifier)
        self._requirements[category] = requirement
        logger.info(f"Registered category {category} -> {identifier}")
        return requirement

    def categories(self) -> List[str]:
        self._ensure_built()
        return list(self._requirements)

    def __contains__(self, category: object) -> bool:
        self._ensure_built()
        return category in self._requirements

    def requirements(self) -> List[Requirement]:
        """Distinct resolved requirements in category order."""
        self._ensure_built()
        seen: Dict[str, Requirement] = {}
        for requirement in self._requirements.values():
            if requirement is not None and requirement.def_name not in seen:
                seen[requirement.def_name] = requirement
        return list(seen.values())

    def missing(self) -> List[str]:
        self._ensure_built()
        return [category for category, req in self._requirements.items() if req is None]

    def categories_unlocked_by(self, requirement: Requirement) -> List[str]:
        self._ensure_built()
        return [
            category
            for category, req in self._requirements.items()
            if req is not None and req.def_name == requirement.def_name
        ]
