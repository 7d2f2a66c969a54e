"""Allow/deny decision for creating an area or zone."""
from __future__ import annotations

import logging
from typing import Callable, Optional

from ..constants import HOME, UNCLASSIFIED
from .classifier import EntityClassifier
from .completion import RequirementCompletionCache
from .models import GateResult
from .registry import RequirementRegistry

logger = logging.getLogger(__name__)


class GateDecision:
    """Combines classification, enforcement flags and research completion.

    Pure apart from the caches it reads: asking twice without a state change
    gives the same answer.
    """

    def __init__(
        self,
        classifier: EntityClassifier,
        registry: RequirementRegistry,
        completion: RequirementCompletionCache,
        is_enforced: Callable[[str], bool],
    ):
        self.classifier = classifier
        self.registry = registry
        self.completion = completion
        self.is_enforced = is_enforced

    def may_create(self, entity, partition=None, tick: Optional[int] = None) -> GateResult:
        if entity is None:
            return GateResult.allow(UNCLASSIFIED)

        category = self.classifier.classify(entity, partition, tick)
        if category == HOME and self.classifier.is_default_area(entity, partition):
            return GateResult.allow(category)

        return self.check_category(category)

    def check_category(self, category: str) -> GateResult:
        if category == UNCLASSIFIED:
            return GateResult.allow(category)

        if not self.is_enforced(category):
            return GateResult.allow(category)

        requirement = self.registry.resolve(category)
        if requirement is None:
            return GateResult.allow(category)

        if self.completion.is_satisfied(requirement):
            return GateResult.allow(category, requirement)

        logger.debug(f"{category} locked behind {requirement.def_name}")
        return GateResult.deny(category, requirement)
