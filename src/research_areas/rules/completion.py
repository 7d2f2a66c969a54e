"""Memoized research completion state."""
from __future__ import annotations

import logging
from typing import Dict, Optional

from .models import Requirement
from .registry import RequirementRegistry

logger = logging.getLogger(__name__)


class RequirementCompletionCache:
    """
    Remembers whether each requirement is complete.

    A miss queries the host once and stores the answer. ``refresh`` rebuilds
    the whole table from the host (session load, periodic tick);
    ``invalidate`` just forgets, so the next query goes back to the host.
    """

    def __init__(self, research, registry: RequirementRegistry):
        self.research = research
        self.registry = registry
        self._completed: Dict[str, bool] = {}
        self.last_refresh_tick: Optional[int] = None

    def is_satisfied(self, requirement: Optional[Requirement]) -> bool:
        if requirement is None:
            return True

        cached = self._completed.get(requirement.def_name)
        if cached is not None:
            return cached

        completed = bool(self.research.is_complete(requirement))
        self._completed[requirement.def_name] = completed
        logger.debug(f"Research {requirement.def_name} complete={completed} (miss)")
        return completed

    def refresh(self, tick: Optional[int] = None) -> None:
        fresh: Dict[str, bool] = {}
        for requirement in self.registry.requirements():
            fresh[requirement.def_name] = bool(self.research.is_complete(requirement))
        self._completed = fresh
        self.last_refresh_tick = tick
        done = sum(1 for value in fresh.values() if value)
        logger.info(f"Completion cache refreshed at tick {tick}: {done}/{len(fresh)} complete")

    def invalidate(self) -> None:
        self._completed = {}
        self.last_refresh_tick = None

    def is_due(self, tick: int, interval: int) -> bool:
        if interval <= 0:
            return False
        return tick % interval == 0

    def __len__(self) -> int:
        return len(self._completed)
