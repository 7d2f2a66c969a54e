"""
GateEngine - the entry points a game host calls into.

One engine per loaded session. It owns every cache (requirement registry,
completion cache, classification memo), so nothing computed for one save can
leak into the next: load a new save, build a new engine.

Host lifecycle -> entry point:
  entity about to be created   -> on_entity_create_attempt()
  "make new allowed area"      -> on_new_allowed_area_attempt()
  save loaded                  -> on_session_load()
  game tick                    -> on_periodic_tick()
  settings window closed       -> on_settings_changed()
  mods / research defs changed -> on_ruleset_changed()
"""
from __future__ import annotations

import logging
import threading
from typing import Optional

from .config import Settings
from .constants import ALLOWED
from .errors import InvalidOverrideError
from .host.interfaces import MessageSeverity
from .rules.classifier import EntityClassifier
from .rules.completion import RequirementCompletionCache
from .rules.describe import describe_unlocks, tooltip_for
from .rules.gate import GateDecision
from .rules.models import GateResult, Requirement
from .rules.registry import RequirementRegistry
from .sweep.sweeper import ReconciliationSweeper, SweepReport, failure_messages, summary_messages

logger = logging.getLogger(__name__)

COMPATIBILITY_PROMPT = (
    "Research Areas will check all existing areas and zones in this save. "
    "Areas and zones without their required research will be removed; "
    "items in removed zones are dropped on the ground. Proceed with validation?"
)


class GateEngine:
    """Per-session research gate."""

    def __init__(self, settings: Settings, research, world, messaging=None):
        self.settings = settings
        self.research = research
        self.world = world
        self.messaging = messaging
        self.tick = 0
        self.pending_confirmation = False
        self.last_report: Optional[SweepReport] = None
        self._lock = threading.RLock()

        self.registry = RequirementRegistry(research, settings.research_identifiers)
        self.completion = RequirementCompletionCache(research, self.registry)
        self.classifier = EntityClassifier(self.registry, lambda: self.settings.overrides)
        self.gate = GateDecision(
            self.classifier,
            self.registry,
            self.completion,
            lambda category: self.settings.is_enforced(category),
        )
        self.sweeper = ReconciliationSweeper(
            self.gate, self.classifier, show_warnings=settings.show_removal_warnings
        )

    def _notify(self, text: str, severity: MessageSeverity) -> None:
        if self.messaging is None:
            logger.info(f"[{severity.value}] {text}")
            return
        self.messaging.notify(text, severity)

    # =========================================================================
    # Creation gate
    # =========================================================================

    def on_entity_create_attempt(self, entity, partition=None) -> GateResult:
        with self._lock:
            if partition is None:
                partition = self.world.current_partition()
            result = self.gate.may_create(entity, partition, self.tick)
            if not result.allowed:
                kind = entity.shape.value
                self._notify(f"Cannot create {kind}. {result.reason}.", MessageSeverity.REJECT_INPUT)
                logger.info(f"Blocked {kind} '{entity.label}' ({result.category})")
            return result

    def on_new_allowed_area_attempt(self) -> GateResult:
        """Gate the host's "new allowed area" command before an area exists."""
        with self._lock:
            result = self.gate.check_category(ALLOWED)
            if not result.allowed:
                self._notify(f"Cannot create allowed area. {result.reason}.", MessageSeverity.REJECT_INPUT)
            return result

    def on_entity_destroyed(self, entity) -> None:
        with self._lock:
            self.classifier.forget(entity)

    # =========================================================================
    # Session lifecycle
    # =========================================================================

    def on_session_load(self, tick: int = 0) -> Optional[SweepReport]:
        """Refresh research state, then remove areas the save is no longer allowed."""
        with self._lock:
            self.tick = tick
            self.registry.build()
            self._drop_unknown_overrides()
            self.completion.refresh(tick)

            if not self.settings.remove_invalid_areas_on_load:
                logger.info("Removal on load disabled, skipping sweep")
                return None

            if self.settings.show_compatibility_prompt and not self.settings.compatibility_prompt_shown:
                self.pending_confirmation = True
                self._notify(COMPATIBILITY_PROMPT, MessageSeverity.WARNING)
                return None

            return self._validate()

    def confirm_compatibility(self, proceed: bool, dont_show_again: bool = False) -> Optional[SweepReport]:
        """Answer the load-time prompt; sweeps only when ``proceed`` is true."""
        with self._lock:
            if not self.pending_confirmation:
                return None
            self.pending_confirmation = False
            if dont_show_again:
                self.settings.compatibility_prompt_shown = True
                self.settings.show_compatibility_prompt = False
            if not proceed:
                logger.info("Validation skipped by player")
                return None
            return self._validate()

    def on_periodic_tick(self, tick: int) -> bool:
        """Returns True when the completion cache was refreshed."""
        with self._lock:
            self.tick = tick
            if self.completion.is_due(tick, self.settings.cache_refresh_interval):
                self.completion.refresh(tick)
                return True
            return False

    def on_settings_changed(self) -> None:
        with self._lock:
            self.completion.invalidate()
            self.classifier.invalidate()
            self.sweeper.show_warnings = self.settings.show_removal_warnings
            logger.info("Settings changed, caches cleared")

    def on_ruleset_changed(self) -> Optional[SweepReport]:
        """Re-resolve research and reconcile every partition against it."""
        with self._lock:
            self.registry.build()
            self._drop_unknown_overrides()
            self.classifier.invalidate()
            self.completion.refresh(self.tick)
            if not self.settings.remove_invalid_areas_on_load:
                return None
            return self._validate()

    def _validate(self) -> SweepReport:
        report = self.sweeper.sweep(self.world.partitions(), self.tick)
        for text in summary_messages(report):
            self._notify(text, MessageSeverity.NEUTRAL)
        for text in failure_messages(report):
            self._notify(text, MessageSeverity.WARNING)
        self.last_report = report
        return report

    # =========================================================================
    # Overrides and extensions
    # =========================================================================

    def add_override(self, label: str, category: str) -> bool:
        with self._lock:
            try:
                self.settings.overrides.add(label, category, self.registry.categories())
            except InvalidOverrideError as e:
                self._notify(str(e), MessageSeverity.REJECT_INPUT)
                logger.info(f"Override rejected: {e}")
                return False
            self.classifier.invalidate()
            self._notify(f"Added mapping: {label.strip()} -> {category}", MessageSeverity.POSITIVE)
            return True

    def _drop_unknown_overrides(self) -> None:
        """Remove saved overrides whose category the registry does not know."""
        for label, category in self.settings.overrides.items():
            if category in self.registry:
                continue
            self.settings.overrides.remove(label)
            error = InvalidOverrideError(label, f"unknown area type '{category}'")
            logger.warning(f"Dropping saved override: {error}")
            self._notify(str(error), MessageSeverity.REJECT_INPUT)

    def remove_override(self, label: str) -> bool:
        with self._lock:
            removed = self.settings.overrides.remove(label)
            if removed:
                self.classifier.invalidate()
                logger.info(f"Override '{label}' removed")
            return removed

    def register_category(self, category: str, identifier: str) -> Optional[Requirement]:
        with self._lock:
            requirement = self.registry.register(category, identifier)
            self.classifier.invalidate()
            return requirement

    def register_kind(self, kind: str, category: str) -> None:
        with self._lock:
            self.classifier.register_kind(kind, category)

    # =========================================================================
    # Descriptions
    # =========================================================================

    def tooltip_for(self, category: str) -> Optional[str]:
        if not self.settings.show_tooltips:
            return None
        with self._lock:
            return tooltip_for(self.gate, category)

    def describe_unlocks(self, requirement: Optional[Requirement]) -> Optional[str]:
        with self._lock:
            return describe_unlocks(self.registry, requirement)
