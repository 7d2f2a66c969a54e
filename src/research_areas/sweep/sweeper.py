"""
Reconciliation sweep: remove areas and zones the current research no longer allows.

Runs on session load (and whenever the ruleset changes). Each partition is
checked in the host's enumeration order:

  1. every area except the partition's home area
  2. every zone whose structural kind is gated

Violators are collected first, then removed one by one. A violator that is in
use (pawns restricted to the area, items/plants in the zone) is still removed;
being in use only raises the log level. A failing removal is logged and
recorded, and the sweep moves on.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..constants import UNKNOWN_PARTITION
from ..config import normalize_label
from ..rules.classifier import EntityClassifier
from ..rules.gate import GateDecision
from ..rules.models import Area, EntityShape, GateResult

logger = logging.getLogger(__name__)


@dataclass
class RemovalFailure:
    """A removal the host refused."""
    partition: str
    label: str
    error: str


@dataclass
class SweepReport:
    """Labels removed per partition display name."""
    removed: Dict[str, List[str]] = field(default_factory=dict)
    in_use: List[str] = field(default_factory=list)
    failures: List[RemovalFailure] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.removed

    @property
    def total_removed(self) -> int:
        return sum(len(labels) for labels in self.removed.values())


@dataclass
class Violation:
    """An entity the gate rejects, with the decision that rejected it."""
    entity: object
    result: GateResult


def partition_name(partition) -> str:
    return getattr(partition, "name", None) or UNKNOWN_PARTITION


class ReconciliationSweeper:
    """Finds and removes entities that violate the current research state."""

    def __init__(self, gate: GateDecision, classifier: EntityClassifier, show_warnings: bool = True):
        self.gate = gate
        self.classifier = classifier
        self.show_warnings = show_warnings

    def find_violations(self, partition, tick: Optional[int] = None) -> List[Violation]:
        """Gate every area and gated zone on a partition without removing anything."""
        violations: List[Violation] = []
        home = partition.default_area()

        for area in list(partition.all_areas()):
            if home is not None and (area is home or area.entity_id == home.entity_id):
                continue
            result = self.gate.may_create(area, partition, tick)
            if not result.allowed:
                violations.append(Violation(area, result))

        for zone in list(partition.all_zones()):
            if not self.classifier.is_gateable_kind(zone.structural_kind):
                continue
            result = self.gate.may_create(zone, partition, tick)
            if not result.allowed:
                violations.append(Violation(zone, result))

        return violations

    def sweep(self, partitions, tick: Optional[int] = None) -> SweepReport:
        report = SweepReport()
        for partition in partitions:
            if partition is None:
                continue
            name = partition_name(partition)
            removed = self._sweep_partition(partition, name, report, tick)
            if removed:
                report.removed.setdefault(name, []).extend(removed)

        logger.info(
            f"Sweep finished: {report.total_removed} removed across {len(report.removed)} partition(s), "
            f"{len(report.failures)} failure(s)"
        )
        return report

    def _sweep_partition(self, partition, name: str, report: SweepReport, tick: Optional[int]) -> List[str]:
        removed: List[str] = []
        for violation in self.find_violations(partition, tick):
            entity = violation.entity
            kind = entity.shape.value

            if self._is_in_use(partition, entity):
                report.in_use.append(entity.label)
                if self.show_warnings:
                    logger.warning(f"Removing {kind} '{entity.label}' on {name} that may be in use")
            else:
                logger.info(f"Removing {kind} '{entity.label}' on {name}: {violation.result.reason}")

            try:
                if entity.shape is EntityShape.AREA:
                    partition.remove_area(entity)
                else:
                    partition.remove_zone(entity)
            except Exception as e:
                logger.error(f"Failed to remove {kind} '{entity.label}' on {name}: {e}")
                report.failures.append(RemovalFailure(name, entity.label, str(e)))
                continue

            self.classifier.forget(entity)
            removed.append(entity.label)
        return removed

    def _is_in_use(self, partition, entity) -> bool:
        if entity.shape is EntityShape.ZONE:
            return bool(entity.contents)
        return self._area_in_use(partition, entity)

    def _area_in_use(self, partition, area: Area) -> bool:
        if partition.actors_restricted_to(area):
            return True
        label = normalize_label(area.label)
        for zone in partition.all_zones():
            if normalize_label(zone.label) == label and zone.contents:
                return True
        return False


def summary_messages(report: SweepReport) -> List[str]:
    """One player message per partition that lost areas or zones."""
    messages: List[str] = []
    for name, labels in report.removed.items():
        if labels:
            messages.append(
                f"Removed {len(labels)} area(s) from {name} due to missing research: {', '.join(labels)}"
            )
    return messages


def failure_messages(report: SweepReport) -> List[str]:
    return [
        f"Could not remove '{failure.label}' from {failure.partition}: {failure.error}"
        for failure in report.failures
    ]
