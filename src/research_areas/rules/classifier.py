"""Classify areas and zones into research categories."""
from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Tuple

from ..config import OverrideMapping, normalize_label
from ..constants import (
    ALLOWED,
    ANIMAL_ALLOWED,
    ANIMAL_SLEEPING,
    GROWING,
    HOME,
    NO_ROOF,
    NO_ROOF_SPELLINGS,
    STOCKPILE,
    UNCLASSIFIED,
    ZONE_KINDS,
)
from ..errors import UnknownCategoryError
from .models import EntityShape
from .registry import RequirementRegistry

logger = logging.getLogger(__name__)


# Ordered (predicate, category) table over normalized labels; first match wins.
LABEL_RULES: List[Tuple[Callable[[str], bool], str]] = [
    (lambda label: label == "home", HOME),
    (lambda label: "stockpile" in label, STOCKPILE),
    (lambda label: "growing" in label, GROWING),
    (lambda label: "animal" in label and "sleeping" in label, ANIMAL_SLEEPING),
    (lambda label: "animal" in label and "allowed" in label, ANIMAL_ALLOWED),
    (lambda label: any(spelling in label for spelling in NO_ROOF_SPELLINGS), NO_ROOF),
]


def classify_label(label: str) -> Optional[str]:
    """Apply the label heuristics to a normalized label."""
    for matches, category in LABEL_RULES:
        if matches(label):
            return category
    return None


class ZoneLabelIndex:
    """Live zone label -> category, rebuilt only when the zone set changes."""

    def __init__(self) -> None:
        self._by_label: Dict[str, str] = {}
        self._signature: Optional[Tuple] = None
        self._checked_tick: Optional[int] = None

    def lookup(self, label: Optional[str]) -> Optional[str]:
        return self._by_label.get(normalize_label(label))

    def sync(self, zones, kind_category: Callable[[Optional[str]], Optional[str]], tick: Optional[int]) -> bool:
        """Rebuild if the zone set changed. Returns True when rebuilt."""
        if tick is not None and tick == self._checked_tick:
            return False
        self._checked_tick = tick

        signature = tuple((z.entity_id, z.label, z.structural_kind) for z in zones)
        if signature == self._signature:
            return False

        by_label: Dict[str, str] = {}
        for zone in zones:
            category = kind_category(zone.structural_kind)
            key = normalize_label(zone.label)
            if category and key and key not in by_label:
                by_label[key] = category
        self._by_label = by_label
        self._signature = signature
        return True


class EntityClassifier:
    """
    Resolves an entity to a category key.

    Priority: partition home area, user override, structural zone kind,
    same-label live zone, label heuristics, then the Allowed fallback.
    Results are memoized per (partition, shape, entity id).
    """

    def __init__(self, registry: RequirementRegistry, overrides: Callable[[], OverrideMapping]):
        self.registry = registry
        self._overrides = overrides
        self._kinds: Dict[str, str] = dict(ZONE_KINDS)
        self._memo: Dict[Tuple[str, str, str], str] = {}
        self._indexes: Dict[str, ZoneLabelIndex] = {}
        self._overrides_stamp: Optional[Tuple[int, int]] = None

    # -- mod compatibility --------------------------------------------------

    def register_kind(self, kind: str, category: str) -> None:
        """Treat a structural kind (e.g. a modded zone class) as ``category``."""
        if category not in self.registry:
            raise UnknownCategoryError(category)
        previous = self._kinds.get(kind)
        self._kinds[kind] = category
        self.invalidate()
        if previous and previous != category:
            logger.info(f"Structural kind {kind} remapped {previous} -> {category}")

    def kind_category(self, kind: Optional[str]) -> Optional[str]:
        if not kind:
            return None
        return self._kinds.get(kind)

    def is_gateable_kind(self, kind: Optional[str]) -> bool:
        return self.kind_category(kind) is not None

    # -- classification -----------------------------------------------------

    def is_default_area(self, entity, partition) -> bool:
        if partition is None or entity is None or entity.shape is not EntityShape.AREA:
            return False
        default = partition.default_area()
        if default is None:
            return False
        return entity is default or entity.entity_id == default.entity_id

    def classify(self, entity, partition=None, tick: Optional[int] = None) -> str:
        if entity is None:
            return UNCLASSIFIED

        if self.is_default_area(entity, partition):
            return HOME

        self._check_overrides()
        partition_key = self._partition_key(partition)
        index = self._zone_index(partition, partition_key, tick)

        key = (partition_key, entity.shape.value, entity.entity_id)
        cached = self._memo.get(key)
        if cached is not None:
            return cached

        category = self._resolve(entity, index)
        self._memo[key] = category
        logger.debug(f"Classified {entity.shape.value} '{entity.label}' as {category}")
        return category

    def _resolve(self, entity, index: Optional[ZoneLabelIndex]) -> str:
        label = normalize_label(entity.label)

        mapped = self._overrides().get(label)
        if mapped and mapped in self.registry:
            return mapped
        if mapped:
            logger.warning(f"Override '{label}' names unknown category {mapped}, ignoring it")

        kind_category = self.kind_category(entity.structural_kind)
        if kind_category:
            return kind_category

        if entity.shape is EntityShape.AREA and index is not None:
            zone_category = index.lookup(label)
            if zone_category:
                return zone_category

        return classify_label(label) or ALLOWED

    # -- cache upkeep -------------------------------------------------------

    def _partition_key(self, partition) -> str:
        if partition is None:
            return ""
        return getattr(partition, "name", None) or str(id(partition))

    def _zone_index(self, partition, partition_key: str, tick: Optional[int]) -> Optional[ZoneLabelIndex]:
        if partition is None:
            return None
        index = self._indexes.setdefault(partition_key, ZoneLabelIndex())
        if index.sync(partition.all_zones(), self.kind_category, tick):
            dropped = self._drop_partition(partition_key)
            if dropped:
                logger.debug(f"Zone set changed on {partition_key}, dropped {dropped} classifications")
        return index

    def _check_overrides(self) -> None:
        mapping = self._overrides()
        stamp = (id(mapping), mapping.version)
        if stamp != self._overrides_stamp:
            if self._overrides_stamp is not None:
                self._memo.clear()
            self._overrides_stamp = stamp

    def _drop_partition(self, partition_key: str) -> int:
        stale = [key for key in self._memo if key[0] == partition_key]
        for key in stale:
            del self._memo[key]
        return len(stale)

    def forget(self, entity) -> None:
        """Drop memo entries for a destroyed entity."""
        if entity is None:
            return
        stale = [key for key in self._memo if key[1] == entity.shape.value and key[2] == entity.entity_id]
        for key in stale:
            del self._memo[key]

    def invalidate(self) -> None:
        self._memo.clear()
        self._indexes.clear()

    def __len__(self) -> int:
        return len(self._memo)
