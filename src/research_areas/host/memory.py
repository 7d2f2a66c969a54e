"""In-memory host: world snapshot, research book and recording messenger.

Backs the command line and the tests. Snapshots are YAML files shaped like:

    research:
      - def_name: ResearchAreas_Stockpiles
        label: Stockpiles
        completed: false
    current: Colony
    partitions:
      - name: Colony
        default_area: Home
        areas:
          - label: Home
          - label: Animal sleeping
            restricted: [Muffalo]
        zones:
          - label: Stockpile zone 1
            kind: Stockpile
            contents: [Steel x75]
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

import yaml

from ..rules.models import Area, Requirement, Zone
from .interfaces import MessageSeverity

logger = logging.getLogger(__name__)


class InMemoryResearch:
    """Research book keyed by def name."""

    def __init__(self, projects: Optional[Iterable[Requirement]] = None) -> None:
        self._projects: Dict[str, Requirement] = {}
        self._completed: set = set()
        self.query_count = 0
        for project in projects or []:
            self.add(project)

    def add(self, requirement: Requirement, completed: bool = False) -> Requirement:
        self._projects[requirement.def_name] = requirement
        if completed:
            self._completed.add(requirement.def_name)
        return requirement

    def lookup(self, identifier: str) -> Optional[Requirement]:
        return self._projects.get(identifier)

    def is_complete(self, requirement: Requirement) -> bool:
        self.query_count += 1
        return requirement.def_name in self._completed

    def complete(self, def_name: str) -> None:
        self._completed.add(def_name)

    def revoke(self, def_name: str) -> None:
        """Un-research a project (debug tools, ruleset swaps)."""
        self._completed.discard(def_name)


class InMemoryPartition:
    """One map with its areas, zones and pawn area restrictions."""

    def __init__(
        self,
        name: Optional[str],
        areas: Optional[List[Area]] = None,
        zones: Optional[List[Zone]] = None,
        default_area: Optional[Area] = None,
    ) -> None:
        self.name = name
        self.areas: List[Area] = list(areas or [])
        self.zones: List[Zone] = list(zones or [])
        if default_area is None:
            default_area = next((a for a in self.areas if a.label.lower() == "home"), None)
        if default_area is not None and default_area not in self.areas:
            self.areas.insert(0, default_area)
        self.home = default_area
        self.restrictions: Dict[str, List[str]] = {}

    def all_areas(self) -> List[Area]:
        return list(self.areas)

    def default_area(self) -> Optional[Area]:
        return self.home

    def all_zones(self) -> List[Zone]:
        return list(self.zones)

    def restrict(self, actor: str, area: Area) -> None:
        self.restrictions.setdefault(area.entity_id, []).append(actor)

    def actors_restricted_to(self, area: Area) -> List[str]:
        return list(self.restrictions.get(area.entity_id, []))

    def add_area(self, area: Area) -> Area:
        self.areas.append(area)
        return area

    def add_zone(self, zone: Zone) -> Zone:
        self.zones.append(zone)
        return zone

    def remove_area(self, area: Area) -> None:
        self.areas.remove(area)
        self.restrictions.pop(area.entity_id, None)

    def remove_zone(self, zone: Zone) -> None:
        # Contained things are dropped on the ground by the host
        self.zones.remove(zone)
        zone.contents = []


class InMemoryWorld:
    """Loaded game holding one or more partitions."""

    def __init__(self, partitions: Optional[List[InMemoryPartition]] = None, current: Optional[str] = None) -> None:
        self._partitions: List[InMemoryPartition] = list(partitions or [])
        self._current = current

    def add_partition(self, partition: InMemoryPartition) -> InMemoryPartition:
        self._partitions.append(partition)
        return partition

    def partitions(self) -> List[InMemoryPartition]:
        return list(self._partitions)

    def current_partition(self) -> Optional[InMemoryPartition]:
        if not self._partitions:
            return None
        if self._current is not None:
            for partition in self._partitions:
                if partition.name == self._current:
                    return partition
        return self._partitions[0]


class RecordingMessenger:
    """Collects player messages instead of drawing them."""

    def __init__(self) -> None:
        self.messages: List[Tuple[str, MessageSeverity]] = []

    def notify(self, text: str, severity: MessageSeverity) -> None:
        logger.info(f"[{severity.value}] {text}")
        self.messages.append((text, severity))

    def texts(self, severity: Optional[MessageSeverity] = None) -> List[str]:
        return [text for text, sev in self.messages if severity is None or sev == severity]


def _load_partition(entry: Dict[str, Any]) -> InMemoryPartition:
    areas: List[Area] = []
    restricted: List[Tuple[str, Area]] = []
    for raw in entry.get("areas") or []:
        if not isinstance(raw, dict) or not raw.get("label"):
            continue
        area = Area(label=str(raw["label"]).strip(), structural_kind=raw.get("kind"))
        if raw.get("id"):
            area.entity_id = str(raw["id"])
        areas.append(area)
        for actor in raw.get("restricted") or []:
            restricted.append((str(actor), area))

    zones: List[Zone] = []
    for raw in entry.get("zones") or []:
        if not isinstance(raw, dict) or not raw.get("label"):
            continue
        zone = Zone(
            label=str(raw["label"]).strip(),
            structural_kind=raw.get("kind"),
            contents=[str(item) for item in raw.get("contents") or []],
        )
        if raw.get("id"):
            zone.entity_id = str(raw["id"])
        zones.append(zone)

    home_label = str(entry.get("default_area") or "Home").strip().lower()
    home = next((a for a in areas if a.label.lower() == home_label), None)
    if home is None:
        home = Area(label="Home")

    partition = InMemoryPartition(entry.get("name"), areas=areas, zones=zones, default_area=home)
    for actor, area in restricted:
        partition.restrict(actor, area)
    return partition


def load_world_snapshot(path: str) -> Tuple[InMemoryWorld, InMemoryResearch]:
    """Load a YAML world snapshot into an in-memory world and research book."""
    data = yaml.safe_load(Path(path).read_text()) or {}
    if not isinstance(data, dict):
        raise ValueError(f"World snapshot {path} must be a mapping")

    research = InMemoryResearch()
    for entry in data.get("research") or []:
        if not isinstance(entry, dict) or not entry.get("def_name"):
            continue
        requirement = Requirement(def_name=str(entry["def_name"]), label=str(entry.get("label") or ""))
        research.add(requirement, completed=bool(entry.get("completed", False)))

    world = InMemoryWorld(current=data.get("current"))
    for entry in data.get("partitions") or []:
        if isinstance(entry, dict):
            world.add_partition(_load_partition(entry))

    logger.info(
        f"Loaded snapshot {path}: {len(world.partitions())} partition(s), "
        f"{len(data.get('research') or [])} research project(s)"
    )
    return world, research
