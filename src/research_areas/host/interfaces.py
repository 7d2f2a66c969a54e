"""Services the gate consumes from its game host."""
from __future__ import annotations

from enum import Enum
from typing import Any, List, Optional, Protocol, Sequence

from ..rules.models import Area, Requirement, Zone


class MessageSeverity(Enum):
    """Severity of a player-facing message."""
    REJECT_INPUT = "reject_input"
    NEUTRAL = "neutral"
    POSITIVE = "positive"
    WARNING = "warning"


class HostConfig(Protocol):
    """Key/value option store with documented defaults."""

    def get(self, option_name: str) -> Any:
        ...


class HostResearch(Protocol):
    """Research project lookup and completion state."""

    def lookup(self, identifier: str) -> Optional[Requirement]:
        ...

    def is_complete(self, requirement: Requirement) -> bool:
        ...


class Partition(Protocol):
    """One loaded map and its area/zone managers."""

    name: Optional[str]

    def all_areas(self) -> Sequence[Area]:
        ...

    def default_area(self) -> Optional[Area]:
        ...

    def all_zones(self) -> Sequence[Zone]:
        ...

    def actors_restricted_to(self, area: Area) -> List[str]:
        ...

    def remove_area(self, area: Area) -> None:
        ...

    def remove_zone(self, zone: Zone) -> None:
        ...


class HostWorld(Protocol):
    """The loaded game and its partitions."""

    def current_partition(self) -> Optional[Partition]:
        ...

    def partitions(self) -> Sequence[Partition]:
        ...


class HostMessaging(Protocol):
    """Fire-and-forget player notifications."""

    def notify(self, text: str, severity: MessageSeverity) -> None:
        ...
