"""Host services: contracts, in-memory host and HTTP bridge."""

from .interfaces import HostConfig, HostMessaging, HostResearch, HostWorld, MessageSeverity, Partition
from .memory import (
    InMemoryPartition,
    InMemoryResearch,
    InMemoryWorld,
    RecordingMessenger,
    load_world_snapshot,
)
from .bridge import BridgeClient, BridgePartition

__all__ = [
    "HostConfig",
    "HostMessaging",
    "HostResearch",
    "HostWorld",
    "MessageSeverity",
    "Partition",
    "InMemoryPartition",
    "InMemoryResearch",
    "InMemoryWorld",
    "RecordingMessenger",
    "load_world_snapshot",
    "BridgeClient",
    "BridgePartition",
]
