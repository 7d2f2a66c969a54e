"""
Bridge client - talks to the host-side bridge mod over HTTP.

The bridge mod exposes research and map data as JSON, wrapped in an envelope:

    {"success": true, "data": {...}}
    {"success": false, "error": "..."}

Endpoints:
    GET    /research/{def_name}            -> {"def_name", "label", "completed"}
    GET    /partitions                     -> [partition, ...]
    GET    /partitions/current             -> partition
    DELETE /partitions/{name}/areas/{id}
    DELETE /partitions/{name}/zones/{id}
    POST   /messages                       {"text", "severity"}

Reads degrade to None/empty with a warning, like any flaky game connection.
Removals raise BridgeError so a sweep can record which ones failed.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from ..constants import DEFAULT_BRIDGE_URL
from ..errors import BridgeError
from ..rules.models import Area, Requirement, Zone
from .interfaces import MessageSeverity

logger = logging.getLogger(__name__)


class BridgePartition:
    """Partition snapshot fetched from the bridge; removals go back through it."""

    def __init__(self, client: "BridgeClient", data: Dict[str, Any]):
        self.client = client
        self.name: Optional[str] = data.get("name")
        self._areas: List[Area] = []
        self._zones: List[Zone] = []
        self._restrictions: Dict[str, List[str]] = {}
        self._default: Optional[Area] = None

        default_id = data.get("default_area_id")
        for raw in data.get("areas") or []:
            area = Area(label=raw.get("label", ""), entity_id=str(raw.get("id")), structural_kind=raw.get("kind"))
            self._areas.append(area)
            self._restrictions[area.entity_id] = list(raw.get("restricted") or [])
            if default_id is not None and area.entity_id == str(default_id):
                self._default = area

        for raw in data.get("zones") or []:
            self._zones.append(
                Zone(
                    label=raw.get("label", ""),
                    structural_kind=raw.get("kind"),
                    entity_id=str(raw.get("id")),
                    contents=list(raw.get("contents") or []),
                )
            )

    def all_areas(self) -> List[Area]:
        return list(self._areas)

    def default_area(self) -> Optional[Area]:
        return self._default

    def all_zones(self) -> List[Zone]:
        return list(self._zones)

    def actors_restricted_to(self, area: Area) -> List[str]:
        return list(self._restrictions.get(area.entity_id, []))

    def remove_area(self, area: Area) -> None:
        self.client.remove(self.name, "areas", area.entity_id)
        self._areas = [a for a in self._areas if a.entity_id != area.entity_id]
        self._restrictions.pop(area.entity_id, None)

    def remove_zone(self, zone: Zone) -> None:
        self.client.remove(self.name, "zones", zone.entity_id)
        self._zones = [z for z in self._zones if z.entity_id != zone.entity_id]


class BridgeClient:
    """
    Host research, world and messaging over the bridge mod's HTTP API.

    Implements the HostResearch, HostWorld and HostMessaging contracts.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BRIDGE_URL,
        timeout: float = 5.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.client = httpx.Client(base_url=self.base_url, timeout=timeout, transport=transport)

    def close(self) -> None:
        self.client.close()

    def _get(self, endpoint: str) -> Optional[Any]:
        """GET request; None on any failure."""
        try:
            resp = self.client.get(endpoint)
            if resp.status_code == 200:
                result = resp.json()
                if result.get("success"):
                    return result.get("data")
                logger.warning(f"Bridge {endpoint} failed: {result.get('error')}")
            elif resp.status_code != 404:
                logger.warning(f"Bridge {endpoint} HTTP {resp.status_code}")
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Bridge {endpoint} error: {e}")
        return None

    def _send(self, method: str, endpoint: str, payload: Optional[Dict[str, Any]] = None) -> Any:
        try:
            resp = self.client.request(method, endpoint, json=payload)
            resp.raise_for_status()
            result = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            raise BridgeError(endpoint, str(e)) from e
        if not result.get("success"):
            raise BridgeError(endpoint, result.get("error") or "unknown error")
        return result.get("data")

    # ============================================
    # HostResearch
    # ============================================

    def lookup(self, identifier: str) -> Optional[Requirement]:
        data = self._get(f"/research/{identifier}")
        if not data:
            return None
        return Requirement(def_name=data.get("def_name", identifier), label=data.get("label", ""))

    def is_complete(self, requirement: Requirement) -> bool:
        data = self._get(f"/research/{requirement.def_name}")
        if not data:
            return False
        return bool(data.get("completed", False))

    # ============================================
    # HostWorld
    # ============================================

    def partitions(self) -> List[BridgePartition]:
        data = self._get("/partitions") or []
        return [BridgePartition(self, entry) for entry in data if isinstance(entry, dict)]

    def current_partition(self) -> Optional[BridgePartition]:
        data = self._get("/partitions/current")
        if not isinstance(data, dict):
            return None
        return BridgePartition(self, data)

    def remove(self, partition: Optional[str], collection: str, entity_id: str) -> None:
        self._send("DELETE", f"/partitions/{partition}/{collection}/{entity_id}")

    # ============================================
    # HostMessaging
    # ============================================

    def notify(self, text: str, severity: MessageSeverity) -> None:
        try:
            self._send("POST", "/messages", {"text": text, "severity": severity.value})
        except BridgeError as e:
            logger.warning(f"Message not delivered: {e}")
