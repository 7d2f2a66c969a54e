"""Settings loaded from settings.yaml, and the user's area-name overrides."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

import yaml

from .constants import (
    CACHE_REFRESH_INTERVAL_TICKS,
    CATEGORY_KEYS,
    DEFAULT_BRIDGE_URL,
    DEFAULT_REQUIREMENT_IDENTIFIERS,
)
from .errors import InvalidOverrideError

logger = logging.getLogger(__name__)


def normalize_label(label: Optional[str]) -> str:
    return (label or "").strip().lower()


class OverrideMapping:
    """User mapping from area label to category key.

    Labels are stored normalized (trimmed, lower-case). Every mutation bumps
    ``version`` so cached classifications can tell they are stale.
    """

    def __init__(self, entries: Any = None) -> None:
        self._entries: Dict[str, str] = {}
        self.version = 0
        for label, category in _pairs(entries):
            try:
                self.add(str(label), str(category))
            except InvalidOverrideError as e:
                logger.warning(f"Dropping override from settings: {e}")
        self.version = 0

    def get(self, label: Optional[str]) -> Optional[str]:
        return self._entries.get(normalize_label(label))

    def add(self, label: str, category: str, known_categories: Optional[Iterable[str]] = None) -> str:
        key = normalize_label(label)
        if not key:
            raise InvalidOverrideError(label or "", "area name cannot be empty")
        if key in self._entries:
            raise InvalidOverrideError(
                label, "mapping already exists, remove it first or use a different name"
            )
        if known_categories is not None and category not in set(known_categories):
            raise InvalidOverrideError(label, f"unknown area type '{category}'")
        self._entries[key] = category
        self.version += 1
        return key

    def remove(self, label: str) -> bool:
        key = normalize_label(label)
        if key not in self._entries:
            return False
        del self._entries[key]
        self.version += 1
        return True

    def items(self) -> List[Tuple[str, str]]:
        return list(self._entries.items())

    def __contains__(self, label: object) -> bool:
        return isinstance(label, str) and normalize_label(label) in self._entries

    def __len__(self) -> int:
        return len(self._entries)


def _pairs(raw: Any) -> List[Tuple[str, Any]]:
    """Accept either a mapping or a list of single-entry mappings."""
    if isinstance(raw, dict):
        return list(raw.items())
    pairs: List[Tuple[str, Any]] = []
    if isinstance(raw, list):
        for entry in raw:
            if isinstance(entry, dict):
                pairs.extend(entry.items())
    return pairs


@dataclass
class Settings:
    """Configuration loaded from settings.yaml."""

    # Enforcement (category -> research required)
    enforcement: Dict[str, bool] = field(default_factory=lambda: {key: True for key in CATEGORY_KEYS})

    # Removal
    remove_invalid_areas_on_load: bool = True
    show_removal_warnings: bool = True

    # Save compatibility prompt
    show_compatibility_prompt: bool = False
    compatibility_prompt_shown: bool = False

    # UI
    show_tooltips: bool = True

    # Cache
    cache_refresh_interval: int = CACHE_REFRESH_INTERVAL_TICKS

    # Research identifiers per category
    research_identifiers: Dict[str, str] = field(
        default_factory=lambda: dict(DEFAULT_REQUIREMENT_IDENTIFIERS)
    )

    # Custom area name mappings
    overrides: OverrideMapping = field(default_factory=OverrideMapping)

    # Bridge
    bridge_url: str = DEFAULT_BRIDGE_URL
    bridge_timeout: float = 5.0

    # Logging
    log_level: str = "INFO"

    def is_enforced(self, category: str) -> bool:
        return self.enforcement.get(category, True)

    def get(self, option_name: str) -> Any:
        """Host-config style lookup: ``require_<Category>`` or a field name."""
        if option_name.startswith("require_"):
            return self.is_enforced(option_name[len("require_"):])
        return getattr(self, option_name)

    @classmethod
    def from_yaml(cls, path: str = "./config/settings.yaml") -> "Settings":
        """Load settings from YAML file."""
        settings = cls()

        try:
            with open(path, "r") as f:
                data = yaml.safe_load(f) or {}

            # Enforcement
            for category, enabled in _pairs(data.get("enforcement")):
                settings.enforcement[str(category)] = bool(enabled)

            # Removal
            if "removal" in data:
                settings.remove_invalid_areas_on_load = data["removal"].get(
                    "remove_invalid_areas_on_load", settings.remove_invalid_areas_on_load
                )
                settings.show_removal_warnings = data["removal"].get(
                    "show_removal_warnings", settings.show_removal_warnings
                )

            # Compatibility
            if "compatibility" in data:
                settings.show_compatibility_prompt = data["compatibility"].get(
                    "show_prompt", settings.show_compatibility_prompt
                )
                settings.compatibility_prompt_shown = data["compatibility"].get(
                    "prompt_shown", settings.compatibility_prompt_shown
                )

            # UI
            if "ui" in data:
                settings.show_tooltips = data["ui"].get("show_tooltips", settings.show_tooltips)

            # Cache
            if "cache" in data:
                settings.cache_refresh_interval = int(
                    data["cache"].get("refresh_interval", settings.cache_refresh_interval)
                )

            # Research identifiers
            for category, identifier in _pairs(data.get("research")):
                settings.research_identifiers[str(category)] = str(identifier)

            # Overrides
            settings.overrides = OverrideMapping(data.get("overrides"))

            # Bridge
            if "bridge" in data:
                settings.bridge_url = data["bridge"].get("url", settings.bridge_url)
                settings.bridge_timeout = data["bridge"].get("timeout", settings.bridge_timeout)

            # Logging
            if "logging" in data:
                settings.log_level = data["logging"].get("level", settings.log_level)

        except FileNotFoundError:
            logger.warning(f"Settings file not found: {path}, using defaults")
        except Exception as e:
            logger.error(f"Error loading settings: {e}, using defaults")
            settings = cls()

        return settings

    def to_dict(self) -> Dict[str, Any]:
        return {
            "enforcement": [{category: enabled} for category, enabled in self.enforcement.items()],
            "removal": {
                "remove_invalid_areas_on_load": self.remove_invalid_areas_on_load,
                "show_removal_warnings": self.show_removal_warnings,
            },
            "compatibility": {
                "show_prompt": self.show_compatibility_prompt,
                "prompt_shown": self.compatibility_prompt_shown,
            },
            "ui": {"show_tooltips": self.show_tooltips},
            "cache": {"refresh_interval": self.cache_refresh_interval},
            "research": dict(self.research_identifiers),
            "overrides": [{label: category} for label, category in self.overrides.items()],
            "bridge": {"url": self.bridge_url, "timeout": self.bridge_timeout},
            "logging": {"level": self.log_level},
        }

    def save(self, path: str) -> None:
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(yaml.safe_dump(self.to_dict(), sort_keys=False))
        logger.info(f"Settings saved to {path}")
