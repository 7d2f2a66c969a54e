"""
Centralized constants for research-gated areas.

Category keys, the default research identifiers that unlock them and the
label heuristics used when nothing more reliable is known about an area.
"""

# =============================================================================
# CATEGORY KEYS
# =============================================================================
STOCKPILE = "Stockpile"
GROWING = "Growing"
ANIMAL_SLEEPING = "AnimalSleeping"
ANIMAL_ALLOWED = "AnimalAllowed"
HOME = "Home"
NO_ROOF = "NoRoof"
ALLOWED = "Allowed"

# Returned for a null entity; always allowed
UNCLASSIFIED = "Unclassified"

CATEGORY_KEYS = [
    STOCKPILE,
    GROWING,
    ANIMAL_SLEEPING,
    ANIMAL_ALLOWED,
    HOME,
    NO_ROOF,
    ALLOWED,
]

# Structural zone kinds that classify directly
ZONE_KINDS = {
    STOCKPILE: STOCKPILE,
    GROWING: GROWING,
}

# =============================================================================
# RESEARCH IDENTIFIERS (host def names)
# =============================================================================
DEFAULT_REQUIREMENT_IDENTIFIERS = {
    STOCKPILE: "ResearchAreas_Stockpiles",
    GROWING: "ResearchAreas_GrowingZones",
    ANIMAL_SLEEPING: "ResearchAreas_AnimalAreas",
    ANIMAL_ALLOWED: "ResearchAreas_AnimalAreas",
    HOME: "ResearchAreas_Home",
    NO_ROOF: "ResearchAreas_NoRoof",
    ALLOWED: "ResearchAreas_Allowed",
}

# Player-facing names used in "Unlocks: ..." descriptions
CATEGORY_LABELS = {
    STOCKPILE: "Stockpile zones",
    GROWING: "Growing zones",
    ANIMAL_SLEEPING: "Animal areas",
    ANIMAL_ALLOWED: "Animal areas",
    HOME: "Home area",
    NO_ROOF: "No-roof areas",
    ALLOWED: "Custom allowed areas",
}

# =============================================================================
# LABEL HEURISTICS
# =============================================================================
NO_ROOF_SPELLINGS = ("no roof", "noroof", "no-roof")

# =============================================================================
# TIMING
# =============================================================================
# ~4 seconds of game time at normal speed
CACHE_REFRESH_INTERVAL_TICKS = 250

# =============================================================================
# REPORTING
# =============================================================================
UNKNOWN_PARTITION = "Unknown"

# Bridge mod default endpoint
DEFAULT_BRIDGE_URL = "http://localhost:8790"
