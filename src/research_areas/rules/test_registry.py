import pytest

from research_areas.errors import DuplicateCategoryError
from research_areas.host.memory import InMemoryResearch
from research_areas.rules.models import Requirement
from research_areas.rules.registry import RequirementRegistry


def _book():
    return InMemoryResearch([
        Requirement("ResearchAreas_Stockpiles", "Stockpiles"),
        Requirement("ResearchAreas_GrowingZones", "Growing zones"),
        Requirement("ResearchAreas_AnimalAreas", "Animal areas"),
    ])


def test_resolves_known_categories():
    """Categories with host research resolve to it."""
    registry = RequirementRegistry(_book())
    assert registry.resolve("Stockpile").def_name == "ResearchAreas_Stockpiles"
    assert registry.resolve("Growing").label == "Growing zones"


def test_missing_research_is_a_gap_not_an_error():
    """Unknown identifiers store None and are listed as missing."""
    registry = RequirementRegistry(_book())
    assert registry.resolve("NoRoof") is None
    assert set(registry.missing()) == {"Home", "NoRoof", "Allowed"}


def test_unknown_category_resolves_to_none():
    registry = RequirementRegistry(_book())
    assert registry.resolve("Pollution") is None


def test_shared_requirement_listed_once():
    """Both animal categories share one project."""
    registry = RequirementRegistry(_book())
    names = [r.def_name for r in registry.requirements()]
    assert names.count("ResearchAreas_AnimalAreas") == 1
    assert registry.categories_unlocked_by(registry.resolve("AnimalSleeping")) == [
        "AnimalSleeping",
        "AnimalAllowed",
    ]


def test_register_extension_category():
    book = _book()
    book.add(Requirement("Mod_SnowClearing", "Snow clearing"))
    registry = RequirementRegistry(book)
    requirement = registry.register("SnowClear", "Mod_SnowClearing")
    assert requirement.label == "Snow clearing"
    assert "SnowClear" in registry.categories()


def test_register_existing_category_raises():
    """Existing keys are never overwritten."""
    registry = RequirementRegistry(_book())
    with pytest.raises(DuplicateCategoryError):
        registry.register("Stockpile", "ResearchAreas_GrowingZones")
    assert registry.resolve("Stockpile").def_name == "ResearchAreas_Stockpiles"


def test_extension_survives_rebuild():
    book = _book()
    book.add(Requirement("Mod_SnowClearing", "Snow clearing"))
    registry = RequirementRegistry(book)
    registry.register("SnowClear", "Mod_SnowClearing")
    registry.build()
    assert registry.resolve("SnowClear") is not None


def test_missing_builds_on_first_use():
    registry = RequirementRegistry(_book())
    assert set(registry.missing()) == {"Home", "NoRoof", "Allowed"}
