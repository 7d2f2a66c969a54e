import pytest

from research_areas.config import OverrideMapping
from research_areas.errors import UnknownCategoryError
from research_areas.host.memory import InMemoryPartition, InMemoryResearch
from research_areas.rules.classifier import EntityClassifier, classify_label
from research_areas.rules.models import Area, Zone
from research_areas.rules.registry import RequirementRegistry


def _classifier(overrides=None):
    mapping = overrides if overrides is not None else OverrideMapping()
    registry = RequirementRegistry(InMemoryResearch())
    return EntityClassifier(registry, lambda: mapping), mapping


def _partition(*entities):
    home = Area("Home")
    areas = [e for e in entities if isinstance(e, Area)]
    zones = [e for e in entities if isinstance(e, Zone)]
    return InMemoryPartition("Colony", areas=areas, zones=zones, default_area=home)


@pytest.mark.parametrize(
    "label, category",
    [
        ("home", "Home"),
        ("Stockpile area 2", "Stockpile"),
        ("growing spot", "Growing"),
        ("Animal sleeping", "AnimalSleeping"),
        ("animals allowed", "AnimalAllowed"),
        ("No Roof 1", "NoRoof"),
        ("noroof", "NoRoof"),
        ("no-roof kitchen", "NoRoof"),
        ("Area 1", "Allowed"),
    ],
)
def test_label_heuristics(label, category):
    classifier, _ = _classifier()
    assert classifier.classify(Area(label)) == category


def test_heuristics_first_match_wins():
    """'stockpile' is checked before 'growing'."""
    assert classify_label("growing stockpile") == "Stockpile"
    assert classify_label("homestead") is None


def test_null_entity_is_unclassified():
    classifier, _ = _classifier()
    assert classifier.classify(None) == "Unclassified"


def test_default_area_is_home_whatever_its_label():
    home = Area("Stockpile of doom")
    partition = InMemoryPartition("Colony", default_area=home)
    classifier, mapping = _classifier()
    mapping.add("stockpile of doom", "Growing")
    assert classifier.classify(home, partition) == "Home"


def test_structural_kind_beats_label():
    """A Stockpile zone labelled 'growing' is still a stockpile."""
    classifier, _ = _classifier()
    zone = Zone("Growing zone 3", structural_kind="Stockpile")
    assert classifier.classify(zone) == "Stockpile"


def test_override_beats_heuristic():
    classifier, mapping = _classifier()
    mapping.add("Animal Sleeping", "Allowed")
    assert classifier.classify(Area("animal sleeping")) == "Allowed"


def test_override_scenario_farmzone():
    classifier, mapping = _classifier()
    mapping.add("farmzone", "Growing")
    assert classifier.classify(Area("FarmZone")) == "Growing"


def test_override_to_unknown_category_ignored():
    """An override naming a category nobody registered falls through to the heuristics."""
    classifier, mapping = _classifier()
    mapping.add("Growing patch", "Growin")
    assert classifier.classify(Area("Growing patch")) == "Growing"


def test_area_inherits_same_label_zone_kind():
    zone = Zone("Freezer", structural_kind="Stockpile")
    area = Area("Freezer")
    partition = _partition(area, zone)
    classifier, _ = _classifier()
    assert classifier.classify(area, partition) == "Stockpile"


def test_zone_signal_before_label_heuristic():
    """An area named like a growing zone but matching a stockpile zone is a stockpile."""
    zone = Zone("Growing overflow", structural_kind="Stockpile")
    area = Area("Growing overflow")
    partition = _partition(area, zone)
    classifier, _ = _classifier()
    assert classifier.classify(area, partition) == "Stockpile"


def test_override_change_invalidates_memo():
    classifier, mapping = _classifier()
    area = Area("Kitchen")
    assert classifier.classify(area) == "Allowed"
    mapping.add("kitchen", "NoRoof")
    assert classifier.classify(area) == "NoRoof"
    mapping.remove("kitchen")
    assert classifier.classify(area) == "Allowed"


def test_zone_set_change_rebuilds_index():
    area = Area("Barn")
    partition = _partition(area)
    classifier, _ = _classifier()
    assert classifier.classify(area, partition, tick=10) == "Allowed"

    partition.add_zone(Zone("Barn", structural_kind="Growing"))
    # Same tick: index is not rechecked
    assert classifier.classify(area, partition, tick=10) == "Allowed"
    assert classifier.classify(area, partition, tick=11) == "Growing"


def test_memoized_until_forgotten():
    classifier, _ = _classifier()
    area = Area("Area 1")
    classifier.classify(area)
    assert len(classifier) == 1
    classifier.forget(area)
    assert len(classifier) == 0


def test_registered_kind_classifies_directly():
    classifier, _ = _classifier()
    classifier.register_kind("Zone_Hydroponics", "Growing")
    assert classifier.classify(Zone("Hydro 1", structural_kind="Zone_Hydroponics")) == "Growing"
    assert classifier.is_gateable_kind("Zone_Hydroponics")


def test_register_kind_unknown_category():
    classifier, _ = _classifier()
    with pytest.raises(UnknownCategoryError):
        classifier.register_kind("Zone_Fishing", "Fishing")
