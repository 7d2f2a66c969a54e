from research_areas.config import Settings
from research_areas.host.memory import InMemoryPartition, InMemoryResearch
from research_areas.rules.classifier import EntityClassifier
from research_areas.rules.completion import RequirementCompletionCache
from research_areas.rules.gate import GateDecision
from research_areas.rules.models import Area, Requirement, Zone
from research_areas.rules.registry import RequirementRegistry
from research_areas.sweep.sweeper import ReconciliationSweeper, summary_messages


def _sweeper(completed=()):
    settings = Settings()
    book = InMemoryResearch([
        Requirement("ResearchAreas_Stockpiles", "Stockpiles"),
        Requirement("ResearchAreas_GrowingZones", "Growing zones"),
        Requirement("ResearchAreas_AnimalAreas", "Animal areas"),
        Requirement("ResearchAreas_Home", "Home planning"),
        Requirement("ResearchAreas_NoRoof", "Roof planning"),
        Requirement("ResearchAreas_Allowed", "Zoning"),
    ])
    for def_name in completed:
        book.complete(def_name)
    registry = RequirementRegistry(book)
    completion = RequirementCompletionCache(book, registry)
    completion.refresh()
    classifier = EntityClassifier(registry, lambda: settings.overrides)
    gate = GateDecision(classifier, registry, completion, settings.is_enforced)
    return ReconciliationSweeper(gate, classifier)


class FlakyPartition(InMemoryPartition):
    """Refuses to remove one area."""

    def __init__(self, *args, refuse: str = "", **kwargs):
        super().__init__(*args, **kwargs)
        self.refuse = refuse

    def remove_area(self, area):
        if area.label == self.refuse:
            raise RuntimeError("area locked by host")
        super().remove_area(area)


def test_removes_three_areas_and_keeps_compliant_zone():
    sweeper = _sweeper(completed=["ResearchAreas_Stockpiles"])
    zone = Zone("Stockpile zone 1", structural_kind="Stockpile", contents=["Steel x75"])
    partition = InMemoryPartition(
        "Colony",
        areas=[Area("Area 1"), Area("Animal sleeping"), Area("No roof")],
        zones=[zone],
        default_area=Area("Home"),
    )

    report = sweeper.sweep([partition])

    assert report.removed == {"Colony": ["Area 1", "Animal sleeping", "No roof"]}
    assert partition.all_zones() == [zone]
    assert [a.label for a in partition.all_areas()] == ["Home"]


def test_second_sweep_is_empty():
    sweeper = _sweeper()
    partition = InMemoryPartition(
        "Colony",
        areas=[Area("Area 1")],
        zones=[Zone("Veg", structural_kind="Growing")],
        default_area=Area("Home"),
    )
    first = sweeper.sweep([partition])
    second = sweeper.sweep([partition])
    assert first.total_removed == 2
    assert second.is_empty


def test_default_area_never_removed():
    sweeper = _sweeper()
    home = Area("home")
    partition = InMemoryPartition("Colony", default_area=home)
    report = sweeper.sweep([partition])
    assert report.is_empty
    assert partition.all_areas() == [home]


def test_ungated_zone_kinds_are_skipped():
    sweeper = _sweeper()
    partition = InMemoryPartition("Colony", zones=[Zone("Fishing spot", structural_kind="Fishing")])
    assert sweeper.sweep([partition]).is_empty


def test_in_use_entities_still_removed():
    sweeper = _sweeper()
    pen = Area("Animal allowed")
    zone = Zone("Crops", structural_kind="Growing", contents=["Rice plant"])
    partition = InMemoryPartition("Colony", areas=[pen], zones=[zone], default_area=Area("Home"))
    partition.restrict("Muffalo", pen)

    report = sweeper.sweep([partition])

    assert report.removed["Colony"] == ["Animal allowed", "Crops"]
    assert report.in_use == ["Animal allowed", "Crops"]
    assert zone.contents == []


def test_removal_failure_does_not_abort():
    sweeper = _sweeper()
    partition = FlakyPartition(
        "Colony",
        areas=[Area("Area 1"), Area("Area 2")],
        default_area=Area("Home"),
        refuse="Area 1",
    )
    report = sweeper.sweep([partition])
    assert report.removed == {"Colony": ["Area 2"]}
    assert len(report.failures) == 1
    assert report.failures[0].label == "Area 1"
    assert "locked" in report.failures[0].error


def test_unnamed_partition_reported_as_unknown():
    sweeper = _sweeper()
    partition = InMemoryPartition(None, areas=[Area("Area 1")], default_area=Area("Home"))
    report = sweeper.sweep([partition])
    assert list(report.removed) == ["Unknown"]


def test_summary_messages_per_partition():
    sweeper = _sweeper()
    colony = InMemoryPartition("Colony", areas=[Area("Area 1"), Area("No roof")], default_area=Area("Home"))
    outpost = InMemoryPartition("Outpost", areas=[Area("Home")])
    report = sweeper.sweep([colony, outpost])
    assert summary_messages(report) == [
        "Removed 2 area(s) from Colony due to missing research: Area 1, No roof"
    ]


def test_find_violations_does_not_remove():
    sweeper = _sweeper()
    partition = InMemoryPartition("Colony", areas=[Area("Area 1")], default_area=Area("Home"))
    violations = sweeper.find_violations(partition)
    assert [v.entity.label for v in violations] == ["Area 1"]
    assert len(partition.all_areas()) == 2
