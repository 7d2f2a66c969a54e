import textwrap

from research_areas.host.memory import InMemoryWorld, load_world_snapshot

SNAPSHOT = textwrap.dedent(
    """
    research:
      - def_name: ResearchAreas_Stockpiles
        label: Stockpiles
        completed: true
      - def_name: ResearchAreas_Allowed
        label: Zoning
    current: Outpost
    partitions:
      - name: Colony
        areas:
          - label: Home
          - label: Animal sleeping
            restricted: [Muffalo, Alpaca]
        zones:
          - label: Stockpile zone 1
            kind: Stockpile
            contents: [Steel x75]
          - label: broken entry
      - name: Outpost
        default_area: Base
        areas:
          - label: Base
    """
)


def test_load_snapshot(tmp_path):
    path = tmp_path / "world.yaml"
    path.write_text(SNAPSHOT)
    world, research = load_world_snapshot(str(path))

    colony, outpost = world.partitions()
    assert colony.default_area().label == "Home"
    assert [z.label for z in colony.all_zones()] == ["Stockpile zone 1", "broken entry"]
    sleeping = colony.all_areas()[1]
    assert colony.actors_restricted_to(sleeping) == ["Muffalo", "Alpaca"]
    assert outpost.default_area().label == "Base"
    assert world.current_partition() is outpost

    stockpiles = research.lookup("ResearchAreas_Stockpiles")
    assert research.is_complete(stockpiles)
    assert not research.is_complete(research.lookup("ResearchAreas_Allowed"))


def test_missing_default_area_is_created(tmp_path):
    path = tmp_path / "world.yaml"
    path.write_text("partitions:\n  - name: Camp\n    areas:\n      - label: Area 1\n")
    world, _ = load_world_snapshot(str(path))
    camp = world.current_partition()
    assert camp.default_area().label == "Home"
    assert [a.label for a in camp.all_areas()] == ["Home", "Area 1"]


def test_empty_world_has_no_current_partition():
    assert InMemoryWorld().current_partition() is None
