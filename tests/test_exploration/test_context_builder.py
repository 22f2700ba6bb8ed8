"""Tests for the turn exploration context."""

import pytest

from gamemaster.adventure.models import (
    AdventureData,
    DoorKey,
    ExplorationMode,
    HitPoints,
    LightLevel,
)
from gamemaster.combat.enemy_state import EnemySnapshot
from gamemaster.core.errors import ContractViolation
from gamemaster.exploration.context_builder import ExplorationContextBuilder
from gamemaster.exploration.state import (
    ExplorationState,
    KnownLocation,
    PartyMember,
    VisitStatus,
)
from gamemaster.exploration.visibility import VisibilityContextBuilder
from gamemaster.exploration.world_time import WorldTime


@pytest.fixture
def builder():
    return ExplorationContextBuilder()


@pytest.fixture
def party():
    return [
        PartyMember(name="Galador", wisdom=10),
        PartyMember(name="Elara", wisdom=16),
    ]


class TestExplorationContextBuilder:
    """Test ExplorationContextBuilder.build."""

    def test_basic_context(self, builder, adventure, party):
        result = builder.build(adventure, "room-a", party=party)
        context = result.context

        assert context.location_id == "room-a"
        assert context.title == "Room A"
        assert context.mode == ExplorationMode.DUNGEON
        assert context.light_level == LightLevel.DIM
        assert context.visit_state == VisitStatus.UNKNOWN
        assert context.visible_connections == [
            "To south: Room B. Small guard room. (through an open passage) "
            "[entities: Goblin guard (enemy)]"
        ]

    def test_exploration_state_updated(self, builder, adventure):
        result = builder.build(adventure, "room-a", world_time=WorldTime(day=1, hour=9))

        record = result.exploration_state.known_locations["room-a"]
        assert record.status == VisitStatus.VISITED
        assert record.last_visited == 1440 + 540
        assert result.exploration_state.status_of("room-b") == VisitStatus.SEEN

    def test_previous_visit_state_reported(self, builder, adventure):
        state = ExplorationState(known_locations={
            "room-a": KnownLocation(status=VisitStatus.SEEN),
        })

        result = builder.build(adventure, "room-a", exploration_state=state)

        assert result.context.visit_state == VisitStatus.SEEN
        assert state.status_of("room-a") == VisitStatus.SEEN

    def test_hazards_detected_and_recorded(self, builder, adventure, party):
        result = builder.build(adventure, "room-a", party=party)

        assert [h.id for h in result.detected_hazards] == ["trap-pit"]
        assert [h.id for h in result.context.detected_hazards] == ["trap-pit"]
        assert result.exploration_state.known_locations["room-a"].discovered_secrets == ["trap-pit"]

        again = builder.build(
            adventure, "room-a", party=party, exploration_state=result.exploration_state
        )
        assert again.detected_hazards == []

    def test_came_from_location_excluded(self, builder, adventure):
        result = builder.build(adventure, "room-b", came_from_location_id="room-a")
        assert result.context.visible_connections == []

        result = builder.build(adventure, "room-b")
        assert result.context.visible_connections[0].startswith("To north: Room A")

    def test_open_doors_forwarded(self, builder, adventure):
        result = builder.build(
            adventure, "room-a", open_doors={DoorKey("room-a", "east"): True}
        )
        assert any("Room C" in entry for entry in result.context.visible_connections)

    def test_present_entities_prefer_live_snapshot(self, builder, adventure):
        wounded = EnemySnapshot(
            id="combat-1",
            adventure_id="goblin-1",
            name="Goblin guard",
            hp=HitPoints(current=2, max=7),
        )

        result = builder.build(adventure, "room-b", enemies_by_location={"room-b": [wounded]})

        assert result.context.present_entities == [wounded]

    def test_present_entities_normalized_from_adventure(self, builder, adventure):
        result = builder.build(adventure, "room-b")

        [goblin] = result.context.present_entities
        assert goblin.id == "goblin-1"
        assert goblin.hp == HitPoints(current=7, max=7)
        assert goblin.ac == 15

    def test_unknown_present_entities_skipped(self, builder, adventure):
        result = builder.build(adventure, "room-e")
        assert [e.id for e in result.context.present_entities] == ["rat-1"]

    def test_non_enemy_entities_resolved(self, builder, adventure_dict):
        adventure_dict["entities"].append({"id": "sildar", "name": "Sildar", "type": "npc"})
        adventure_dict["locations"][1]["entitiesPresent"].append("sildar")
        adventure = AdventureData.model_validate(adventure_dict)

        result = builder.build(adventure, "room-b")

        sildar = result.context.present_entities[1]
        assert sildar.type == "npc"
        assert sildar.hp is None

    def test_dead_entities_in_connected_locations(self, builder, adventure):
        dead_goblin = EnemySnapshot(
            id="goblin-1", name="Goblin guard", hp=HitPoints(current=0, max=7), is_dead=True
        )

        result = builder.build(
            adventure, "room-a", enemies_by_location={"room-b": [dead_goblin]}
        )

        assert result.context.dead_entities_in_connected_locations == {"room-b": ["Goblin guard"]}
        assert "Goblin guard (enemy, dead)" in result.context.visible_connections[0]

    def test_dead_entities_behind_closed_doors_not_reported(self, builder, adventure):
        dead_orc = EnemySnapshot(id="orc-1", name="Orc", hp=HitPoints(current=0, max=15))

        result = builder.build(
            adventure, "room-a", enemies_by_location={"room-c": [dead_orc]}
        )

        assert result.context.dead_entities_in_connected_locations == {}

    def test_hidden_enemies_not_narrated(self, builder):
        """A mimic in the next room stays secret from the narrator."""
        adventure = AdventureData.model_validate({
            "adventureId": "mimic-den",
            "locations": [
                {
                    "id": "a",
                    "title": "Hall",
                    "explorationMode": "dungeon",
                    "connections": [{"targetId": "b", "direction": "south", "visibility": "open"}],
                },
                {"id": "b", "title": "Treasury", "entitiesPresent": ["mimic-1", "goblin-1"]},
            ],
            "entities": [
                {"id": "mimic-1", "name": "Mimic", "type": "enemy", "disposition": "hidden"},
                {"id": "goblin-1", "name": "Goblin guard", "type": "enemy"},
            ],
        })

        result = builder.build(adventure, "a")

        assert result.context.visible_connections == [
            "To south: Treasury (through an open passage) [entities: Goblin guard (enemy)]"
        ]

    def test_hidden_live_enemies_not_narrated(self, builder, adventure):
        ambusher = EnemySnapshot(
            id="goblin-2", name="Goblin ambusher", hp=HitPoints(current=7, max=7), status="hidden"
        )
        guard = EnemySnapshot(id="goblin-1", name="Goblin guard", hp=HitPoints(current=7, max=7))

        result = builder.build(
            adventure, "room-a", enemies_by_location={"room-b": [ambusher, guard]}
        )

        assert "Goblin ambusher" not in result.context.visible_connections[0]
        assert "Goblin guard (enemy, 7/7 HP)" in result.context.visible_connections[0]

    def test_custom_visibility_builder(self, adventure):
        builder = ExplorationContextBuilder(
            VisibilityContextBuilder(reveal_hidden_open_doors=True)
        )

        result = builder.build(adventure, "room-a")

        assert any("Secret Vault" in entry for entry in result.context.visible_connections)

    def test_unknown_location_raises(self, builder, adventure):
        with pytest.raises(ContractViolation, match="room-z"):
            builder.build(adventure, "room-z")

    def test_missing_adventure_raises(self, builder):
        with pytest.raises(ContractViolation):
            builder.build(None, "room-a")

    def test_serializes_with_camel_case(self, builder, adventure):
        data = builder.build(adventure, "room-a").model_dump(by_alias=True)

        assert "visibleConnections" in data["context"]
        assert "knownLocations" in data["explorationState"]
