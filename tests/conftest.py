"""Shared fixtures: a small dungeon with every kind of connection."""

import copy
import json

import pytest

from gamemaster.adventure.models import AdventureData


@pytest.fixture
def adventure_dict():
    """Raw adventure document, in the camelCase shape of the JSON files."""
    return {
        "adventureId": "goblin-cave",
        "title": "The Goblin Cave",
        "startingLocationId": "room-a",
        "locations": [
            {
                "id": "room-a",
                "title": "Room A",
                "description": "A dusty antechamber.",
                "explorationMode": "dungeon",
                "lightLevel": "dim",
                "hazards": [
                    {
                        "id": "trap-pit",
                        "type": "trap",
                        "detectionDC": 12,
                        "description": "A loose flagstone.",
                        "triggerDescription": "The floor gives way!",
                    },
                    {
                        "id": "trap-needle",
                        "type": "trap",
                        "detectionDC": 18,
                        "description": "A needle in the lock.",
                        "triggerDescription": "A prick of poison.",
                    },
                ],
                "connections": [
                    {"targetId": "room-b", "direction": "south", "visibility": "open"},
                    {"targetId": "room-c", "direction": "east", "isOpen": False},
                    {"targetId": "room-x", "direction": "north", "visibility": "open"},
                    {"targetId": "room-d", "direction": "west", "isOpen": True, "visibility": "hidden"},
                    {"targetId": "room-e", "direction": "up"},
                ],
                "entitiesPresent": [],
            },
            {
                "id": "room-b",
                "title": "Room B",
                "description": "Small guard room.",
                "connections": [
                    {"targetId": "room-a", "direction": "north", "visibility": "open"},
                ],
                "entitiesPresent": ["goblin-1"],
            },
            {
                "id": "room-c",
                "title": "Room C",
                "description": "An orc barracks.",
                "entitiesPresent": ["orc-1"],
            },
            {
                "id": "room-d",
                "title": "Secret Vault",
            },
            {
                "id": "room-e",
                "name": "Attic",
                "description": "Cobwebs everywhere.",
                "entitiesPresent": ["ghost-1", "rat-1"],
            },
        ],
        "entities": [
            {"id": "goblin-1", "name": "Goblin guard", "type": "enemy", "stats": {"hp": 7, "ac": 15}},
            {"id": "orc-1", "name": "Orc", "type": "enemy", "stats": {"hp": "15 (2d8+6)", "ac": 13}},
            {"id": "rat-1", "name": "Giant rat", "type": "enemy"},
        ],
    }


@pytest.fixture
def adventure(adventure_dict):
    """Parsed adventure."""
    return AdventureData.model_validate(adventure_dict)


@pytest.fixture
def valid_adventure_dict(adventure_dict):
    """Adventure document that passes validation: no dangling connection."""
    document = copy.deepcopy(adventure_dict)
    room_a = document["locations"][0]
    room_a["connections"] = [c for c in room_a["connections"] if c["targetId"] != "room-x"]
    return document


@pytest.fixture
def adventures_dir(tmp_path, valid_adventure_dict):
    """Directory holding goblin-cave.json plus a broken and a malformed file."""
    (tmp_path / "goblin-cave.json").write_text(json.dumps(valid_adventure_dict), encoding="utf-8")
    (tmp_path / "broken.json").write_text("{not json", encoding="utf-8")
    (tmp_path / "dangling.json").write_text(
        json.dumps({
            "adventureId": "dangling",
            "locations": [
                {"id": "a", "title": "A", "connections": [{"targetId": "nowhere", "direction": "north"}]},
            ],
        }),
        encoding="utf-8",
    )
    (tmp_path / "notes.txt").write_text("not an adventure", encoding="utf-8")
    return tmp_path
