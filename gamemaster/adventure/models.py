"""Data models for adventure documents."""

import logging
from enum import Enum
from typing import Any, Mapping, NamedTuple, Optional, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)


class AdventureModel(BaseModel):
    """Base model accepting the camelCase keys used in adventure JSON."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class Visibility(str, Enum):
    """How much of a connection's target can be perceived from its source."""

    OPEN = "open"  # Archway or opening, target seen without traversal
    RESTRICTED = "restricted"  # Door or wall
    CLOSED = "closed"  # Same as restricted
    HIDDEN = "hidden"  # Secret passage


class ExplorationMode(str, Enum):
    """Pace and tension of exploration in a location."""

    SAFE = "safe"
    DUNGEON = "dungeon"
    WILDERNESS = "wilderness"


class LightLevel(str, Enum):
    """Base light level of a location."""

    BRIGHT = "bright"
    DIM = "dim"
    DARK = "dark"


class HazardType(str, Enum):
    """Kinds of hazard a location can hold."""

    TRAP = "trap"
    AMBUSH = "ambush"
    ENVIRONMENTAL = "environmental"


class HitPoints(BaseModel):
    """Current and maximum hit points."""

    current: int
    max: int


class Connection(AdventureModel):
    """A directed edge from one location to another."""

    target_id: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("targetId", "toLocationId", "target_id"),
        serialization_alias="targetId",
    )
    direction: Optional[str] = None
    type: str = "direct"
    description: Optional[str] = None
    distance: Optional[str] = None
    travel_time: Optional[str] = None

    is_locked: bool = False
    required_key_id: Optional[str] = None
    is_blocked: bool = False
    blocked_reason: Optional[str] = None

    # None means there is no door at all
    is_open: Optional[bool] = None

    visibility: Visibility = Visibility.RESTRICTED


class Hazard(AdventureModel):
    """A trap, ambush or environmental danger in a location."""

    id: str
    type: HazardType
    detection_dc: int = Field(
        ...,
        validation_alias=AliasChoices("detectionDC", "detectionDc", "detection_dc"),
    )
    disarm_dc: Optional[int] = Field(
        None,
        validation_alias=AliasChoices("disarmDC", "disarmDc", "disarm_dc"),
    )
    description: str = ""
    trigger_description: str = ""
    effect: Optional[str] = None
    active: bool = True


class Entity(AdventureModel):
    """An enemy, NPC, ally or object defined by the adventure."""

    id: str
    name: str
    type: Optional[str] = None
    description: Optional[str] = None
    stats: dict[str, Any] = Field(default_factory=dict)
    hp: Optional[HitPoints] = None
    disposition: Optional[str] = None
    status: Optional[str] = None

    @field_validator("hp", mode="before")
    @classmethod
    def _coerce_numeric_hp(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return {"current": int(value), "max": int(value)}
        return value

    @field_validator("stats", mode="before")
    @classmethod
    def _default_stats(cls, value: Any) -> Any:
        return value if value is not None else {}


class Location(AdventureModel):
    """A room or area in the adventure's spatial graph."""

    id: str
    title: str
    description: Optional[str] = None
    region_id: Optional[str] = None
    allow_fast_travel: bool = True
    exploration_mode: ExplorationMode = ExplorationMode.SAFE
    light_level: LightLevel = LightLevel.BRIGHT
    hazards: list[Hazard] = Field(default_factory=list)
    connections: list[Connection] = Field(default_factory=list)
    entities_present: list[str] = Field(default_factory=list)
    dm_notes: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _apply_legacy_fields(cls, data: Any) -> Any:
        """Accept ``name`` for ``title`` and ``exits`` for ``connections``."""
        if not isinstance(data, dict):
            return data

        data = dict(data)
        if not data.get("title") and data.get("name"):
            data["title"] = data["name"]

        if not data.get("connections") and data.get("exits"):
            connections = []
            for exit_ in data["exits"]:
                if isinstance(exit_, str):
                    connections.append({"targetId": exit_})
                elif isinstance(exit_, dict):
                    connections.append(exit_)
            data["connections"] = connections

        for key in ("hazards", "connections", "entitiesPresent", "entities_present"):
            if key in data and data[key] is None:
                data[key] = []

        return data

    @field_validator("entities_present", mode="before")
    @classmethod
    def _entity_refs_to_ids(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return value

        ids = []
        for item in value:
            if isinstance(item, dict):
                item = item.get("id")
            if item:
                ids.append(item)
        return ids


class AdventureData(AdventureModel):
    """All locations and entities of one adventure."""

    adventure_id: str
    title: Optional[str] = None
    summary: Optional[str] = None
    introductory_narration: Optional[str] = None
    locations: list[Location] = Field(..., min_length=1)
    entities: list[Entity] = Field(default_factory=list)
    starting_location_id: Optional[str] = None
    system: Optional[str] = None

    _locations_by_id: dict[str, Location] = PrivateAttr(default_factory=dict)
    _entities_by_id: dict[str, Entity] = PrivateAttr(default_factory=dict)

    @field_validator("entities", mode="before")
    @classmethod
    def _default_entities(cls, value: Any) -> Any:
        return value if value is not None else []

    def model_post_init(self, __context: Any) -> None:
        # First definition wins when ids are duplicated
        for location in self.locations:
            self._locations_by_id.setdefault(location.id, location)
        for entity in self.entities:
            self._entities_by_id.setdefault(entity.id, entity)

    def get_location(self, location_id: Optional[str]) -> Optional[Location]:
        """Get a location by ID, or None if it does not exist."""
        if not location_id:
            return None
        return self._locations_by_id.get(location_id)

    def get_entity(self, entity_id: Optional[str]) -> Optional[Entity]:
        """Get an entity by ID, or None if it does not exist."""
        if not entity_id:
            return None
        return self._entities_by_id.get(entity_id)

    def get_starting_location(self) -> Location:
        """Get the explicit starting location, or the first location."""
        return self.get_location(self.starting_location_id) or self.locations[0]


class DoorKey(NamedTuple):
    """Key of the open-door store: a location and one of its exits."""

    location_id: str
    direction: str

    @classmethod
    def parse(cls, raw: str) -> Optional["DoorKey"]:
        """Parse a legacy ``"<locationId>:<direction>"`` key.

        Splits on the last colon, so location ids may contain colons.
        """
        location_id, sep, direction = raw.rpartition(":")
        if not sep or not location_id or not direction:
            return None
        return cls(location_id, direction)


DoorStateKey = Union[DoorKey, tuple[str, str], str]


def normalize_door_state(
    door_state: Optional[Mapping[DoorStateKey, bool]],
) -> dict[DoorKey, bool]:
    """Convert an open-door mapping to ``DoorKey`` keys.

    Accepts ``DoorKey`` values, plain ``(location_id, direction)`` tuples and
    legacy ``"<locationId>:<direction>"`` strings. Unparseable keys are
    dropped.
    """
    normalized: dict[DoorKey, bool] = {}
    if not door_state:
        return normalized

    for key, is_open in door_state.items():
        if isinstance(key, str):
            door_key = DoorKey.parse(key)
        elif isinstance(key, tuple) and len(key) == 2:
            door_key = DoorKey(*key)
        else:
            door_key = None

        if door_key is None:
            logger.warning(f"Ignoring malformed door state key: {key!r}")
            continue

        normalized[door_key] = is_open is True

    return normalized
