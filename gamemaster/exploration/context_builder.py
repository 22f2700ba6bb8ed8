"""Exploration context assembled for the narrator on each turn."""

import logging
from typing import Mapping, Optional, Sequence

from pydantic import Field

from gamemaster.adventure.models import (
    AdventureData,
    AdventureModel,
    DoorKey,
    DoorStateKey,
    ExplorationMode,
    Hazard,
    LightLevel,
    Location,
    normalize_door_state,
)
from gamemaster.combat.enemy_state import (
    EnemiesByLocation,
    EnemySnapshot,
    get_dead_entity_names,
    get_enemies_for_location,
    matches_entity_id,
    normalize_enemy_stats,
)
from gamemaster.core.errors import ContractViolation
from gamemaster.exploration.state import (
    ExplorationManager,
    ExplorationState,
    PartyMember,
    VisitStatus,
)
from gamemaster.exploration.visibility import VisibilityContextBuilder
from gamemaster.exploration.world_time import WorldTime

logger = logging.getLogger(__name__)


class ExplorationContext(AdventureModel):
    """What the narrator needs to describe the current location."""

    location_id: str
    title: str
    mode: ExplorationMode = ExplorationMode.SAFE
    light_level: LightLevel = LightLevel.BRIGHT
    # Visit state before this turn's update
    visit_state: VisitStatus = VisitStatus.UNKNOWN
    detected_hazards: list[Hazard] = Field(default_factory=list)
    visible_connections: list[str] = Field(default_factory=list)
    present_entities: list[EnemySnapshot] = Field(default_factory=list)
    # location id -> names of dead or downed entities, so they are not narrated as alive
    dead_entities_in_connected_locations: dict[str, list[str]] = Field(default_factory=dict)


class ExplorationContextResult(AdventureModel):
    """Context plus the exploration state after entering the location."""

    context: ExplorationContext
    exploration_state: ExplorationState
    detected_hazards: list[Hazard] = Field(default_factory=list)


class ExplorationContextBuilder:
    """Builds the exploration context for a turn.

    Updates the fog of war, runs passive perception, and collects visible
    connections and present entities. The caller's state objects are left
    untouched; the updated exploration state is returned.
    """

    def __init__(self, visibility_builder: Optional[VisibilityContextBuilder] = None):
        self.visibility_builder = visibility_builder or VisibilityContextBuilder(
            include_hidden_enemies=False
        )

    def build(
        self,
        adventure: AdventureData,
        location_id: str,
        party: Sequence[PartyMember] = (),
        exploration_state: Optional[ExplorationState] = None,
        world_time: Optional[WorldTime] = None,
        came_from_location_id: Optional[str] = None,
        open_doors: Optional[Mapping[DoorStateKey, bool]] = None,
        enemies_by_location: Optional[EnemiesByLocation] = None,
    ) -> ExplorationContextResult:
        """Build the exploration context for the party's current location.

        Args:
            adventure: The loaded adventure.
            location_id: Where the party is.
            party: Party members, for passive perception.
            exploration_state: Exploration state before this turn.
            world_time: Current game time. Defaults to day 1, 08:00.
            came_from_location_id: Location the party arrived from; its
                connection is left out of the visible connections.
            open_doors: Doors opened during play.
            enemies_by_location: Live enemy snapshots per location.

        Returns:
            ExplorationContextResult with the context and updated state.

        Raises:
            ContractViolation: If the adventure is missing or the location
                does not exist in it.
        """
        if adventure is None:
            raise ContractViolation("adventure is required to build exploration context")

        location = adventure.get_location(location_id)
        if location is None:
            raise ContractViolation(
                f"Location '{location_id}' does not exist in adventure '{adventure.adventure_id}'"
            )

        state = exploration_state or ExplorationState()
        previous_visit_state = state.status_of(location_id)
        minutes = (world_time or WorldTime()).total_minutes

        state = ExplorationManager.update_exploration_state(state, location, minutes)

        detected = ExplorationManager.check_passive_perception(state, location, party)
        if detected:
            state = ExplorationManager.mark_hazards_as_discovered(state, location_id, detected)
            logger.info(
                f"Passive perception detected {len(detected)} hazard(s) in {location_id}"
            )

        door_state = normalize_door_state(open_doors)
        enemies_by_location = enemies_by_location or {}

        visible_connections = self.visibility_builder.compute_visible_connections(
            current_location=location,
            location_id=location_id,
            adventure_data=adventure,
            open_door_state=door_state,
            enemies_by_location=enemies_by_location,
            exclude_target_id=came_from_location_id,
        )

        context = ExplorationContext(
            location_id=location.id,
            title=location.title,
            mode=location.exploration_mode,
            light_level=location.light_level,
            visit_state=previous_visit_state,
            detected_hazards=detected,
            visible_connections=visible_connections,
            present_entities=self.resolve_present_entities(
                location, adventure, enemies_by_location
            ),
            dead_entities_in_connected_locations=self._dead_entities_in_connected_locations(
                location, adventure, door_state, enemies_by_location
            ),
        )

        return ExplorationContextResult(
            context=context,
            exploration_state=state,
            detected_hazards=detected,
        )

    @staticmethod
    def resolve_present_entities(
        location: Location,
        adventure: AdventureData,
        enemies_by_location: EnemiesByLocation,
    ) -> list[EnemySnapshot]:
        """Resolve the entities in a location.

        Live snapshots (current hp) are preferred. Otherwise the adventure
        entity is used, with enemy stats normalized to ``hp = {current, max}``.
        """
        roster = get_enemies_for_location(location.id, enemies_by_location)

        resolved = []
        for entity_id in location.entities_present:
            live = next((e for e in roster if matches_entity_id(e, entity_id)), None)
            if live is not None:
                resolved.append(live)
                continue

            entity = adventure.get_entity(entity_id)
            if entity is None:
                logger.warning(
                    f"Location '{location.id}' references unknown entity '{entity_id}'"
                )
                continue

            if entity.type == "enemy":
                resolved.append(normalize_enemy_stats(entity))
            else:
                resolved.append(
                    EnemySnapshot(
                        id=entity.id,
                        name=entity.name,
                        type=entity.type or "unknown",
                        hp=entity.hp,
                        disposition=entity.disposition,
                        status=entity.status,
                        adventure_id=entity.id,
                    )
                )

        return resolved

    def _dead_entities_in_connected_locations(
        self,
        location: Location,
        adventure: AdventureData,
        door_state: Mapping[DoorKey, bool],
        enemies_by_location: EnemiesByLocation,
    ) -> dict[str, list[str]]:
        dead: dict[str, list[str]] = {}
        for connection in location.connections:
            if not connection.target_id:
                continue
            if not self.visibility_builder.is_connection_visible(
                connection, location.id, door_state
            ):
                continue

            target = adventure.get_location(connection.target_id)
            if target is None:
                continue

            roster = get_enemies_for_location(target.id, enemies_by_location)
            matched = []
            for entity_id in target.entities_present:
                enemy = next((e for e in roster if matches_entity_id(e, entity_id)), None)
                if enemy is not None and enemy.hp is not None:
                    matched.append(enemy)
            names = get_dead_entity_names(matched)

            if names:
                dead[target.id] = names

        return dead
