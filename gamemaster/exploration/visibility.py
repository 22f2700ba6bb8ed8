"""Visible-connection context for the narrator.

Given the party's current location, works out which neighbouring locations
can be perceived right now and renders one line of context per visible
connection, including who occupies the room on the other side.
"""

import logging
from typing import Mapping, Optional

from gamemaster.adventure.models import (
    AdventureData,
    Connection,
    DoorKey,
    DoorStateKey,
    Location,
    Visibility,
    normalize_door_state,
)
from gamemaster.combat.enemy_state import (
    EnemiesByLocation,
    EnemySnapshot,
    filter_visible_enemies,
    is_entity_out_of_combat,
)
from gamemaster.core.config import settings
from gamemaster.core.errors import ContractViolation

logger = logging.getLogger(__name__)

ENTITIES_PREFIX = "entities:"


class VisibilityContextBuilder:
    """Builds context strings for the connections a player can perceive.

    Visibility policy:
    - ``visibility == open`` connections are always listed.
    - A door opened during play (door store entry is True) is always listed,
      hidden passages included.
    - ``is_open`` from the adventure data lists the connection unless the
      passage is hidden. ``reveal_hidden_open_doors=True`` lifts that
      exception.

    With ``include_hidden_enemies=False`` enemies whose disposition or status
    is hidden (mimics, ambushers) are left out of the entity clause.
    """

    def __init__(
        self,
        description_max_chars: Optional[int] = None,
        reveal_hidden_open_doors: bool = False,
        include_hidden_enemies: bool = True,
    ):
        self.description_max_chars = (
            description_max_chars
            if description_max_chars is not None
            else settings.description_max_chars
        )
        self.reveal_hidden_open_doors = reveal_hidden_open_doors
        self.include_hidden_enemies = include_hidden_enemies

    def is_connection_visible(
        self,
        connection: Connection,
        location_id: str,
        door_state: Mapping[DoorKey, bool],
    ) -> bool:
        """Check whether a connection's target can currently be perceived."""
        if connection.visibility == Visibility.OPEN:
            return True

        if connection.direction and door_state.get(DoorKey(location_id, connection.direction)):
            return True

        if connection.is_open is True:
            return (
                connection.visibility != Visibility.HIDDEN
                or self.reveal_hidden_open_doors
            )

        return False

    def compute_visible_connections(
        self,
        current_location: Location,
        location_id: str,
        adventure_data: AdventureData,
        open_door_state: Optional[Mapping[DoorStateKey, bool]] = None,
        enemies_by_location: Optional[EnemiesByLocation] = None,
        exclude_target_id: Optional[str] = None,
    ) -> list[str]:
        """Describe every connection of the current location the party can perceive.

        Args:
            current_location: The location the party is in.
            location_id: ID of ``current_location``, used for door lookups.
            adventure_data: The adventure's location and entity graph.
            open_door_state: Doors opened during play, keyed by ``DoorKey``
                (legacy ``"<locationId>:<direction>"`` strings also accepted).
            enemies_by_location: Live enemy snapshots per location id.
            exclude_target_id: Location to leave out, usually the one the
                party just came from.

        Returns:
            One context string per visible connection, in connection order.

        Raises:
            ContractViolation: If the adventure, its location list or the
                current location is missing or of the wrong type.
        """
        if not isinstance(adventure_data, AdventureData) or adventure_data.locations is None:
            raise ContractViolation(
                "adventure_data must be an AdventureData with a locations list, "
                f"got {type(adventure_data).__name__}"
            )
        if not isinstance(current_location, Location):
            raise ContractViolation(
                f"current_location must be a Location, got {type(current_location).__name__}"
            )

        location_id = location_id or current_location.id
        door_state = normalize_door_state(open_door_state)
        enemies_by_location = enemies_by_location or {}

        visible: list[str] = []
        for index, connection in enumerate(current_location.connections or []):
            if not connection.target_id or not connection.direction:
                logger.warning(
                    f"Skipping malformed connection #{index} of {location_id}: "
                    f"target={connection.target_id!r}, direction={connection.direction!r}"
                )
                continue

            if not self.is_connection_visible(connection, location_id, door_state):
                logger.debug(
                    f"Connection {location_id}:{connection.direction} is not visible"
                )
                continue

            if exclude_target_id and connection.target_id == exclude_target_id:
                continue

            target = adventure_data.get_location(connection.target_id)
            if target is None:
                logger.warning(
                    f"Skipping connection {location_id}:{connection.direction}: "
                    f"unknown target location '{connection.target_id}'"
                )
                continue

            visible.append(
                self._describe_connection(
                    connection=connection,
                    target=target,
                    location_id=location_id,
                    adventure_data=adventure_data,
                    door_state=door_state,
                    enemies=enemies_by_location.get(target.id) or [],
                )
            )

        return visible

    def _describe_connection(
        self,
        connection: Connection,
        target: Location,
        location_id: str,
        adventure_data: AdventureData,
        door_state: Mapping[DoorKey, bool],
        enemies: list[EnemySnapshot],
    ) -> str:
        """Render the context line for one visible connection."""
        text = f"To {connection.direction}: {target.title}"

        description = self._short_description(target.description)
        if description:
            text += f". {description}"

        passage = self._passage_note(connection, location_id, door_state)
        if passage:
            text += f" ({passage})"

        entities = self._entities_clause(target, adventure_data, enemies)
        if entities:
            text += f" [{ENTITIES_PREFIX} {entities}]"

        return text

    def _short_description(self, description: Optional[str]) -> str:
        if not description:
            return ""
        description = " ".join(description.split())
        if len(description) <= self.description_max_chars:
            return description
        return description[: self.description_max_chars].rstrip() + "..."

    def _passage_note(
        self,
        connection: Connection,
        location_id: str,
        door_state: Mapping[DoorKey, bool],
    ) -> str:
        if door_state.get(DoorKey(location_id, connection.direction)):
            return "through an open door"
        if connection.visibility == Visibility.OPEN:
            return "through an open passage"
        if connection.is_open:
            return "through an open doorway"
        return ""

    def _entities_clause(
        self,
        target: Location,
        adventure_data: AdventureData,
        enemies: list[EnemySnapshot],
    ) -> str:
        """List who is in the target location.

        Live snapshots from the combat tracker win. Without them the
        adventure's own ``entities_present`` ids are resolved by name.
        """
        if enemies:
            if not self.include_hidden_enemies:
                enemies = filter_visible_enemies(enemies)
            return ", ".join(self._format_enemy(e) for e in enemies)

        names = []
        for entity_id in target.entities_present:
            entity = adventure_data.get_entity(entity_id)
            if entity is None:
                logger.warning(
                    f"Location '{target.id}' references unknown entity '{entity_id}'"
                )
                continue
            if not self.include_hidden_enemies and "hidden" in (entity.disposition, entity.status):
                continue
            names.append(f"{entity.name} ({entity.type or 'unknown'})")

        return ", ".join(names)

    @staticmethod
    def _format_enemy(enemy: EnemySnapshot) -> str:
        if enemy.hp is None:
            return f"{enemy.name} ({enemy.type})"
        if enemy.is_dead:
            return f"{enemy.name} ({enemy.type}, dead)"
        if is_entity_out_of_combat(enemy):
            return f"{enemy.name} ({enemy.type}, down)"
        return f"{enemy.name} ({enemy.type}, {enemy.hp.current}/{enemy.hp.max} HP)"


def compute_visible_connections(
    current_location: Location,
    location_id: str,
    adventure_data: AdventureData,
    open_door_state: Optional[Mapping[DoorStateKey, bool]] = None,
    enemies_by_location: Optional[EnemiesByLocation] = None,
) -> list[str]:
    """Compute visible connections with the default visibility policy."""
    return VisibilityContextBuilder().compute_visible_connections(
        current_location=current_location,
        location_id=location_id,
        adventure_data=adventure_data,
        open_door_state=open_door_state,
        enemies_by_location=enemies_by_location,
    )
