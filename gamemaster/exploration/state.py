"""Fog of war and hazard detection."""

import logging
from enum import Enum
from typing import Optional, Sequence

from pydantic import Field

from gamemaster.adventure.models import (
    AdventureModel,
    ExplorationMode,
    Hazard,
    Location,
    Visibility,
)

logger = logging.getLogger(__name__)

PERCEPTION_SKILL_NAMES = {"perception", "percepción"}


class VisitStatus(str, Enum):
    """What the party knows about a location."""

    UNKNOWN = "unknown"
    SEEN = "seen"
    VISITED = "visited"


class KnownLocation(AdventureModel):
    """Exploration record for one location."""

    status: VisitStatus = VisitStatus.UNKNOWN
    last_visited: int = 0  # world time in minutes
    discovered_secrets: list[str] = Field(default_factory=list)
    cleared_hazards: list[str] = Field(default_factory=list)


class ExplorationState(AdventureModel):
    """Everything the party has discovered so far."""

    known_locations: dict[str, KnownLocation] = Field(default_factory=dict)

    def status_of(self, location_id: str) -> VisitStatus:
        known = self.known_locations.get(location_id)
        return known.status if known else VisitStatus.UNKNOWN


class PartyMember(AdventureModel):
    """The parts of a character sheet that passive perception needs."""

    name: str
    wisdom: int = 10
    proficiency_bonus: int = 2
    skills: list[str] = Field(default_factory=list)  # proficient skill names

    @property
    def passive_perception(self) -> int:
        """10 + WIS modifier, plus proficiency if proficient in Perception."""
        passive = 10 + (self.wisdom - 10) // 2
        if any(skill.lower() in PERCEPTION_SKILL_NAMES for skill in self.skills):
            passive += self.proficiency_bonus
        return passive


class ExplorationManager:
    """Updates exploration state as the party moves. Never mutates its input."""

    @staticmethod
    def update_exploration_state(
        state: Optional[ExplorationState],
        location: Location,
        world_minutes: int,
    ) -> ExplorationState:
        """Mark the current location visited and reveal what can be seen from it.

        Open-visibility neighbours become ``seen`` unless already visited.
        Other neighbours get an ``unknown`` entry if they have none yet.
        """
        state = state or ExplorationState()
        known = {
            loc_id: record.model_copy(deep=True)
            for loc_id, record in state.known_locations.items()
        }

        current = known.get(location.id) or KnownLocation()
        known[location.id] = current.model_copy(
            update={"status": VisitStatus.VISITED, "last_visited": world_minutes}
        )

        for connection in location.connections:
            target_id = connection.target_id
            if not target_id:
                continue

            record = known.get(target_id)
            if record and record.status == VisitStatus.VISITED:
                continue

            if connection.visibility == Visibility.OPEN:
                known[target_id] = (record or KnownLocation()).model_copy(
                    update={"status": VisitStatus.SEEN}
                )
            elif record is None:
                known[target_id] = KnownLocation()

        return state.model_copy(update={"known_locations": known})

    @staticmethod
    def _undiscovered_hazards(
        state: Optional[ExplorationState],
        location: Location,
    ) -> list[Hazard]:
        record = state.known_locations.get(location.id) if state else None
        return [
            h for h in location.hazards
            if h.active
            and not (record and h.id in record.cleared_hazards)
            and not (record and h.id in record.discovered_secrets)
        ]

    @classmethod
    def check_passive_perception(
        cls,
        state: Optional[ExplorationState],
        location: Location,
        party: Sequence[PartyMember],
    ) -> list[Hazard]:
        """Hazards the party notices without searching.

        Uses the best passive Perception in the party. Safe locations never
        trigger checks.
        """
        if not location.hazards or location.exploration_mode == ExplorationMode.SAFE:
            return []

        hazards = cls._undiscovered_hazards(state, location)
        if not hazards or not party:
            return []

        best = max(member.passive_perception for member in party)
        return [h for h in hazards if best >= h.detection_dc]

    @classmethod
    def perform_active_search(
        cls,
        state: Optional[ExplorationState],
        location: Location,
        roll_total: int,
    ) -> list[Hazard]:
        """Hazards found by an active search roll (modifiers already applied)."""
        if not location.hazards:
            return []

        hazards = cls._undiscovered_hazards(state, location)
        return [h for h in hazards if roll_total >= h.detection_dc]

    @staticmethod
    def mark_hazards_as_discovered(
        state: Optional[ExplorationState],
        location_id: str,
        hazards: Sequence[Hazard],
    ) -> ExplorationState:
        """Record hazards as discovered secrets of a location."""
        state = state or ExplorationState()
        if not hazards:
            return state

        known = dict(state.known_locations)
        record = known.get(location_id) or KnownLocation(status=VisitStatus.VISITED)

        secrets = list(record.discovered_secrets)
        for hazard in hazards:
            if hazard.id not in secrets:
                secrets.append(hazard.id)

        known[location_id] = record.model_copy(update={"discovered_secrets": secrets})
        logger.info(f"Hazards discovered in {location_id}: {[h.id for h in hazards]}")
        return state.model_copy(update={"known_locations": known})
