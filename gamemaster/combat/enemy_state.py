"""Enemy state helpers shared by the exploration and combat layers.

Live enemy rosters are owned by the combat tracker and handed to the
exploration layer as ``EnemySnapshot`` lists keyed by location id. These
helpers resolve, normalize and filter those snapshots without mutating them.
"""

import logging
import re
from typing import Any, Mapping, Optional, Sequence

from pydantic import Field

from gamemaster.adventure.models import AdventureModel, Entity, HitPoints

logger = logging.getLogger(__name__)

DEFAULT_HP = 10


class EnemySnapshot(AdventureModel):
    """Display fields of a live enemy at one point in time."""

    id: str
    name: str
    type: str = "enemy"
    hp: Optional[HitPoints] = None
    ac: Optional[int] = None
    disposition: Optional[str] = None
    status: Optional[str] = None
    is_dead: bool = False
    unique_id: Optional[str] = None
    adventure_id: Optional[str] = None
    conditions: list[str] = Field(default_factory=list)


EnemiesByLocation = Mapping[str, Sequence[EnemySnapshot]]


def get_enemies_for_location(
    location_id: str,
    enemies_by_location: Optional[EnemiesByLocation],
    fallback_enemies: Optional[Sequence[EnemySnapshot]] = None,
) -> list[EnemySnapshot]:
    """Get the enemy roster for a location.

    Priority:
    1. ``enemies_by_location[location_id]`` if the key exists
    2. ``fallback_enemies`` if non-empty
    3. An empty list
    """
    if enemies_by_location and location_id in enemies_by_location:
        return list(enemies_by_location[location_id])

    if fallback_enemies:
        return list(fallback_enemies)

    return []


def _parse_hp(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return int(value)
    match = re.match(r"\s*(-?\d+)", str(value))
    return int(match.group(1)) if match else None


def normalize_enemy_stats(entity: Entity) -> EnemySnapshot:
    """Build a snapshot from an adventure entity.

    Adventure JSON keeps combat numbers under ``stats`` (``{"hp": 58,
    "ac": 12}``) while snapshots carry ``hp = {current, max}`` and ``ac`` at
    the top level. Missing or unparsable hit points default to 10/10.
    """
    hp = entity.hp
    if hp is None and "hp" in entity.stats:
        parsed = _parse_hp(entity.stats["hp"])
        if parsed is None:
            logger.warning(
                f"Unparsable hp {entity.stats['hp']!r} on entity {entity.id}, using default"
            )
            parsed = DEFAULT_HP
        hp = HitPoints(current=parsed, max=parsed)
    if hp is None:
        hp = HitPoints(current=DEFAULT_HP, max=DEFAULT_HP)

    ac = entity.stats.get("ac")
    return EnemySnapshot(
        id=entity.id,
        name=entity.name,
        type=entity.type or "enemy",
        hp=hp,
        ac=_parse_hp(ac) if ac is not None else None,
        disposition=entity.disposition,
        status=entity.status,
        adventure_id=entity.id,
    )


def matches_entity_id(enemy: EnemySnapshot, entity_id: str) -> bool:
    """Check whether a snapshot refers to the given adventure entity."""
    return entity_id in (enemy.id, enemy.unique_id, enemy.adventure_id)


def reveal_hidden_enemy(enemy: EnemySnapshot) -> EnemySnapshot:
    """Return a copy of a hidden enemy (mimic, ambush) made hostile and active."""
    return enemy.model_copy(update={"disposition": "hostile", "status": "active"})


def filter_visible_enemies(enemies: Sequence[EnemySnapshot]) -> list[EnemySnapshot]:
    """Drop enemies whose disposition or status is hidden."""
    return [
        e for e in enemies
        if e.disposition != "hidden" and e.status != "hidden"
    ]


def filter_alive_enemies(enemies: Sequence[EnemySnapshot]) -> list[EnemySnapshot]:
    """Keep enemies with hit points left. Enemies without hp count as alive."""
    return [e for e in enemies if e.hp is None or e.hp.current > 0]


def is_entity_active(enemy: Optional[EnemySnapshot]) -> bool:
    """Alive and conscious."""
    if enemy is None or enemy.hp is None:
        return False
    return enemy.hp.current > 0 and not enemy.is_dead


def is_entity_unconscious(enemy: Optional[EnemySnapshot]) -> bool:
    """Down at 0 hp but not dead."""
    if enemy is None or enemy.hp is None:
        return False
    return enemy.hp.current <= 0 and not enemy.is_dead


def is_entity_out_of_combat(enemy: Optional[EnemySnapshot]) -> bool:
    """Dead or unconscious. Enemies without hp cannot act either."""
    if enemy is None or enemy.hp is None:
        return True
    return enemy.hp.current <= 0 or enemy.is_dead


def get_dead_entity_names(enemies: Sequence[EnemySnapshot]) -> list[str]:
    """Names of enemies that are out of combat."""
    return [
        e.name or e.id or "Unknown entity"
        for e in enemies
        if is_entity_out_of_combat(e)
    ]
