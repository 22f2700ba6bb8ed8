"""Enemy state supplied by the combat tracker."""

from gamemaster.combat.enemy_state import (
    EnemySnapshot,
    EnemiesByLocation,
    get_enemies_for_location,
    normalize_enemy_stats,
    matches_entity_id,
    reveal_hidden_enemy,
    filter_visible_enemies,
    filter_alive_enemies,
    is_entity_active,
    is_entity_unconscious,
    is_entity_out_of_combat,
    get_dead_entity_names,
)

__all__ = [
    "EnemySnapshot",
    "EnemiesByLocation",
    "get_enemies_for_location",
    "normalize_enemy_stats",
    "matches_entity_id",
    "reveal_hidden_enemy",
    "filter_visible_enemies",
    "filter_alive_enemies",
    "is_entity_active",
    "is_entity_unconscious",
    "is_entity_out_of_combat",
    "get_dead_entity_names",
]
