"""Exploration layer: visibility, fog of war and turn context."""

from gamemaster.exploration.visibility import (
    ENTITIES_PREFIX,
    VisibilityContextBuilder,
    compute_visible_connections,
)
from gamemaster.exploration.state import (
    VisitStatus,
    KnownLocation,
    ExplorationState,
    PartyMember,
    ExplorationManager,
)
from gamemaster.exploration.world_time import WorldTime
from gamemaster.exploration.context_builder import (
    ExplorationContext,
    ExplorationContextResult,
    ExplorationContextBuilder,
)

__all__ = [
    "ENTITIES_PREFIX",
    "VisibilityContextBuilder",
    "compute_visible_connections",
    "VisitStatus",
    "KnownLocation",
    "ExplorationState",
    "PartyMember",
    "ExplorationManager",
    "WorldTime",
    "ExplorationContext",
    "ExplorationContextResult",
    "ExplorationContextBuilder",
]
