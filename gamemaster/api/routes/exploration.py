"""Exploration context endpoints used by the narration flows."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from gamemaster.adventure.loader import AdventureRepository, get_adventure_repository
from gamemaster.adventure.models import AdventureData, DoorKey
from gamemaster.api.routes.adventures import load_adventure_or_404
from gamemaster.combat.enemy_state import EnemySnapshot
from gamemaster.core.errors import ContractViolation
from gamemaster.exploration.context_builder import (
    ExplorationContextBuilder,
    ExplorationContextResult,
)
from gamemaster.exploration.state import ExplorationState, PartyMember
from gamemaster.exploration.visibility import VisibilityContextBuilder
from gamemaster.exploration.world_time import WorldTime

router = APIRouter()
logger = logging.getLogger(__name__)


# ===================
# Request/Response Models
# ===================


class DoorState(BaseModel):
    """A door whose state changed during play."""

    location_id: str = Field(..., description="Location the door leads out of")
    direction: str = Field(..., description="Direction of the connection")
    is_open: bool = Field(True, description="Whether the door is open")


def door_state_mapping(doors: list[DoorState]) -> dict[DoorKey, bool]:
    """Convert request door states to the builder's door store."""
    return {DoorKey(d.location_id, d.direction): d.is_open for d in doors}


class VisibleConnectionsRequest(BaseModel):
    """Request to compute visible connections for an inline adventure."""

    adventure: AdventureData
    location_id: str = Field(..., description="Current location ID")
    open_doors: list[DoorState] = Field(default_factory=list)
    enemies_by_location: dict[str, list[EnemySnapshot]] = Field(default_factory=dict)
    exclude_target_id: Optional[str] = Field(None, description="Location the party came from")
    reveal_hidden_open_doors: bool = Field(
        False, description="List hidden passages whose isOpen flag is set"
    )
    include_hidden_enemies: bool = Field(
        False, description="List enemies whose disposition or status is hidden"
    )


class VisibleConnectionsResponse(BaseModel):
    """Visible connections of a location."""

    location_id: str
    visible_connections: list[str] = Field(default_factory=list)


class ExplorationContextRequest(BaseModel):
    """Request to build the turn's exploration context for a stored adventure."""

    adventure_id: str
    location_id: str
    party: list[PartyMember] = Field(default_factory=list)
    exploration_state: Optional[ExplorationState] = None
    world_time: Optional[WorldTime] = None
    came_from_location_id: Optional[str] = None
    open_doors: list[DoorState] = Field(default_factory=list)
    enemies_by_location: dict[str, list[EnemySnapshot]] = Field(default_factory=dict)


# ===================
# Endpoints
# ===================


@router.post("/visible-connections")
async def visible_connections(request: VisibleConnectionsRequest) -> VisibleConnectionsResponse:
    """Describe what the party can perceive from its current location."""
    location = request.adventure.get_location(request.location_id)
    if location is None:
        raise HTTPException(
            status_code=404, detail=f"Location '{request.location_id}' not found"
        )

    builder = VisibilityContextBuilder(
        reveal_hidden_open_doors=request.reveal_hidden_open_doors,
        include_hidden_enemies=request.include_hidden_enemies,
    )
    try:
        connections = builder.compute_visible_connections(
            current_location=location,
            location_id=request.location_id,
            adventure_data=request.adventure,
            open_door_state=door_state_mapping(request.open_doors),
            enemies_by_location=request.enemies_by_location,
            exclude_target_id=request.exclude_target_id,
        )
    except ContractViolation as e:
        raise HTTPException(status_code=400, detail=str(e))

    return VisibleConnectionsResponse(
        location_id=request.location_id,
        visible_connections=connections,
    )


@router.post("/context")
async def exploration_context(
    request: ExplorationContextRequest,
    repository: AdventureRepository = Depends(get_adventure_repository),
) -> ExplorationContextResult:
    """Build the exploration context for the narrator."""
    adventure = load_adventure_or_404(repository, request.adventure_id)

    if adventure.get_location(request.location_id) is None:
        raise HTTPException(
            status_code=404, detail=f"Location '{request.location_id}' not found"
        )

    try:
        return ExplorationContextBuilder().build(
            adventure=adventure,
            location_id=request.location_id,
            party=request.party,
            exploration_state=request.exploration_state,
            world_time=request.world_time,
            came_from_location_id=request.came_from_location_id,
            open_doors=door_state_mapping(request.open_doors),
            enemies_by_location=request.enemies_by_location,
        )
    except ContractViolation as e:
        logger.error(f"Failed to build exploration context: {e}")
        raise HTTPException(status_code=400, detail=str(e))
