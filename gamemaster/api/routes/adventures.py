"""Adventure listing, validation and inspection endpoints."""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, HTTPException
from pydantic import BaseModel, Field

from gamemaster.adventure.loader import AdventureRepository, get_adventure_repository
from gamemaster.adventure.models import AdventureData
from gamemaster.adventure.spatial import describe_location
from gamemaster.adventure.validator import ValidationResult, validate_adventure_structure
from gamemaster.core.errors import AdventureLoadError, AdventureLoadErrorType

router = APIRouter()
logger = logging.getLogger(__name__)


# ===================
# Response Models
# ===================


class AdventureListResponse(BaseModel):
    """Adventures available on disk."""

    adventures: list[str] = Field(default_factory=list)


class ConnectionSummary(BaseModel):
    """One outgoing connection of a location."""

    target_id: Optional[str] = None
    direction: Optional[str] = None
    visibility: str
    is_open: Optional[bool] = None
    target_exists: bool


class LocationSummary(BaseModel):
    """Spatial summary of a location."""

    id: str
    title: str
    description: Optional[str] = None
    region_id: Optional[str] = None
    connections: list[ConnectionSummary] = Field(default_factory=list)
    entities_present: list[str] = Field(default_factory=list)
    report: list[str] = Field(default_factory=list)


def load_adventure_or_404(repository: AdventureRepository, adventure_id: str) -> AdventureData:
    """Load an adventure, translating load errors into HTTP errors."""
    try:
        return repository.load(adventure_id)
    except AdventureLoadError as e:
        if e.error_type == AdventureLoadErrorType.FILE_NOT_FOUND:
            raise HTTPException(status_code=404, detail=f"Adventure '{adventure_id}' not found")
        logger.error(f"Failed to load adventure {adventure_id}: {e}")
        raise HTTPException(
            status_code=422,
            detail={"message": e.message, "errors": e.details},
        )


# ===================
# Endpoints
# ===================


@router.get("")
async def list_adventures(
    repository: AdventureRepository = Depends(get_adventure_repository),
) -> AdventureListResponse:
    """List the adventures that can be loaded."""
    return AdventureListResponse(adventures=repository.list_adventures())


@router.post("/validate")
async def validate_adventure(data: Any = Body(...)) -> ValidationResult:
    """Validate an adventure document without loading it.

    Invalid documents still return 200; check ``valid`` and ``errors``.
    """
    return validate_adventure_structure(data)


@router.get("/{adventure_id}/locations/{location_id}")
async def get_location(
    adventure_id: str,
    location_id: str,
    repository: AdventureRepository = Depends(get_adventure_repository),
) -> LocationSummary:
    """Get the spatial summary of one location."""
    adventure = load_adventure_or_404(repository, adventure_id)

    location = adventure.get_location(location_id)
    if location is None:
        raise HTTPException(status_code=404, detail=f"Location '{location_id}' not found")

    return LocationSummary(
        id=location.id,
        title=location.title,
        description=location.description,
        region_id=location.region_id,
        connections=[
            ConnectionSummary(
                target_id=conn.target_id,
                direction=conn.direction,
                visibility=conn.visibility.value,
                is_open=conn.is_open,
                target_exists=adventure.get_location(conn.target_id) is not None,
            )
            for conn in location.connections
        ],
        entities_present=location.entities_present,
        report=describe_location(adventure, location_id),
    )
