"""Adventure data model, validation and loading."""

from gamemaster.adventure.models import (
    Visibility,
    ExplorationMode,
    LightLevel,
    HazardType,
    HitPoints,
    Connection,
    Hazard,
    Entity,
    Location,
    AdventureData,
    DoorKey,
    normalize_door_state,
)
from gamemaster.adventure.validator import (
    ValidationIssue,
    DataIntegrityWarning,
    ValidationResult,
    validate_adventure_structure,
    format_validation_errors,
)
from gamemaster.adventure.loader import AdventureRepository, get_adventure_repository
from gamemaster.adventure.spatial import describe_location

__all__ = [
    # Models
    "Visibility",
    "ExplorationMode",
    "LightLevel",
    "HazardType",
    "HitPoints",
    "Connection",
    "Hazard",
    "Entity",
    "Location",
    "AdventureData",
    "DoorKey",
    "normalize_door_state",
    # Validation
    "ValidationIssue",
    "DataIntegrityWarning",
    "ValidationResult",
    "validate_adventure_structure",
    "format_validation_errors",
    # Loading
    "AdventureRepository",
    "get_adventure_repository",
    "describe_location",
]
