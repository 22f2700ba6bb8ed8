"""Core configuration and utilities."""

from gamemaster.core.config import settings, get_settings
from gamemaster.core.errors import (
    GameMasterError,
    ContractViolation,
    AdventureLoadError,
    AdventureLoadErrorType,
)
from gamemaster.core.logging import configure_logging

__all__ = [
    "settings",
    "get_settings",
    "GameMasterError",
    "ContractViolation",
    "AdventureLoadError",
    "AdventureLoadErrorType",
    "configure_logging",
]
