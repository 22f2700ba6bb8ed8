"""Exception types shared across the game master package."""

from enum import Enum
from typing import Optional


class GameMasterError(Exception):
    """Base class for game master errors."""


class ContractViolation(GameMasterError, ValueError):
    """A caller passed data that breaks an operation's input contract.

    Raised only for structurally missing input (no adventure, no location
    list, no current location). Bad references inside otherwise valid data
    are skipped, not raised.
    """


class AdventureLoadErrorType(str, Enum):
    """Reasons an adventure document could not be loaded."""

    FILE_NOT_FOUND = "file_not_found"
    INVALID_JSON = "invalid_json"
    VALIDATION_FAILED = "validation_failed"


class AdventureLoadError(GameMasterError):
    """An adventure document could not be read, parsed or validated."""

    def __init__(
        self,
        error_type: AdventureLoadErrorType,
        message: str,
        details: Optional[list[str]] = None,
    ):
        super().__init__(message)
        self.error_type = error_type
        self.message = message
        self.details = details or []

    def __str__(self) -> str:
        if not self.details:
            return self.message
        return f"{self.message}\n" + "\n".join(self.details)
