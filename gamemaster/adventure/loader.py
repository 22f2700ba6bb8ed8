"""Adventure repository backed by a directory of JSON documents."""

import hashlib
import json
import logging
from pathlib import Path
from typing import Optional

from gamemaster.adventure.models import AdventureData
from gamemaster.adventure.validator import (
    format_validation_errors,
    validate_adventure_structure,
)
from gamemaster.core.config import settings
from gamemaster.core.errors import AdventureLoadError, AdventureLoadErrorType

logger = logging.getLogger(__name__)


class AdventureRepository:
    """Loads, validates and caches adventures from ``<adventures_dir>/<id>.json``.

    A cached adventure is reused until the file's content changes.
    """

    def __init__(self, adventures_dir: Optional[Path] = None):
        self.adventures_dir = Path(adventures_dir or settings.adventures_dir)
        self._cache: dict[str, tuple[str, AdventureData]] = {}

    def list_adventures(self) -> list[str]:
        """List the IDs of the adventures available on disk."""
        if not self.adventures_dir.exists():
            return []
        return sorted(p.stem for p in self.adventures_dir.glob("*.json"))

    def path_for(self, adventure_id: str) -> Path:
        """Get the file path of an adventure by ID."""
        return self.adventures_dir / f"{Path(adventure_id).name}.json"

    def load(self, adventure_id: str) -> AdventureData:
        """Load an adventure by ID.

        Args:
            adventure_id: File stem of the adventure document.

        Returns:
            The parsed AdventureData.

        Raises:
            AdventureLoadError: If the file is missing, not JSON, or invalid.
        """
        path = self.path_for(adventure_id)
        content = self._read(path)
        digest = hashlib.sha256(content.encode("utf-8")).hexdigest()

        cached = self._cache.get(adventure_id)
        if cached and cached[0] == digest:
            return cached[1]

        adventure = self.parse(content, source=str(path))
        self._cache[adventure_id] = (digest, adventure)
        logger.info(
            f"Loaded adventure '{adventure_id}' "
            f"({len(adventure.locations)} locations, {len(adventure.entities)} entities)"
        )
        return adventure

    def load_file(self, path: Path) -> AdventureData:
        """Load an adventure from an explicit path, bypassing the cache."""
        return self.parse(self._read(Path(path)), source=str(path))

    def clear_cache(self) -> None:
        """Forget all cached adventures."""
        self._cache.clear()

    @staticmethod
    def parse(content: str, source: str = "<string>") -> AdventureData:
        """Decode, validate and parse an adventure document.

        Raises:
            AdventureLoadError: If the content is not JSON or fails validation.
        """
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise AdventureLoadError(
                AdventureLoadErrorType.INVALID_JSON,
                f"Invalid JSON in {source}: {e}",
            ) from e

        result = validate_adventure_structure(data)
        if not result.valid:
            logger.error(f"Adventure {source} failed validation with {len(result.errors)} error(s)")
            raise AdventureLoadError(
                AdventureLoadErrorType.VALIDATION_FAILED,
                f"Adventure {source} failed validation",
                details=format_validation_errors(result.errors).splitlines(),
            )

        for warning in result.warnings:
            logger.warning(f"{source}: {warning.message}")

        return AdventureData.model_validate(data)

    @staticmethod
    def _read(path: Path) -> str:
        if not path.is_file():
            raise AdventureLoadError(
                AdventureLoadErrorType.FILE_NOT_FOUND,
                f"Adventure file not found: {path}",
            )
        return path.read_text(encoding="utf-8")


_repository: Optional[AdventureRepository] = None


def get_adventure_repository() -> AdventureRepository:
    """Get the adventure repository singleton."""
    global _repository
    if _repository is None:
        _repository = AdventureRepository()
    return _repository
