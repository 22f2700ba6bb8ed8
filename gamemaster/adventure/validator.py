"""Structural and referential validation of adventure documents."""

import logging
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from gamemaster.adventure.models import AdventureData

logger = logging.getLogger(__name__)


class ValidationIssue(BaseModel):
    """A fatal problem with an adventure document."""

    path: str
    message: str
    code: str


class DataIntegrityWarning(BaseModel):
    """A non-fatal problem. The offending item is skipped at play time."""

    path: str
    message: str
    code: str


class ValidationResult(BaseModel):
    """Outcome of validating an adventure document."""

    valid: bool
    errors: list[ValidationIssue] = Field(default_factory=list)
    warnings: list[DataIntegrityWarning] = Field(default_factory=list)


def _schema_issues(error: ValidationError) -> list[ValidationIssue]:
    return [
        ValidationIssue(
            path=".".join(str(part) for part in err["loc"]) or "root",
            message=err["msg"],
            code=err["type"],
        )
        for err in error.errors()
    ]


def _duplicates(ids: list[str]) -> list[str]:
    seen: set[str] = set()
    duplicates: list[str] = []
    for item in ids:
        if item in seen and item not in duplicates:
            duplicates.append(item)
        seen.add(item)
    return duplicates


def validate_adventure_structure(data: Any) -> ValidationResult:
    """Validate an adventure document.

    Schema errors are reported first and stop validation, since the
    referential checks cannot trust malformed data.

    Args:
        data: The decoded JSON document.

    Returns:
        ValidationResult with errors and data-integrity warnings.
    """
    if not isinstance(data, dict):
        return ValidationResult(
            valid=False,
            errors=[ValidationIssue(
                path="root",
                message="Adventure document must be a JSON object.",
                code="INVALID_DOCUMENT",
            )],
        )

    try:
        adventure = AdventureData.model_validate(data)
    except ValidationError as e:
        return ValidationResult(valid=False, errors=_schema_issues(e))

    errors: list[ValidationIssue] = []
    warnings: list[DataIntegrityWarning] = []

    location_ids = [loc.id for loc in adventure.locations]
    duplicate_locations = _duplicates(location_ids)
    if duplicate_locations:
        errors.append(ValidationIssue(
            path="locations",
            message=f"Duplicate location IDs found: {', '.join(duplicate_locations)}",
            code="DUPLICATE_LOCATION_IDS",
        ))

    duplicate_entities = _duplicates([ent.id for ent in adventure.entities])
    if duplicate_entities:
        errors.append(ValidationIssue(
            path="entities",
            message=f"Duplicate entity IDs found: {', '.join(duplicate_entities)}",
            code="DUPLICATE_ENTITY_IDS",
        ))

    known_locations = set(location_ids)
    for index, location in enumerate(adventure.locations):
        for conn_index, connection in enumerate(location.connections):
            path = f"locations.{index}.connections.{conn_index}"

            if not connection.target_id:
                errors.append(ValidationIssue(
                    path=path,
                    message=f"Location '{location.title}' ({location.id}) has a connection without a target ID.",
                    code="INVALID_CONNECTION_FORMAT",
                ))
                continue

            if connection.target_id not in known_locations:
                errors.append(ValidationIssue(
                    path=path,
                    message=(
                        f"Location '{location.title}' ({location.id}) connects to "
                        f"a nonexistent location: '{connection.target_id}'"
                    ),
                    code="INVALID_CONNECTION_REFERENCE",
                ))

            if not connection.direction:
                warnings.append(DataIntegrityWarning(
                    path=path,
                    message=(
                        f"Connection {location.id} -> {connection.target_id} has no "
                        f"direction and will not be listed as visible."
                    ),
                    code="MISSING_DIRECTION",
                ))

        for ent_index, entity_id in enumerate(location.entities_present):
            if adventure.get_entity(entity_id) is None:
                warnings.append(DataIntegrityWarning(
                    path=f"locations.{index}.entitiesPresent.{ent_index}",
                    message=f"Location '{location.id}' references unknown entity '{entity_id}'",
                    code="UNKNOWN_ENTITY_REFERENCE",
                ))

    if adventure.starting_location_id and adventure.starting_location_id not in known_locations:
        errors.append(ValidationIssue(
            path="startingLocationId",
            message=(
                f"startingLocationId '{adventure.starting_location_id}' "
                f"does not match any location."
            ),
            code="INVALID_STARTING_LOCATION",
        ))

    if warnings:
        logger.debug(f"Adventure {adventure.adventure_id}: {len(warnings)} integrity warning(s)")

    return ValidationResult(valid=not errors, errors=errors, warnings=warnings)


def format_validation_errors(errors: list[ValidationIssue], max_errors: int = 5) -> str:
    """Format the first few errors as a bulleted list."""
    if not errors:
        return ""

    message = "\n".join(f"- {err.path}: {err.message}" for err in errors[:max_errors])

    remaining = len(errors) - max_errors
    if remaining > 0:
        message += f"\n... and {remaining} more errors."

    return message
