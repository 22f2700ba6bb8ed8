"""Spatial summaries of adventure locations for debugging data files."""

from gamemaster.adventure.models import AdventureData


def describe_location(adventure: AdventureData, location_id: str) -> list[str]:
    """Describe a location's region and outgoing connections.

    Returns a single "not found" line for unknown IDs.
    """
    location = adventure.get_location(location_id)
    if location is None:
        return [f"Location {location_id} not found"]

    lines = [
        f"{location.id}: {location.title}",
        f"  Region: {location.region_id or '-'}",
        f"  Mode: {location.exploration_mode.value}, light: {location.light_level.value}",
        f"  Connections: {len(location.connections)}",
    ]
    for conn in location.connections:
        target = adventure.get_location(conn.target_id)
        marker = "" if target else " [MISSING]"
        details = ", ".join(
            part for part in (
                conn.direction or "no direction",
                conn.type,
                conn.visibility.value,
                conn.travel_time,
            ) if part
        )
        lines.append(f"    -> {conn.target_id} ({details}){marker}")

    if location.entities_present:
        lines.append(f"  Entities: {', '.join(location.entities_present)}")

    return lines
