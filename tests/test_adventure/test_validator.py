"""Tests for adventure document validation."""

from gamemaster.adventure.validator import (
    ValidationIssue,
    format_validation_errors,
    validate_adventure_structure,
)


def codes(issues):
    return [issue.code for issue in issues]


class TestValidateAdventureStructure:
    """Test validate_adventure_structure."""

    def test_valid_document(self, valid_adventure_dict):
        result = validate_adventure_structure(valid_adventure_dict)

        assert result.valid is True
        assert result.errors == []
        assert codes(result.warnings) == ["UNKNOWN_ENTITY_REFERENCE"]
        assert "ghost-1" in result.warnings[0].message

    def test_dangling_connection(self, adventure_dict):
        result = validate_adventure_structure(adventure_dict)

        assert result.valid is False
        assert codes(result.errors) == ["INVALID_CONNECTION_REFERENCE"]
        assert result.errors[0].path == "locations.0.connections.2"
        assert "room-x" in result.errors[0].message

    def test_missing_target(self, valid_adventure_dict):
        valid_adventure_dict["locations"][1]["connections"].append({"direction": "down"})

        result = validate_adventure_structure(valid_adventure_dict)

        assert codes(result.errors) == ["INVALID_CONNECTION_FORMAT"]

    def test_missing_direction_is_warning(self, valid_adventure_dict):
        valid_adventure_dict["locations"][2]["connections"] = [{"targetId": "room-a"}]

        result = validate_adventure_structure(valid_adventure_dict)

        assert result.valid is True
        assert "MISSING_DIRECTION" in codes(result.warnings)

    def test_closed_visibility_is_valid(self, valid_adventure_dict):
        valid_adventure_dict["locations"][0]["connections"][1]["visibility"] = "closed"

        result = validate_adventure_structure(valid_adventure_dict)

        assert result.valid is True

    def test_valid_fixture_leaves_raw_document_alone(self, adventure_dict, valid_adventure_dict):
        targets = [c["targetId"] for c in adventure_dict["locations"][0]["connections"]]
        assert "room-x" in targets
        assert validate_adventure_structure(adventure_dict).valid is False

    def test_duplicate_ids(self, valid_adventure_dict):
        valid_adventure_dict["locations"].append({"id": "room-b", "title": "Another B"})
        valid_adventure_dict["entities"].append({"id": "orc-1", "name": "Another orc"})

        result = validate_adventure_structure(valid_adventure_dict)

        assert codes(result.errors) == ["DUPLICATE_LOCATION_IDS", "DUPLICATE_ENTITY_IDS"]
        assert "room-b" in result.errors[0].message

    def test_invalid_starting_location(self, valid_adventure_dict):
        valid_adventure_dict["startingLocationId"] = "room-z"

        result = validate_adventure_structure(valid_adventure_dict)

        assert codes(result.errors) == ["INVALID_STARTING_LOCATION"]
        assert result.errors[0].path == "startingLocationId"

    def test_schema_errors_stop_validation(self, adventure_dict):
        del adventure_dict["locations"][1]["title"]

        result = validate_adventure_structure(adventure_dict)

        assert result.valid is False
        assert len(result.errors) == 1
        assert result.errors[0].path == "locations.1.title"
        assert result.errors[0].code == "missing"

    def test_no_locations(self):
        result = validate_adventure_structure({"adventureId": "empty", "locations": []})
        assert result.valid is False
        assert result.errors[0].path == "locations"

    def test_non_object_document(self):
        result = validate_adventure_structure(["not", "an", "adventure"])
        assert codes(result.errors) == ["INVALID_DOCUMENT"]


class TestFormatValidationErrors:
    """Test format_validation_errors."""

    def test_empty(self):
        assert format_validation_errors([]) == ""

    def test_truncates(self):
        errors = [
            ValidationIssue(path=f"locations.{i}", message=f"problem {i}", code="X")
            for i in range(7)
        ]

        message = format_validation_errors(errors, max_errors=3)

        assert message.splitlines() == [
            "- locations.0: problem 0",
            "- locations.1: problem 1",
            "- locations.2: problem 2",
            "... and 4 more errors.",
        ]
