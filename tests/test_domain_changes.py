"""Tests for typed field changes parsed from edit payloads."""
from __future__ import annotations

import pytest

from cryptozoo.domain.changes import EdgeChanges, FieldChange, VertexChanges, parse_changes
from cryptozoo.domain.errors import ValidationError


class TestParseChanges:
    """Test payload validation."""

    def test_vertex_partial_payload(self):
        """Test that a partial vertex payload keeps only the given fields in order."""
        changes = parse_changes("vertex", {"description": "Updated text", "tags": ["a", "a", " b "]})

        assert isinstance(changes, VertexChanges)
        assert changes.entity_type == "vertex"
        assert changes.fields() == ["description", "tags"]
        assert changes.as_dict() == {"description": "Updated text", "tags": ["a", "b"]}
        assert changes.changes[0] == FieldChange("description", "Updated text")

    def test_edge_payload(self):
        changes = parse_changes("edge", {"type": "reduction", "source_vertices": ["owf"]})
        assert isinstance(changes, EdgeChanges)
        assert changes.as_dict() == {"type": "reduction", "source_vertices": ["owf"]}

    def test_references_are_normalized(self):
        changes = parse_changes("vertex", {"references": [{"title": "HILL", "year": 1999}]})
        assert changes.as_dict()["references"] == [
            {"title": "HILL", "author": "", "year": 1999, "url": ""}
        ]

    def test_empty_payload(self):
        assert parse_changes("vertex", {}).changes == ()

    def test_unknown_field_rejected(self):
        with pytest.raises(ValidationError, match="Invalid vertex payload"):
            parse_changes("vertex", {"colour": "blue"})

    def test_wrong_value_type_rejected(self):
        with pytest.raises(ValidationError):
            parse_changes("edge", {"source_vertices": "owf"})

    def test_unknown_edge_type_rejected(self):
        with pytest.raises(ValidationError, match="Edge type"):
            parse_changes("edge", {"type": "friendship"})

    def test_system_fields_rejected(self):
        with pytest.raises(ValidationError, match="cannot be changed"):
            parse_changes("vertex", {"created_at": "2020-01-01"})
        with pytest.raises(ValidationError, match="cannot be changed"):
            parse_changes("vertex", {"id": "new-id"})

    def test_id_allowed_for_create(self):
        changes = parse_changes("vertex", {"id": "new-id", "name": "New"}, allow_id=True)
        assert changes.as_dict() == {"id": "new-id", "name": "New"}

    def test_unknown_entity_type(self):
        with pytest.raises(ValidationError, match="Unknown entity type"):
            parse_changes("user", {"name": "x"})

    def test_non_object_payload(self):
        with pytest.raises(ValidationError, match="JSON object"):
            parse_changes("vertex", ["name"])

    def test_required_fields_cannot_be_cleared(self):
        """Test that non-nullable fields may be omitted but never set to null."""
        with pytest.raises(ValidationError, match="'name' cannot be empty"):
            parse_changes("vertex", {"name": None})
        with pytest.raises(ValidationError, match="'type' cannot be empty"):
            parse_changes("edge", {"type": None})
        assert parse_changes("vertex", {"notes": None}).as_dict() == {"notes": None}
