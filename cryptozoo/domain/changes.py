"""Typed field changes proposed by an edit request.

A raw payload (JSON object) is validated against the editable fields of its
entity type before it is accepted into the moderation queue, and is then
carried as a tuple of ``FieldChange`` values tagged with that entity type.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from cryptozoo.domain.entities import EDGE_TYPES, SYSTEM_FIELDS
from cryptozoo.domain.errors import ValidationError


class ReferencePayload(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str = ""
    author: str = ""
    year: Optional[int] = None
    url: str = ""


class VertexPayload(BaseModel):
    """Editable vertex fields; every field is optional in a partial payload."""
    model_config = ConfigDict(extra="forbid")

    id: Optional[str] = None
    name: Optional[str] = None
    abbreviation: Optional[str] = None
    type: Optional[str] = None
    tags: Optional[List[str]] = None
    description: Optional[str] = None
    definition: Optional[str] = None
    references: Optional[List[ReferencePayload]] = None
    related_vertices: Optional[List[str]] = None
    notes: Optional[str] = None
    wip: Optional[bool] = None


class EdgePayload(BaseModel):
    """Editable edge fields; every field is optional in a partial payload."""
    model_config = ConfigDict(extra="forbid")

    id: Optional[str] = None
    type: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    overview: Optional[str] = None
    theorem: Optional[str] = None
    construction: Optional[str] = None
    proof: Optional[str] = None
    source_vertices: Optional[List[str]] = None
    target_vertices: Optional[List[str]] = None
    tags: Optional[List[str]] = None
    model: Optional[str] = None
    references: Optional[List[ReferencePayload]] = None
    notes: Optional[str] = None
    wip: Optional[bool] = None


PAYLOAD_MODELS = {"vertex": VertexPayload, "edge": EdgePayload}

# Non-nullable columns; a payload may omit them but never clear them
REQUIRED_FIELDS = {"vertex": ("name",), "edge": ("name", "type")}


@dataclass(frozen=True)
class FieldChange:
    field: str
    value: Any


@dataclass(frozen=True)
class VertexChanges:
    changes: Tuple[FieldChange, ...]
    entity_type: str = "vertex"

    def as_dict(self) -> Dict[str, Any]:
        return {change.field: change.value for change in self.changes}

    def fields(self) -> List[str]:
        return [change.field for change in self.changes]


@dataclass(frozen=True)
class EdgeChanges:
    changes: Tuple[FieldChange, ...]
    entity_type: str = "edge"

    def as_dict(self) -> Dict[str, Any]:
        return {change.field: change.value for change in self.changes}

    def fields(self) -> List[str]:
        return [change.field for change in self.changes]


EntityChanges = Union[VertexChanges, EdgeChanges]


def _dedupe(values: List[str]) -> List[str]:
    seen = []
    for value in values:
        value = value.strip()
        if value and value not in seen:
            seen.append(value)
    return seen


def parse_changes(entity_type: str, data: Dict[str, Any], allow_id: bool = False) -> EntityChanges:
    """
    Validate a raw payload and turn it into typed field changes.
    
    Args:
        entity_type: "vertex" or "edge"
        data: Proposed field values
        allow_id: Accept an "id" field (only meaningful for create)
        
    Returns:
        VertexChanges or EdgeChanges in payload order
        
    Raises:
        ValidationError: Unknown entity type, unknown field, system field,
            or a value of the wrong type
    """
    payload_model = PAYLOAD_MODELS.get(entity_type)
    if payload_model is None:
        raise ValidationError(f"Unknown entity type: {entity_type}")
    if not isinstance(data, dict):
        raise ValidationError("Edit payload must be a JSON object")

    for field in SYSTEM_FIELDS:
        if field in data and not (field == "id" and allow_id):
            raise ValidationError(f"Field '{field}' cannot be changed")

    try:
        payload = payload_model.model_validate(data)
    except PydanticValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in e.errors()
        )
        raise ValidationError(f"Invalid {entity_type} payload: {problems}") from e

    values = payload.model_dump(include=set(data.keys()))
    for required in REQUIRED_FIELDS[entity_type]:
        if required in values and values[required] is None:
            raise ValidationError(f"Field '{required}' cannot be empty")
    if entity_type == "edge" and values.get("type") is not None and values["type"] not in EDGE_TYPES:
        raise ValidationError(f"Edge type must be one of: {', '.join(EDGE_TYPES)}")
    for list_field in ("tags", "related_vertices", "source_vertices", "target_vertices"):
        if values.get(list_field) is not None:
            values[list_field] = _dedupe(values[list_field])

    changes = tuple(FieldChange(field, values[field]) for field in data.keys())
    if entity_type == "vertex":
        return VertexChanges(changes=changes)
    return EdgeChanges(changes=changes)
