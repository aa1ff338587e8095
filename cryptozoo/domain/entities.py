"""Internal domain entities as TypedDicts for type safety at boundaries."""
from __future__ import annotations

from typing import Any, TypedDict


ENTITY_TYPES = ("vertex", "edge")
EDIT_ACTIONS = ("create", "update", "delete")
EDIT_STATUSES = ("pending", "approved", "rejected")
USER_ROLES = ("pending", "user", "admin")
EDGE_TYPES = ("construction", "impossibility", "reduction", "separation")

# Never compared or accepted as proposed changes
SYSTEM_FIELDS = ("id", "created_at", "updated_at")


class FieldDiff(TypedDict):
    field: str
    old_value: Any
    new_value: Any
    changed: bool


class GraphNode(TypedDict):
    id: str
    label: str
    type: str


class GraphLink(TypedDict):
    source: str
    target: str
    edge_id: str
    type: str
