"""Specification pattern for reusable catalog filters."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List


class Specification(ABC):
    """Abstract base for specifications (query filters)."""
    
    @abstractmethod
    def is_satisfied_by(self, candidate: Dict[str, Any]) -> bool:
        """Check if candidate satisfies this specification."""
        pass
    
    def and_(self, other: Specification) -> Specification:
        """Combine with AND logic."""
        return AndSpecification(self, other)


class AndSpecification(Specification):
    """AND composite specification."""
    
    def __init__(self, left: Specification, right: Specification):
        self.left = left
        self.right = right
    
    def is_satisfied_by(self, candidate: Dict[str, Any]) -> bool:
        return self.left.is_satisfied_by(candidate) and self.right.is_satisfied_by(candidate)


# Catalog Specifications

class HasType(Specification):
    """Vertices or edges carrying a specific type tag."""
    
    def __init__(self, type_name: str):
        self.type_name = type_name
    
    def is_satisfied_by(self, candidate: Dict[str, Any]) -> bool:
        return candidate.get("type") == self.type_name


class HasTag(Specification):
    """Vertices or edges carrying a free-form tag (case-insensitive)."""
    
    def __init__(self, tag: str):
        self.tag = tag.lower()
    
    def is_satisfied_by(self, candidate: Dict[str, Any]) -> bool:
        return self.tag in [t.lower() for t in candidate.get("tags") or []]


# Edge Specifications

class EdgeFromVertex(Specification):
    """Edges listing the vertex among their sources."""
    
    def __init__(self, vertex_id: str):
        self.vertex_id = vertex_id
    
    def is_satisfied_by(self, edge: Dict[str, Any]) -> bool:
        return self.vertex_id in (edge.get("source_vertices") or [])


class EdgeToVertex(Specification):
    """Edges listing the vertex among their targets."""
    
    def __init__(self, vertex_id: str):
        self.vertex_id = vertex_id
    
    def is_satisfied_by(self, edge: Dict[str, Any]) -> bool:
        return self.vertex_id in (edge.get("target_vertices") or [])


# Helper function to filter collections

def filter_by_specification(items: List[Dict[str, Any]], spec: Specification) -> List[Dict[str, Any]]:
    """Filter a collection using a specification."""
    return [item for item in items if spec.is_satisfied_by(item)]
