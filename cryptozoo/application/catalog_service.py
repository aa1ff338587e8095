"""Read-side service backing the browsing views (home, detail, search, graph)."""
from __future__ import annotations

from collections import Counter
from typing import Any, Dict, List

from cryptozoo.db.repositories import EdgeRepository, VertexRepository
from cryptozoo.domain.entities import EDGE_TYPES, GraphLink, GraphNode
from cryptozoo.domain.errors import NotFoundError, ValidationError
from cryptozoo.domain.specifications import HasTag, HasType, Specification, filter_by_specification


class CatalogService:
    """Assembles what each catalog page shows."""

    def __init__(self, vertices: VertexRepository, edges: EdgeRepository) -> None:
        self._vertices = vertices
        self._edges = edges

    def summary(self) -> Dict[str, Any]:
        vertices = self._vertices.get_all()
        edges = self._edges.get_all()
        counts = Counter(edge.type for edge in edges)
        return {
            "vertex_count": len(vertices),
            "edge_count": len(edges),
            "edge_type_counts": {edge_type: counts.get(edge_type, 0) for edge_type in EDGE_TYPES},
            "vertices": vertices,
            "edges": edges,
        }

    @staticmethod
    def _filter(items: List[Any], type_name: str | None, tag: str | None) -> List[Any]:
        spec: Specification | None = None
        if type_name:
            spec = HasType(type_name)
        if tag:
            spec = spec.and_(HasTag(tag)) if spec else HasTag(tag)
        if spec is None:
            return items
        by_id = {item.id: item for item in items}
        rows = filter_by_specification([item.to_dict() for item in items], spec)
        return [by_id[row["id"]] for row in rows]

    def list_vertices(self, type_name: str | None = None, tag: str | None = None) -> List[Any]:
        return self._filter(self._vertices.get_all(), type_name, tag)

    def list_edges(self, type_name: str | None = None, tag: str | None = None) -> List[Any]:
        return self._filter(self._edges.get_all(), type_name, tag)

    def vertex_detail(self, vertex_id: str) -> Dict[str, Any]:
        vertex = self._vertices.get(vertex_id)
        if not vertex:
            raise NotFoundError(f"Vertex not found: {vertex_id}")
        edges = self._vertices.get_edges_for_vertex(vertex_id)
        related = self._vertices.get_related_vertices(vertex_id)
        return {
            "vertex": vertex,
            "incoming_edges": edges["incoming"],
            "outgoing_edges": edges["outgoing"],
            "incoming_vertices": related["incoming"],
            "outgoing_vertices": related["outgoing"],
            "related_vertices": self._vertices.get_many(vertex.related_vertices or []),
        }

    def edge_detail(self, edge_id: str) -> Dict[str, Any]:
        edge = self._edges.get(edge_id)
        if not edge:
            raise NotFoundError(f"Edge not found: {edge_id}")
        sources = self._vertices.get_many(edge.source_vertices or [])
        targets = self._vertices.get_many(edge.target_vertices or [])
        found = {vertex.id for vertex in sources + targets}
        referenced = list(edge.source_vertices or []) + list(edge.target_vertices or [])
        return {
            "edge": edge,
            "source_vertices": sources,
            "target_vertices": targets,
            "dangling_ids": [vid for vid in dict.fromkeys(referenced) if vid not in found],
        }

    def search(self, query: str) -> Dict[str, Any]:
        query = (query or "").strip()
        return {
            "query": query,
            "vertices": self._vertices.search(query),
            "edges": self._edges.search(query),
        }

    def graph(self) -> Dict[str, List[Any]]:
        """One node per vertex and one link per source-target pair of every edge."""
        vertices = self._vertices.get_all()
        known = {vertex.id for vertex in vertices}
        nodes = [GraphNode(id=v.id, label=v.abbreviation or v.name, type=v.type or "") for v in vertices]
        links = []
        for edge in self._edges.get_all():
            for source in edge.source_vertices or []:
                for target in edge.target_vertices or []:
                    # Dangling references are not drawn
                    if source in known and target in known:
                        links.append(GraphLink(source=source, target=target, edge_id=edge.id, type=edge.type))
        return {"nodes": nodes, "links": links}

    def get_entity(self, entity_type: str, entity_id: str) -> Any:
        """The live vertex or edge an edit form is prefilled from."""
        if entity_type == "vertex":
            entity = self._vertices.get(entity_id)
        elif entity_type == "edge":
            entity = self._edges.get(entity_id)
        else:
            raise ValidationError(f"Unknown entity type: {entity_type}")
        if not entity:
            raise NotFoundError(f"{entity_type.capitalize()} not found: {entity_id}")
        return entity
