from sqlalchemy.orm import Session
from typing import Dict, List

from cryptozoo.db.models import Vertex, Edge
from cryptozoo.db.repositories.catalog import CatalogRepository
from cryptozoo.domain.specifications import EdgeFromVertex, EdgeToVertex, filter_by_specification


class VertexRepository(CatalogRepository):
    """Repository for vertex (primitive) operations."""
    
    model = Vertex
    search_fields = ("name", "abbreviation", "definition", "description")
    
    def __init__(self, db: Session):
        super().__init__(db)
    
    def get_edges_for_vertex(self, vertex_id: str) -> Dict[str, List[Edge]]:
        """
        Get the edges pointing into and out of a vertex.
        
        Args:
            vertex_id: Vertex ID
            
        Returns:
            Dictionary with "incoming" edges (vertex is a target) and
            "outgoing" edges (vertex is a source)
        """
        edges = self.db.query(Edge).order_by(Edge.name).all()
        by_id = {edge.id: edge for edge in edges}
        rows = [edge.to_dict() for edge in edges]
        return {
            "incoming": [by_id[row["id"]] for row in filter_by_specification(rows, EdgeToVertex(vertex_id))],
            "outgoing": [by_id[row["id"]] for row in filter_by_specification(rows, EdgeFromVertex(vertex_id))],
        }
    
    def get_related_vertices(self, vertex_id: str) -> Dict[str, List[Vertex]]:
        """
        Get the neighbouring vertices reachable through edges.
        
        Args:
            vertex_id: Vertex ID
            
        Returns:
            Dictionary with distinct, existing "incoming" vertices (sources of
            edges into this vertex) and "outgoing" vertices (targets of edges
            out of it), never including the vertex itself
        """
        edges = self.get_edges_for_vertex(vertex_id)
        
        def neighbour_ids(edge_list, attribute):
            ids = []
            for edge in edge_list:
                for neighbour_id in getattr(edge, attribute) or []:
                    if neighbour_id != vertex_id and neighbour_id not in ids:
                        ids.append(neighbour_id)
            return ids
        
        return {
            "incoming": self.get_many(neighbour_ids(edges["incoming"], "source_vertices")),
            "outgoing": self.get_many(neighbour_ids(edges["outgoing"], "target_vertices")),
        }
