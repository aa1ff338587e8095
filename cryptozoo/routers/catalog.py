"""
Catalog browsing endpoints: home summary, detail pages, search and graph.
"""
from fastapi import APIRouter, Depends, Path, Query
from typing import List, Optional

from cryptozoo.application.catalog_service import CatalogService
from cryptozoo.dependencies import get_catalog_service
from cryptozoo.schemas.api_schemas import (
    Edge, EdgeDetail, GraphStructure, HomeSummary, SearchResults, Vertex, VertexDetail,
)

router = APIRouter()


@router.get("/", response_model=HomeSummary)
def home(service: CatalogService = Depends(get_catalog_service)):
    """
    Catalog overview: counts per entity and per edge type, plus all entries.
    """
    return service.summary()


@router.get("/graph", response_model=GraphStructure)
def graph(service: CatalogService = Depends(get_catalog_service)):
    """
    Nodes and links for the relationship graph.
    """
    return service.graph()


@router.get("/vertices", response_model=List[Vertex])
def list_vertices(
    type: Optional[str] = Query(None, description="Only vertices of this category"),
    tag: Optional[str] = Query(None, description="Only vertices carrying this tag"),
    service: CatalogService = Depends(get_catalog_service),
):
    return service.list_vertices(type_name=type, tag=tag)


@router.get("/edges", response_model=List[Edge])
def list_edges(
    type: Optional[str] = Query(None, description="Only edges of this kind"),
    tag: Optional[str] = Query(None, description="Only edges carrying this tag"),
    service: CatalogService = Depends(get_catalog_service),
):
    return service.list_edges(type_name=type, tag=tag)


@router.get("/v/{vertex_id}", response_model=VertexDetail)
def vertex_detail(
    vertex_id: str = Path(..., title="The ID of the vertex to show"),
    service: CatalogService = Depends(get_catalog_service),
):
    """
    A vertex with its incoming and outgoing edges and neighbouring vertices.
    """
    return service.vertex_detail(vertex_id)


@router.get("/edge/{edge_id}", response_model=EdgeDetail)
def edge_detail(
    edge_id: str = Path(..., title="The ID of the edge to show"),
    service: CatalogService = Depends(get_catalog_service),
):
    """
    An edge with its resolved source and target vertices.
    """
    return service.edge_detail(edge_id)


@router.get("/search", response_model=SearchResults)
def search(
    q: str = Query("", description="Case-insensitive substring to look for"),
    service: CatalogService = Depends(get_catalog_service),
):
    return service.search(q)
