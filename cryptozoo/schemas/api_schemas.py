"""
API Request/Response Schemas using Pydantic.

Structure of HTTP requests and responses for the Crypto Zoo API.
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Literal, Optional, Union
from datetime import datetime

# Catalog schemas
class Reference(BaseModel):
    title: str = Field("", description="Title of the referenced work")
    author: str = Field("", description="Authors of the referenced work")
    year: Optional[Union[int, str]] = Field(None, description="Publication year")
    url: str = Field("", description="Link to the referenced work")

class Vertex(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., description="Stable identifier of the primitive")
    name: str = Field(..., description="Display name")
    abbreviation: Optional[str] = Field("", description="Short name, e.g. OWF")
    type: Optional[str] = Field("", description="Category tag")
    tags: List[str] = Field(default_factory=list, description="Free-form tags")
    description: Optional[str] = Field("", description="Informal description")
    definition: Optional[str] = Field("", description="Formal definition, may contain LaTeX")
    references: List[Reference] = Field(default_factory=list, description="Bibliographic references")
    related_vertices: List[str] = Field(default_factory=list, description="IDs of related primitives")
    notes: Optional[str] = Field("", description="Editorial notes")
    wip: Optional[bool] = Field(False, description="Entry is a work in progress")
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")

class Edge(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., description="Stable identifier of the relationship")
    type: str = Field(..., description="construction, impossibility, reduction or separation")
    name: str = Field(..., description="Display name")
    description: Optional[str] = Field("", description="Informal description")
    overview: Optional[str] = Field("", description="Overview of the result")
    theorem: Optional[str] = Field("", description="Theorem statement")
    construction: Optional[str] = Field(None, description="Construction, if any")
    proof: Optional[str] = Field("", description="Proof sketch")
    source_vertices: List[str] = Field(default_factory=list, description="IDs of source primitives")
    target_vertices: List[str] = Field(default_factory=list, description="IDs of target primitives")
    tags: List[str] = Field(default_factory=list, description="Free-form tags")
    model: Optional[str] = Field("", description="Security model")
    references: List[Reference] = Field(default_factory=list, description="Bibliographic references")
    notes: Optional[str] = Field("", description="Editorial notes")
    wip: Optional[bool] = Field(False, description="Entry is a work in progress")
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")

class HomeSummary(BaseModel):
    vertex_count: int = Field(..., description="Number of primitives in the catalog")
    edge_count: int = Field(..., description="Number of relationships in the catalog")
    edge_type_counts: Dict[str, int] = Field(..., description="Relationships per kind")
    vertices: List[Vertex] = Field(..., description="All primitives ordered by name")
    edges: List[Edge] = Field(..., description="All relationships ordered by name")

class VertexDetail(BaseModel):
    vertex: Vertex
    incoming_edges: List[Edge] = Field(..., description="Edges with this vertex as a target")
    outgoing_edges: List[Edge] = Field(..., description="Edges with this vertex as a source")
    incoming_vertices: List[Vertex] = Field(..., description="Sources of incoming edges")
    outgoing_vertices: List[Vertex] = Field(..., description="Targets of outgoing edges")
    related_vertices: List[Vertex] = Field(..., description="Existing vertices from the related list")

class EdgeDetail(BaseModel):
    edge: Edge
    source_vertices: List[Vertex] = Field(..., description="Existing source primitives")
    target_vertices: List[Vertex] = Field(..., description="Existing target primitives")
    dangling_ids: List[str] = Field(default_factory=list, description="Referenced IDs with no vertex")

class SearchResults(BaseModel):
    query: str
    vertices: List[Vertex]
    edges: List[Edge]

class GraphNode(BaseModel):
    id: str = Field(..., description="Vertex ID")
    label: str = Field(..., description="Abbreviation or name")
    type: str = Field("", description="Vertex category tag")

class GraphLink(BaseModel):
    source: str = Field(..., description="ID of the source vertex")
    target: str = Field(..., description="ID of the target vertex")
    edge_id: str = Field(..., description="ID of the edge drawing this link")
    type: str = Field(..., description="Relationship kind")

class GraphStructure(BaseModel):
    nodes: List[GraphNode] = Field(..., description="One node per vertex")
    links: List[GraphLink] = Field(..., description="One link per source/target pair of every edge")

# Edit request schemas
class EditRequestCreate(BaseModel):
    type: Literal["vertex", "edge"] = Field(..., description="Kind of entity to change")
    action: Literal["create", "update", "delete"] = Field(..., description="Proposed operation")
    target_id: Optional[str] = Field(None, description="Entity to change; omitted for create")
    data: Dict[str, Any] = Field(default_factory=dict, description="Proposed field values")
    email: Optional[str] = Field(None, description="Contact email; required when not signed in")
    comments: Optional[str] = Field(None, description="Notes for the reviewers", max_length=2000)

class EditRequest(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., description="Request ID; 'temp-id' for anonymous submissions")
    type: str
    target_id: Optional[str] = None
    data: Dict[str, Any] = Field(default_factory=dict)
    action: str
    status: str
    comments: Optional[str] = None
    submitted_by: Optional[str] = None
    submitted_email: Optional[str] = None
    submitted_at: Optional[datetime] = None
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    reviewer_comments: Optional[str] = None

class FieldDiff(BaseModel):
    field: str
    old_value: Any = None
    new_value: Any = None
    changed: bool

class EditRequestReview(BaseModel):
    request: EditRequest
    original: Optional[Dict[str, Any]] = Field(None, description="Live entity, absent for create")
    changes: List[FieldDiff] = Field(..., description="Per-field comparison")
    has_changes: bool

class ReviewDecision(BaseModel):
    decision: Literal["approved", "rejected"] = Field(..., description="Review outcome")
    reviewer_comments: Optional[str] = Field(None, description="Notes sent to the submitter", max_length=2000)

# User schemas
class User(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    first_name: Optional[str] = ""
    last_name: Optional[str] = ""
    role: str
    created_at: Optional[datetime] = None
    display_name: Optional[str] = None

class UserUpdate(BaseModel):
    first_name: Optional[str] = Field(None, max_length=255)
    last_name: Optional[str] = Field(None, max_length=255)
    role: Optional[Literal["pending", "user", "admin"]] = None

# Auth schemas
class SignUpRequest(BaseModel):
    email: str = Field(..., description="Account email")
    password: str = Field(..., min_length=6, description="Account password")
    first_name: Optional[str] = Field(None, max_length=255)
    last_name: Optional[str] = Field(None, max_length=255)

class SignUpResponse(BaseModel):
    user_id: str
    email: str
    role: str
    message: str = "Check your email to confirm your account, then sign in."

class SignInRequest(BaseModel):
    email: str
    password: str

class RefreshRequest(BaseModel):
    refresh_token: str

class SessionResponse(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    token_type: str = "bearer"
    user: User

class SignOutResponse(BaseModel):
    success: bool = Field(default=True, description="Whether the operation was successful")

# Authoring tool schemas
class VertexToolForm(BaseModel):
    id: Optional[str] = None
    name: Optional[str] = None
    abbreviation: Optional[str] = None
    type: Optional[str] = None
    tags: Optional[Union[str, List[str]]] = Field(None, description="Comma-separated or list")
    description: Optional[str] = None
    definition: Optional[str] = None
    references: Optional[Union[str, List[Dict[str, Any]]]] = Field(None, description="List or JSON text")
    related_vertices: Optional[Union[str, List[str]]] = Field(None, description="Comma-separated or list")
    notes: Optional[str] = None
    previous_references: List[Dict[str, Any]] = Field(
        default_factory=list, description="Last valid references, kept when references are malformed"
    )

class EdgeToolForm(BaseModel):
    id: Optional[str] = None
    type: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    overview: Optional[str] = None
    theorem: Optional[str] = None
    construction: Optional[str] = None
    proof: Optional[str] = None
    source_vertices: Optional[Union[str, List[str]]] = Field(None, description="Comma-separated or list")
    target_vertices: Optional[Union[str, List[str]]] = Field(None, description="Comma-separated or list")
    tags: Optional[Union[str, List[str]]] = Field(None, description="Comma-separated or list")
    model: Optional[str] = None
    references: Optional[Union[str, List[Dict[str, Any]]]] = Field(None, description="List or JSON text")
    notes: Optional[str] = None
    previous_references: List[Dict[str, Any]] = Field(
        default_factory=list, description="Last valid references, kept when references are malformed"
    )

class ToolDocument(BaseModel):
    document: Dict[str, Any] = Field(..., description="Generated catalog entry")
    json_text: str = Field(..., description="Pretty-printed JSON of the entry")
