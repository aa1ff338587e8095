"""
Authoring tool endpoints producing well-formed catalog entries.
"""
from fastapi import APIRouter

from cryptozoo.application.tool_service import build_edge_document, build_vertex_document
from cryptozoo.schemas.api_schemas import EdgeToolForm, ToolDocument, VertexToolForm

router = APIRouter(prefix="/tool")


@router.post("/vertex", response_model=ToolDocument)
def vertex_document(form: VertexToolForm):
    """
    Build a vertex entry from form input.
    Malformed references JSON keeps previous_references.
    """
    document, json_text = build_vertex_document(
        form.model_dump(exclude={"previous_references"}, exclude_none=True),
        form.previous_references,
    )
    return ToolDocument(document=document, json_text=json_text)


@router.post("/edge", response_model=ToolDocument)
def edge_document(form: EdgeToolForm):
    """
    Build an edge entry from form input.
    """
    document, json_text = build_edge_document(
        form.model_dump(exclude={"previous_references"}, exclude_none=True),
        form.previous_references,
    )
    return ToolDocument(document=document, json_text=json_text)
