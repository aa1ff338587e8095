"""
Edit request submission endpoints open to signed-in and anonymous contributors.
"""
from fastapi import APIRouter, Depends, Path

from cryptozoo.application.catalog_service import CatalogService
from cryptozoo.application.edit_request_service import EditRequestService
from cryptozoo.dependencies import get_catalog_service, get_edit_request_service, get_session_context
from cryptozoo.domain.session import SessionContext
from cryptozoo.schemas.api_schemas import EditRequest, EditRequestCreate

router = APIRouter(prefix="/submit-edit")


@router.post("", response_model=EditRequest, status_code=201)
def submit_edit(
    payload: EditRequestCreate,
    session: SessionContext = Depends(get_session_context),
    service: EditRequestService = Depends(get_edit_request_service),
):
    """
    Queue a pending edit request.
    Anonymous submitters must give an email and get back a request with id "temp-id".
    """
    return service.submit(
        entity_type=payload.type,
        action=payload.action,
        data=payload.data,
        target_id=payload.target_id,
        email=payload.email,
        comments=payload.comments,
        session=session,
    )


@router.get("/target/{entity_type}/{entity_id}")
def edit_target(
    entity_type: str = Path(..., title="vertex or edge"),
    entity_id: str = Path(..., title="The ID of the entry being edited"),
    service: CatalogService = Depends(get_catalog_service),
):
    """
    Current values of an entry, used to prefill an update or delete request.
    """
    return service.get_entity(entity_type, entity_id).to_dict()
