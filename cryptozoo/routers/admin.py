"""
Admin review of edit requests.
"""
from fastapi import APIRouter, Depends, Path, Query
from typing import List, Optional

from cryptozoo.application.edit_request_service import EditRequestService
from cryptozoo.dependencies import get_admin_session, get_edit_request_service
from cryptozoo.domain.session import SessionContext
from cryptozoo.schemas.api_schemas import EditRequest, EditRequestReview, ReviewDecision

router = APIRouter(prefix="/admin/edit-requests")


@router.get("", response_model=List[EditRequest])
def list_edit_requests(
    status: Optional[str] = Query(None, description="pending, approved or rejected"),
    session: SessionContext = Depends(get_admin_session),
    service: EditRequestService = Depends(get_edit_request_service),
):
    """
    Edit requests newest first.
    """
    return service.list(status)


@router.get("/{request_id}", response_model=EditRequestReview)
def get_edit_request(
    request_id: str = Path(..., title="The ID of the edit request"),
    session: SessionContext = Depends(get_admin_session),
    service: EditRequestService = Depends(get_edit_request_service),
):
    """
    An edit request with the live entity it targets and a per-field diff.
    """
    request = service.get(request_id)
    changes = service.diff(request)
    return EditRequestReview(
        request=EditRequest.model_validate(request),
        original=service.get_live_entity(request),
        changes=changes,
        has_changes=any(change["changed"] for change in changes),
    )


@router.post("/{request_id}/review", response_model=EditRequest)
def review_edit_request(
    decision: ReviewDecision,
    request_id: str = Path(..., title="The ID of the edit request"),
    session: SessionContext = Depends(get_admin_session),
    service: EditRequestService = Depends(get_edit_request_service),
):
    """
    Approve or reject a pending request. Approval applies the change to the catalog.
    """
    return service.review(request_id, decision.decision, session, decision.reviewer_comments)
