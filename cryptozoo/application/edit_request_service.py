"""Application service for the edit request lifecycle.

Contributors queue proposed changes as pending edit requests; admins review
each one exactly once through this service, and only an approval touches the
catalog tables.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional

from cryptozoo.application.access_service import require_admin
from cryptozoo.application.auth_service import validate_email
from cryptozoo.db.models import EditRequest, utcnow
from cryptozoo.db.repositories import EdgeRepository, EditRequestRepository, VertexRepository
from cryptozoo.domain.changes import parse_changes
from cryptozoo.domain.entities import EDIT_ACTIONS, EDIT_STATUSES, ENTITY_TYPES, SYSTEM_FIELDS, FieldDiff
from cryptozoo.domain.errors import ConflictError, NotFoundError, ValidationError
from cryptozoo.domain.events import (
    event_publisher, DomainEvent, EditRequestReviewed, EditRequestSubmitted,
    EntityCreated, EntityDeleted, EntityUpdated,
)
from cryptozoo.domain.session import ANONYMOUS, SessionContext
from cryptozoo.services.email_service import EmailService

logger = logging.getLogger(__name__)

# Returned to anonymous submitters, who may not read back their own insert
PLACEHOLDER_REQUEST_ID = "temp-id"


def _serialize(value: Any) -> str:
    return json.dumps(value, sort_keys=True, default=str)


def diff_entity(live: Optional[Dict[str, Any]], payload: Dict[str, Any], action: str) -> List[FieldDiff]:
    """
    Compare a live entity with a proposed payload field by field.
    
    Args:
        live: Current entity as a dict, None when it does not exist
        payload: Proposed field values
        action: "create", "update" or "delete"
        
    Returns:
        One FieldDiff per non-system field. Create (or a missing entity)
        reports every payload field as new; delete reports every live field
        as removed; update marks a field changed when its JSON form differs.
        Fields the payload leaves out keep their live value.
    """
    if action == "create" or live is None:
        return [
            FieldDiff(field=field, old_value=None, new_value=value, changed=True)
            for field, value in payload.items()
            if field not in SYSTEM_FIELDS
        ]

    if action == "delete":
        return [
            FieldDiff(field=field, old_value=live[field], new_value=None, changed=True)
            for field in sorted(live)
            if field not in SYSTEM_FIELDS
        ]

    diffs = []
    for field in sorted(set(live) | set(payload)):
        if field in SYSTEM_FIELDS:
            continue
        old_value = live.get(field)
        if field not in payload:
            diffs.append(FieldDiff(field=field, old_value=old_value, new_value=old_value, changed=False))
            continue
        new_value = payload[field]
        diffs.append(FieldDiff(
            field=field,
            old_value=old_value,
            new_value=new_value,
            changed=_serialize(old_value) != _serialize(new_value),
        ))
    return diffs


class EditRequestService:
    """Submission, listing, diffing and review of edit requests."""

    def __init__(self, edit_requests: EditRequestRepository, vertices: VertexRepository,
                 edges: EdgeRepository, email: EmailService) -> None:
        self._requests = edit_requests
        self._vertices = vertices
        self._edges = edges
        self._email = email

    def _catalog(self, entity_type: str):
        if entity_type == "vertex":
            return self._vertices
        if entity_type == "edge":
            return self._edges
        raise ValidationError(f"Unknown entity type: {entity_type}")

    def submit(
        self,
        entity_type: str,
        action: str,
        data: Dict[str, Any] | None,
        target_id: str | None = None,
        email: str | None = None,
        comments: str | None = None,
        session: SessionContext = ANONYMOUS,
        require_email: bool = True,
    ) -> Dict[str, Any]:
        """
        Queue a pending edit request.
        
        Args:
            entity_type: "vertex" or "edge"
            action: "create", "update" or "delete"
            data: Proposed field values (may be empty for delete)
            target_id: Entity to change; required for update and delete
            email: Contact email; required for anonymous submitters unless
                require_email is False
            comments: Submitter notes
            session: Caller's session context
            require_email: Enforce the anonymous email requirement
            
        Returns:
            The stored request for signed-in callers, or a local placeholder
            with id "temp-id" for anonymous callers
        """
        if entity_type not in ENTITY_TYPES:
            raise ValidationError(f"Type must be one of: {', '.join(ENTITY_TYPES)}")
        if action not in EDIT_ACTIONS:
            raise ValidationError(f"Action must be one of: {', '.join(EDIT_ACTIONS)}")

        catalog = self._catalog(entity_type)
        if action == "create":
            if target_id:
                raise ValidationError("Create requests cannot name a target")
        else:
            if not target_id:
                raise ValidationError(f"target_id is required for {action} requests")
            if catalog.get(target_id) is None:
                raise NotFoundError(f"{entity_type.capitalize()} not found: {target_id}")

        data = data or {}
        if action != "delete" and not data:
            raise ValidationError("Edit payload cannot be empty")
        changes = parse_changes(entity_type, data, allow_id=(action == "create"))
        if action == "create" and not changes.as_dict().get("name"):
            raise ValidationError("Name is required to create a new entry")
        if action == "create" and entity_type == "edge" and not changes.as_dict().get("type"):
            raise ValidationError("Type is required to create a new edge")

        email = validate_email(email) if email and email.strip() else None
        if session.is_authenticated:
            submitted_by = session.user_id
            submitted_email = email or session.user.get("email")
        else:
            if require_email and not email:
                raise ValidationError("An email address is required for anonymous submissions")
            submitted_by = None
            submitted_email = email

        comments = comments.strip() if comments and comments.strip() else None
        record = self._requests.create(
            entity_type=entity_type,
            action=action,
            data=changes.as_dict(),
            target_id=target_id,
            comments=comments,
            submitted_by=submitted_by,
            submitted_email=submitted_email,
        )
        logger.info(f"Queued {action} request {record.id} for {entity_type} {target_id or '(new)'}")

        if session.is_authenticated:
            result = record.to_dict()
        else:
            result = {
                "id": PLACEHOLDER_REQUEST_ID,
                "type": entity_type,
                "target_id": target_id,
                "data": changes.as_dict(),
                "action": action,
                "status": "pending",
                "comments": comments,
                "submitted_by": None,
                "submitted_email": submitted_email,
                "submitted_at": utcnow(),
                "reviewed_by": None,
                "reviewed_at": None,
                "reviewer_comments": None,
            }

        event_publisher.publish(EditRequestSubmitted(
            event_id="",
            timestamp=None,
            aggregate_id=record.id,
            entity_type=entity_type,
            action=action,
            target_id=target_id,
            submitted_by=submitted_by,
            submitted_email=submitted_email,
        ))

        if submitted_email:
            self._email.send_edit_request_confirmation(submitted_email, result)
        return result

    def list(self, status: str | None = None) -> List[EditRequest]:
        """Edit requests newest first, optionally filtered by status. No pagination."""
        if status and status not in EDIT_STATUSES:
            raise ValidationError(f"Status must be one of: {', '.join(EDIT_STATUSES)}")
        return self._requests.list(status)

    def get(self, request_id: str) -> EditRequest:
        request = self._requests.get(request_id)
        if not request:
            raise NotFoundError(f"Edit request not found: {request_id}")
        return request

    def get_live_entity(self, request: EditRequest) -> Optional[Dict[str, Any]]:
        """The entity a request targets as it currently stands, if any."""
        if request.action == "create" or not request.target_id:
            return None
        entity = self._catalog(request.type).get(request.target_id)
        return entity.to_dict() if entity else None

    def diff(self, request: EditRequest) -> List[FieldDiff]:
        return diff_entity(self.get_live_entity(request), request.data or {}, request.action)

    def _apply(self, request: EditRequest) -> DomainEvent:
        """Stage the approved change in the session; the caller commits."""
        catalog = self._catalog(request.type)
        data = parse_changes(request.type, request.data or {}, allow_id=(request.action == "create")).as_dict()

        if request.action == "create":
            entity = catalog.create(data, commit=False)
            return EntityCreated(event_id="", timestamp=None, aggregate_id=entity.id,
                                 entity_type=request.type, name=entity.name)

        if request.action == "update":
            entity = catalog.update(request.target_id, data, commit=False)
            if entity is None:
                raise NotFoundError(f"{request.type.capitalize()} not found: {request.target_id}")
            return EntityUpdated(event_id="", timestamp=None, aggregate_id=entity.id,
                                 entity_type=request.type, fields=sorted(data))

        if not catalog.delete(request.target_id, commit=False):
            raise NotFoundError(f"{request.type.capitalize()} not found: {request.target_id}")
        return EntityDeleted(event_id="", timestamp=None, aggregate_id=request.target_id,
                             entity_type=request.type)

    def review(self, request_id: str, decision: str, reviewer: SessionContext,
               reviewer_comments: str | None = None) -> EditRequest:
        """
        Approve or reject a pending edit request.
        
        Approval applies the payload to the catalog in the same commit as the
        status change; rejection never touches the catalog. There is no
        version check, so two admins reviewing concurrently can still race.
        
        Raises:
            PermissionDeniedError: Reviewer is not an admin
            NotFoundError: Request (or its target, on approval) not found
            ConflictError: Request was already reviewed
        """
        require_admin(reviewer)
        if decision not in ("approved", "rejected"):
            raise ValidationError("Decision must be 'approved' or 'rejected'")

        request = self.get(request_id)
        if request.status != "pending":
            raise ConflictError(f"Edit request {request_id} has already been {request.status}")

        entity_event = self._apply(request) if decision == "approved" else None
        reviewer_comments = reviewer_comments.strip() if reviewer_comments and reviewer_comments.strip() else None
        request = self._requests.mark_reviewed(request_id, decision, reviewer.user_id, reviewer_comments)
        logger.info(f"Edit request {request_id} {decision} by {reviewer.user_id}")

        if entity_event is not None:
            event_publisher.publish(entity_event)
        event_publisher.publish(EditRequestReviewed(
            event_id="",
            timestamp=None,
            aggregate_id=request.id,
            status=decision,
            reviewed_by=reviewer.user_id,
            entity_type=request.type,
            action=request.action,
            target_id=request.target_id,
        ))

        if request.submitted_email:
            self._email.send_edit_request_status_update(
                request.submitted_email, request.to_dict(), decision, reviewer_comments
            )
        return request
