"""Event handlers for domain events."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cryptozoo.domain.events import (
        EditRequestSubmitted,
        EditRequestReviewed,
        EntityCreated,
        EntityUpdated,
        EntityDeleted,
        UserRoleChanged,
    )

logger = logging.getLogger(__name__)


class AuditLogHandler:
    """Logs all domain events for audit trail."""
    
    def handle_edit_request_submitted(self, event: EditRequestSubmitted) -> None:
        submitter = event.submitted_by or event.submitted_email or "anonymous"
        logger.info(
            f"[AUDIT] Edit request submitted: {event.aggregate_id} - {event.action} "
            f"{event.entity_type} {event.target_id or '(new)'} by {submitter}"
        )
    
    def handle_edit_request_reviewed(self, event: EditRequestReviewed) -> None:
        logger.info(f"[AUDIT] Edit request {event.status}: {event.aggregate_id} by {event.reviewed_by}")
    
    def handle_entity_created(self, event: EntityCreated) -> None:
        logger.info(f"[AUDIT] {event.entity_type.capitalize()} created: {event.aggregate_id} - {event.name}")
    
    def handle_entity_updated(self, event: EntityUpdated) -> None:
        logger.info(
            f"[AUDIT] {event.entity_type.capitalize()} updated: {event.aggregate_id} "
            f"({', '.join(event.fields)})"
        )
    
    def handle_entity_deleted(self, event: EntityDeleted) -> None:
        logger.info(f"[AUDIT] {event.entity_type.capitalize()} deleted: {event.aggregate_id}")
    
    def handle_user_role_changed(self, event: UserRoleChanged) -> None:
        changed_by = event.changed_by or "auto-promotion"
        logger.info(
            f"[AUDIT] User role changed: {event.aggregate_id} {event.old_role} -> {event.new_role} "
            f"({changed_by})"
        )


class ReferenceIntegrityHandler:
    """Warns when a catalog deletion may leave dangling vertex references."""
    
    def handle_entity_deleted(self, event: EntityDeleted) -> None:
        # References are neither validated nor cascaded
        if event.entity_type == "vertex":
            logger.warning(
                f"[INTEGRITY] Vertex {event.aggregate_id} deleted; edges and related-vertex "
                f"lists that reference it are left unchanged"
            )


audit = AuditLogHandler()
integrity = ReferenceIntegrityHandler()


def register_event_handlers():
    """Register all event handlers with the publisher."""
    from cryptozoo.domain.events import (
        event_publisher,
        EditRequestSubmitted,
        EditRequestReviewed,
        EntityCreated,
        EntityUpdated,
        EntityDeleted,
        UserRoleChanged,
    )
    
    # Audit handlers (all events)
    event_publisher.subscribe(EditRequestSubmitted, audit.handle_edit_request_submitted)
    event_publisher.subscribe(EditRequestReviewed, audit.handle_edit_request_reviewed)
    event_publisher.subscribe(EntityCreated, audit.handle_entity_created)
    event_publisher.subscribe(EntityUpdated, audit.handle_entity_updated)
    event_publisher.subscribe(EntityDeleted, audit.handle_entity_deleted)
    event_publisher.subscribe(UserRoleChanged, audit.handle_user_role_changed)
    
    # Referential integrity warnings
    event_publisher.subscribe(EntityDeleted, integrity.handle_entity_deleted)
