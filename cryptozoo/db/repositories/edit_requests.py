from sqlalchemy.orm import Session
from typing import Any, Dict, List, Optional

from cryptozoo.db.models import EditRequest, utcnow
from cryptozoo.db.repositories.base import BaseRepository


class EditRequestRepository(BaseRepository):
    """Repository for the edit request moderation queue."""
    
    def __init__(self, db: Session):
        super().__init__(db)
    
    def create(self, entity_type: str, action: str, data: Dict[str, Any],
               target_id: str = None, comments: str = None,
               submitted_by: str = None, submitted_email: str = None,
               commit: bool = True) -> EditRequest:
        """
        Queue a new pending edit request.
        
        Args:
            entity_type: "vertex" or "edge"
            action: "create", "update" or "delete"
            data: Proposed field values
            target_id: Entity being changed (absent for create)
            comments: Submitter notes (optional)
            submitted_by: Authenticated user ID (optional)
            submitted_email: Contact email (optional)
            commit: Commit immediately
            
        Returns:
            Created edit request
        """
        request = EditRequest(
            type=entity_type,
            action=action,
            data=data,
            target_id=target_id,
            comments=comments,
            submitted_by=submitted_by,
            submitted_email=submitted_email,
            status="pending",
            submitted_at=utcnow(),
        )
        self.db.add(request)
        self._save(request, commit)
        return request
    
    def get(self, request_id: str) -> Optional[EditRequest]:
        """
        Get an edit request by ID.
        
        Args:
            request_id: Edit request ID
            
        Returns:
            Edit request if found, None otherwise
        """
        return self.db.query(EditRequest).filter(EditRequest.id == request_id).first()
    
    def list(self, status: str = None) -> List[EditRequest]:
        """
        Get edit requests, newest submission first.
        
        Args:
            status: Only requests in this status (optional)
            
        Returns:
            List of edit requests
        """
        query = self.db.query(EditRequest)
        if status:
            query = query.filter(EditRequest.status == status)
        return query.order_by(EditRequest.submitted_at.desc()).all()
    
    def mark_reviewed(self, request_id: str, status: str, reviewer_id: str,
                      reviewer_comments: str = None, commit: bool = True) -> Optional[EditRequest]:
        """
        Record the review decision on an edit request.
        
        Args:
            request_id: Edit request ID
            status: "approved" or "rejected"
            reviewer_id: ID of the reviewing admin
            reviewer_comments: Reviewer notes (optional)
            commit: Commit immediately; pass False to share a commit with
                the entity change being approved
            
        Returns:
            Updated edit request or None if not found
        """
        request = self.get(request_id)
        if not request:
            return None
        
        request.status = status
        request.reviewed_by = reviewer_id
        request.reviewed_at = utcnow()
        request.reviewer_comments = reviewer_comments
        self._save(request, commit)
        return request
