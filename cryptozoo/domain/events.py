"""Domain events for decoupled side effects and integrations."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, List
from uuid import uuid4

logger = logging.getLogger(__name__)


@dataclass
class DomainEvent:
    """Base class for all domain events."""
    event_id: str
    timestamp: datetime
    aggregate_id: str
    
    def __post_init__(self):
        if not self.event_id:
            object.__setattr__(self, 'event_id', str(uuid4()))
        if not self.timestamp:
            object.__setattr__(self, 'timestamp', datetime.now())


@dataclass
class EditRequestSubmitted(DomainEvent):
    """Raised when a contributor submits an edit request."""
    entity_type: str
    action: str
    target_id: str | None
    submitted_by: str | None
    submitted_email: str | None


@dataclass
class EditRequestReviewed(DomainEvent):
    """Raised when an admin approves or rejects an edit request."""
    status: str
    reviewed_by: str
    entity_type: str
    action: str
    target_id: str | None


@dataclass
class EntityCreated(DomainEvent):
    """Raised when a vertex or edge is added to the catalog."""
    entity_type: str
    name: str


@dataclass
class EntityUpdated(DomainEvent):
    """Raised when approved changes are merged into a vertex or edge."""
    entity_type: str
    fields: List[str]


@dataclass
class EntityDeleted(DomainEvent):
    """Raised when a vertex or edge is removed from the catalog."""
    entity_type: str


@dataclass
class UserRoleChanged(DomainEvent):
    """Raised when a user's role changes (auto-promotion or admin action)."""
    old_role: str
    new_role: str
    changed_by: str | None


class DomainEventPublisher:
    """Singleton publisher for domain events."""
    
    _instance: DomainEventPublisher | None = None
    _subscribers: Dict[type, List[Callable[[DomainEvent], None]]]
    
    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._subscribers = {}
        return cls._instance
    
    def subscribe(self, event_type: type[DomainEvent], handler: Callable[[DomainEvent], None]) -> None:
        """Subscribe a handler to an event type."""
        if event_type not in self._subscribers:
            self._subscribers[event_type] = []
        if handler not in self._subscribers[event_type]:
            self._subscribers[event_type].append(handler)
    
    def publish(self, event: DomainEvent) -> None:
        """Publish an event to all subscribers."""
        event_type = type(event)
        for handler in self._subscribers.get(event_type, []):
            try:
                handler(event)
            except Exception:
                # Log error but don't fail the main operation
                logger.exception(f"Event handler error for {event_type.__name__}")
    
    def clear_subscribers(self) -> None:
        """Clear all subscribers (useful for testing)."""
        self._subscribers = {}


# Singleton instance
event_publisher = DomainEventPublisher()
