from sqlalchemy import or_
from sqlalchemy.orm import Session
from typing import Any, Dict, List
import re
import uuid

from cryptozoo.db.models import utcnow
from cryptozoo.db.repositories.base import BaseRepository
from cryptozoo.domain.entities import SYSTEM_FIELDS
from cryptozoo.domain.errors import ConflictError


def slugify(name: str) -> str:
    """Turn a display name into an id such as 'one-way-functions'."""
    slug = re.sub(r"[^a-z0-9]+", "-", (name or "").lower()).strip("-")
    return slug or str(uuid.uuid4())


class CatalogRepository(BaseRepository):
    """Repository for catalog entities (vertices and edges)."""
    
    model = None
    search_fields: tuple = ()
    
    def __init__(self, db: Session):
        super().__init__(db)
    
    def get(self, entity_id: str):
        """
        Get an entity by ID.
        
        Args:
            entity_id: Entity ID
            
        Returns:
            Entity if found, None otherwise
        """
        return self.db.query(self.model).filter(self.model.id == entity_id).first()
    
    def get_all(self) -> List[Any]:
        """
        Get all entities ordered by name.
        
        Returns:
            List of all entities
        """
        return self.db.query(self.model).order_by(self.model.name).all()
    
    def get_many(self, entity_ids: List[str]) -> List[Any]:
        """
        Get the entities that exist among the given IDs, in the given order.
        
        Args:
            entity_ids: Entity IDs, possibly dangling
            
        Returns:
            Existing entities; unknown IDs are skipped
        """
        if not entity_ids:
            return []
        found = {
            entity.id: entity
            for entity in self.db.query(self.model).filter(self.model.id.in_(entity_ids)).all()
        }
        return [found[entity_id] for entity_id in entity_ids if entity_id in found]
    
    def search(self, query: str) -> List[Any]:
        """
        Case-insensitive substring search across the searchable text fields.
        
        Args:
            query: Substring to look for
            
        Returns:
            Matching entities ordered by name; empty for a blank query
        """
        if not query or not query.strip():
            return []
        term = query.strip()
        conditions = [
            getattr(self.model, field).icontains(term, autoescape=True)
            for field in self.search_fields
        ]
        return self.db.query(self.model).filter(or_(*conditions)).order_by(self.model.name).all()
    
    def _unique_id(self, name: str) -> str:
        base = slugify(name)
        candidate = base
        suffix = 2
        while self.get(candidate) is not None:
            candidate = f"{base}-{suffix}"
            suffix += 1
        return candidate
    
    def create(self, data: Dict[str, Any], commit: bool = True):
        """
        Create a new entity.
        
        Args:
            data: Field values; an id is derived from the name when absent
            commit: Commit immediately
            
        Returns:
            Created entity
            
        Raises:
            ConflictError: An entity with the given id already exists
        """
        values = {k: v for k, v in data.items() if k not in SYSTEM_FIELDS}
        entity_id = data.get("id") or self._unique_id(data.get("name", ""))
        if self.get(entity_id) is not None:
            raise ConflictError(f"{self.model.__name__} already exists: {entity_id}")
        
        now = utcnow()
        entity = self.model(id=entity_id, created_at=now, updated_at=now, **values)
        self.db.add(entity)
        self._save(entity, commit)
        return entity
    
    def update(self, entity_id: str, changes: Dict[str, Any], commit: bool = True):
        """
        Merge a partial payload into an entity.
        
        Args:
            entity_id: Entity ID
            changes: Fields to overwrite; id and timestamps are ignored
            commit: Commit immediately
            
        Returns:
            Updated entity or None if entity not found
        """
        entity = self.get(entity_id)
        if not entity:
            return None
        
        for field, value in changes.items():
            if field in SYSTEM_FIELDS:
                continue
            setattr(entity, field, value)
        entity.updated_at = utcnow()
        self._save(entity, commit)
        return entity
    
    def delete(self, entity_id: str, commit: bool = True) -> bool:
        """
        Hard delete an entity by ID. References to it are left dangling.
        
        Args:
            entity_id: Entity ID
            commit: Commit immediately
            
        Returns:
            True if entity was deleted, False otherwise
        """
        entity = self.get(entity_id)
        if not entity:
            return False
        
        self.db.delete(entity)
        self._save(commit=commit)
        return True
