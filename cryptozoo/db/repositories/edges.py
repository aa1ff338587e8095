from sqlalchemy.orm import Session

from cryptozoo.db.models import Edge
from cryptozoo.db.repositories.catalog import CatalogRepository


class EdgeRepository(CatalogRepository):
    """Repository for edge (relationship) operations."""
    
    model = Edge
    search_fields = ("name", "description", "overview")
    
    def __init__(self, db: Session):
        super().__init__(db)
