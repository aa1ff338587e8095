"""
Database initialization and seeding utilities.
"""
import json
import logging
from pathlib import Path
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from cryptozoo.db.models import Base
from cryptozoo.db.database import create_database_if_not_exists
from cryptozoo.config import get_db_components

logger = logging.getLogger(__name__)

# Seed files written by the authoring tool use camelCase list fields
SEED_FIELD_ALIASES = {
    "relatedVertices": "related_vertices",
    "sourceVertices": "source_vertices",
    "targetVertices": "target_vertices",
}


def create_tables(engine=None):
    """Create all tables defined in models."""
    owns_engine = engine is None
    engine = engine or create_engine(get_db_components()["db_url"])
    
    logger.info("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    logger.info("All tables created successfully")
    
    if owns_engine:
        engine.dispose()


def drop_all_tables(engine=None):
    """Drop all tables (useful for testing)."""
    owns_engine = engine is None
    engine = engine or create_engine(get_db_components()["db_url"])
    
    logger.info("Dropping all database tables...")
    Base.metadata.drop_all(bind=engine)
    logger.info("All tables dropped successfully")
    
    if owns_engine:
        engine.dispose()


def _normalize_seed_item(item: dict) -> dict:
    return {SEED_FIELD_ALIASES.get(key, key): value for key, value in item.items()}


def seed_catalog(db: Session, seed_file: Path) -> dict:
    """
    Load vertices and edges from a JSON document into the catalog.
    
    Items whose id already exists are skipped, so seeding is repeatable.
    
    Args:
        db: Database session
        seed_file: Path to a JSON file with "vertices" and "edges" lists
        
    Returns:
        Number of vertices and edges inserted
    """
    from cryptozoo.db.repositories import VertexRepository, EdgeRepository

    with open(seed_file, "r", encoding="utf-8") as f:
        document = json.load(f)

    counts = {"vertices": 0, "edges": 0}
    for key, repo in (("vertices", VertexRepository(db)), ("edges", EdgeRepository(db))):
        columns = set(repo.model.__table__.columns.keys())
        for item in document.get(key, []):
            item = {k: v for k, v in _normalize_seed_item(item).items() if k in columns}
            if item.get("id") and repo.get(item["id"]):
                continue
            repo.create(item)
            counts[key] += 1

    logger.info(f"Seeded {counts['vertices']} vertices and {counts['edges']} edges from {seed_file}")
    return counts


def init_database():
    """Complete database initialization."""
    logger.info("Initializing database...")
    create_database_if_not_exists()
    create_tables()
    logger.info("Database initialization complete")


if __name__ == "__main__":
    import sys
    from cryptozoo.db.database import SessionLocal

    logging.basicConfig(level=logging.INFO)
    init_database()
    if len(sys.argv) > 1:
        db = SessionLocal()
        try:
            seed_catalog(db, Path(sys.argv[1]))
        finally:
            db.close()
