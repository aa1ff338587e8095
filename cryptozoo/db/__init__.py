from cryptozoo.db.models import Base
from cryptozoo.db.database import engine, get_db, SessionLocal

from cryptozoo.db.init_db import init_database

# Create database and tables if they don't exist
def init_db():
    """Initialize the database - create both the database and tables if needed."""
    init_database()
