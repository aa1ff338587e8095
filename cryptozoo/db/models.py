"""
Database Models using SQLAlchemy.

These define the record store schema: the catalog of vertices (primitives)
and edges (relationships between them), the moderation queue of edit
requests, and the users allowed to review them.
They are NOT related to the API schemas (see cryptozoo.schemas.api_schemas).

Vertex ids referenced from edges and from related-vertex lists are plain
strings; the store does not enforce or cascade them.
"""
from sqlalchemy import Column, String, DateTime, Text, JSON, Boolean
from sqlalchemy.orm import declarative_base
import datetime
import uuid

Base = declarative_base()

def generate_uuid():
    return str(uuid.uuid4())

def utcnow():
    return datetime.datetime.now(datetime.timezone.utc).replace(tzinfo=None)


class SerializableMixin:
    """Column-wise dict conversion used by the workflow and diff code."""

    def to_dict(self) -> dict:
        return {column.name: getattr(self, column.name) for column in self.__table__.columns}


class Vertex(SerializableMixin, Base):
    __tablename__ = "vertices"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False, index=True)
    abbreviation = Column(String, default="")
    type = Column(String, default="")
    tags = Column(JSON, default=list)
    description = Column(Text, default="")
    definition = Column(Text, default="")  # may embed LaTeX
    references = Column(JSON, default=list)
    related_vertices = Column(JSON, default=list)
    notes = Column(Text, default="")
    wip = Column(Boolean, default=False)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow)


class Edge(SerializableMixin, Base):
    __tablename__ = "edges"

    id = Column(String, primary_key=True)
    type = Column(String, nullable=False)  # construction | impossibility | reduction | separation
    name = Column(String, nullable=False, index=True)
    description = Column(Text, default="")
    overview = Column(Text, default="")
    theorem = Column(Text, default="")
    construction = Column(Text, nullable=True)
    proof = Column(Text, default="")
    source_vertices = Column(JSON, default=list)
    target_vertices = Column(JSON, default=list)
    tags = Column(JSON, default=list)
    model = Column(String, default="")  # security model
    references = Column(JSON, default=list)
    notes = Column(Text, default="")
    wip = Column(Boolean, default=False)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow)


class EditRequest(SerializableMixin, Base):
    __tablename__ = "edit_requests"

    id = Column(String, primary_key=True, default=generate_uuid)
    type = Column(String, nullable=False)  # vertex | edge
    target_id = Column(String, nullable=True)  # absent for create
    data = Column(JSON, default=dict)
    action = Column(String, nullable=False)  # create | update | delete
    status = Column(String, nullable=False, default="pending", index=True)
    comments = Column(Text, nullable=True)
    submitted_by = Column(String, nullable=True)
    submitted_email = Column(String, nullable=True)
    submitted_at = Column(DateTime, default=utcnow, index=True)
    reviewed_by = Column(String, nullable=True)
    reviewed_at = Column(DateTime, nullable=True)
    reviewer_comments = Column(Text, nullable=True)


class User(SerializableMixin, Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True)  # id issued by the auth service
    email = Column(String, nullable=False, unique=True)
    first_name = Column(String, default="")
    last_name = Column(String, default="")
    role = Column(String, nullable=False, default="pending")  # pending | user | admin
    created_at = Column(DateTime, default=utcnow)
