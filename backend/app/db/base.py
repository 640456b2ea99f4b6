"""
Declarative base and common columns for all models.
"""
import uuid
from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import declarative_base
from app.core.utils import utcnow

Base = declarative_base()


def generate_id() -> str:
    """Generate a string primary key."""
    return uuid.uuid4().hex


class BaseModel(Base):
    """Abstract base model with id and timestamps."""
    __abstract__ = True

    id = Column(String(32), primary_key=True, default=generate_id)
    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)
