"""
User model for people taking part in trips.
"""
from sqlalchemy import Column, String
from sqlalchemy.orm import relationship
from app.db.base import BaseModel


class User(BaseModel):
    """User model identified by a unique email."""
    __tablename__ = "users"

    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(100), nullable=True)

    # Relationships
    household_memberships = relationship("HouseholdMember", back_populates="user", cascade="all, delete-orphan")
    administered_trips = relationship("TripAdmin", back_populates="user", cascade="all, delete-orphan")
    receipts = relationship("Receipt", back_populates="uploader")
