"""
Trip model for group travel expense sharing.
"""
from sqlalchemy import Column, String, Date, Float, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from app.db.base import BaseModel


class Trip(BaseModel):
    """Trip model representing a group travel event."""
    __tablename__ = "trips"

    name = Column(String(200), nullable=False)
    currency = Column(String(3), nullable=False, default="USD")
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)

    # Relationships
    admins = relationship("TripAdmin", back_populates="trip", cascade="all, delete-orphan")
    participants = relationship("TripParticipant", back_populates="trip", cascade="all, delete-orphan")
    invites = relationship("Invite", back_populates="trip", cascade="all, delete-orphan")
    receipts = relationship("Receipt", back_populates="trip", cascade="all, delete-orphan")
    settlements = relationship("Settlement", back_populates="trip", cascade="all, delete-orphan")


class TripAdmin(BaseModel):
    """Users allowed to manage a trip."""
    __tablename__ = "trip_admins"

    trip_id = Column(String(32), ForeignKey("trips.id"), nullable=False, index=True)
    user_id = Column(String(32), ForeignKey("users.id"), nullable=False, index=True)

    # Relationships
    trip = relationship("Trip", back_populates="admins")
    user = relationship("User", back_populates="administered_trips")

    __table_args__ = (
        UniqueConstraint('trip_id', 'user_id', name='uq_trip_admin'),
    )


class TripParticipant(BaseModel):
    """A household's membership in a trip, carrying its cost-sharing weight."""
    __tablename__ = "trip_participants"

    trip_id = Column(String(32), ForeignKey("trips.id"), nullable=False, index=True)
    household_id = Column(String(32), ForeignKey("households.id"), nullable=False, index=True)
    weight = Column(Float, nullable=False, default=1.0)

    # Relationships
    trip = relationship("Trip", back_populates="participants")
    household = relationship("Household", back_populates="trip_participations")

    __table_args__ = (
        UniqueConstraint('trip_id', 'household_id', name='uq_trip_household'),
    )
