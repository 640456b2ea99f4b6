"""
Settlement model storing versioned settlement snapshots.
"""
from sqlalchemy import Column, Text, ForeignKey, Integer, String, Boolean, JSON, UniqueConstraint
from sqlalchemy.orm import relationship
from app.db.base import BaseModel


class Settlement(BaseModel):
    """Settlement snapshot; a recompute always adds a new version."""
    __tablename__ = "settlements"

    trip_id = Column(String(32), ForeignKey("trips.id"), nullable=False, index=True)
    version = Column(Integer, nullable=False)
    table_json = Column(JSON, nullable=False)  # households, categories, total_weight
    transfers_json = Column(JSON, nullable=False)
    summary = Column(Text, nullable=True)
    locked = Column(Boolean, default=False, nullable=False)

    # Relationships
    trip = relationship("Trip", back_populates="settlements")

    __table_args__ = (
        UniqueConstraint('trip_id', 'version', name='uq_trip_settlement_version'),
    )
