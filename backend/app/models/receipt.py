"""
Receipt model holding extracted and manually corrected expense data.
"""
from sqlalchemy import Column, String, ForeignKey, JSON, Enum as SQLEnum
from sqlalchemy.orm import relationship
from app.db.base import BaseModel
import enum


class ReceiptStatus(str, enum.Enum):
    """Receipt processing status enumeration."""
    PENDING = "PENDING"
    PARSED = "PARSED"
    REVIEWED = "REVIEWED"
    FAILED = "FAILED"


# Receipts in these states carry usable data for settlement
SETTLED_RECEIPT_STATUSES = (ReceiptStatus.PARSED, ReceiptStatus.REVIEWED)


class Receipt(BaseModel):
    """Receipt model representing one shared expense."""
    __tablename__ = "receipts"

    trip_id = Column(String(32), ForeignKey("trips.id"), nullable=False, index=True)
    uploader_id = Column(String(32), ForeignKey("users.id"), nullable=False, index=True)
    status = Column(SQLEnum(ReceiptStatus), default=ReceiptStatus.PENDING, nullable=False, index=True)
    parsed_json = Column(JSON, nullable=True)  # Automatically extracted payload
    manual_edits_json = Column(JSON, nullable=True)  # Human-corrected payload, wins over parsed_json

    # Relationships
    trip = relationship("Trip", back_populates="receipts")
    uploader = relationship("User", back_populates="receipts")
