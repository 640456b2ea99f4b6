"""
Pydantic schemas for Receipt entity.
"""
from pydantic import BaseModel, Field
from typing import List, Optional, Dict, Any
from datetime import datetime
from app.models.receipt import ReceiptStatus


class ReceiptData(BaseModel):
    """
    Structured receipt payload, either extracted automatically or entered by hand.

    Every field is optional; missing values are defaulted when the receipt is
    fed into a settlement.
    """
    grand_total: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
    category: Optional[str] = None
    paid_by: Optional[str] = None  # household id
    participants: Optional[List[str]] = None  # household ids
    merchant: Optional[str] = None


class ReceiptCreate(BaseModel):
    """Schema for receipt creation."""
    uploader_id: str
    parsed: Optional[ReceiptData] = None


class ReceiptUpdate(BaseModel):
    """Schema for receipt review."""
    manual_edits: Optional[ReceiptData] = None
    status: Optional[ReceiptStatus] = None


class ReceiptResponse(BaseModel):
    """Schema for receipt response."""
    id: str
    trip_id: str
    uploader_id: str
    status: ReceiptStatus
    parsed_json: Optional[Dict[str, Any]] = None
    manual_edits_json: Optional[Dict[str, Any]] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
