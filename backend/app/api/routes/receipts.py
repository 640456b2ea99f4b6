"""
Receipt routes.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
from app.db.session import get_db
from app.schemas.receipt import ReceiptCreate, ReceiptUpdate, ReceiptResponse
from app.services import receipt_service

router = APIRouter(prefix="/trips", tags=["receipts"])


@router.post("/{trip_id}/receipts", response_model=ReceiptResponse, status_code=status.HTTP_201_CREATED)
async def create_receipt(trip_id: str, receipt_data: ReceiptCreate, db: Session = Depends(get_db)):
    """Record a receipt, optionally with extracted data."""
    return receipt_service.create_receipt(trip_id, receipt_data, db)


@router.get("/{trip_id}/receipts", response_model=List[ReceiptResponse])
async def list_receipts(trip_id: str, db: Session = Depends(get_db)):
    """List receipts of a trip."""
    return receipt_service.list_receipts(trip_id, db)


@router.patch("/{trip_id}/receipts/{receipt_id}", response_model=ReceiptResponse)
async def update_receipt(
    trip_id: str,
    receipt_id: str,
    update: ReceiptUpdate,
    db: Session = Depends(get_db)
):
    """Store manual corrections for a receipt."""
    return receipt_service.update_receipt(trip_id, receipt_id, update, db)
