"""
Receipt service for recording and reviewing trip receipts.
"""
import logging
from sqlalchemy.orm import Session
from typing import List
from app.models.receipt import Receipt, ReceiptStatus
from app.models.user import User
from app.schemas.receipt import ReceiptCreate, ReceiptUpdate
from app.services.exceptions import NotFoundError
from app.services.trip_service import get_trip

logger = logging.getLogger(__name__)


def create_receipt(trip_id: str, receipt_data: ReceiptCreate, db: Session) -> Receipt:
    """
    Record a receipt for a trip.

    A receipt that arrives with extracted data is ready for settlement;
    one without stays pending until reviewed.
    """
    get_trip(trip_id, db)
    uploader = db.query(User).filter(User.id == receipt_data.uploader_id).first()
    if not uploader:
        raise NotFoundError("Uploader not found")

    parsed = receipt_data.parsed
    receipt = Receipt(
        trip_id=trip_id,
        uploader_id=uploader.id,
        status=ReceiptStatus.PARSED if parsed is not None else ReceiptStatus.PENDING,
        parsed_json=parsed.model_dump(exclude_none=True) if parsed is not None else None
    )
    db.add(receipt)
    db.commit()
    db.refresh(receipt)
    return receipt


def list_receipts(trip_id: str, db: Session) -> List[Receipt]:
    """List receipts of a trip, newest first."""
    get_trip(trip_id, db)
    return db.query(Receipt).filter(
        Receipt.trip_id == trip_id
    ).order_by(Receipt.created_at.desc()).all()


def update_receipt(trip_id: str, receipt_id: str, update: ReceiptUpdate, db: Session) -> Receipt:
    """
    Store manual corrections and/or a new status for a receipt.

    Manual edits mark the receipt as reviewed unless a status is given.
    """
    receipt = db.query(Receipt).filter(
        Receipt.id == receipt_id,
        Receipt.trip_id == trip_id
    ).first()
    if not receipt:
        raise NotFoundError("Receipt not found")

    if update.manual_edits is not None:
        receipt.manual_edits_json = update.manual_edits.model_dump(exclude_none=True)
        receipt.status = ReceiptStatus.REVIEWED
    if update.status is not None:
        receipt.status = update.status

    db.commit()
    db.refresh(receipt)
    logger.debug(f"Receipt {receipt.id} updated, status {receipt.status.value}")
    return receipt
