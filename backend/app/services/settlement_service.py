"""
Settlement service: recomputes, stores and renders versioned settlements.
"""
import logging
from sqlalchemy.orm import Session, joinedload
from sqlalchemy.exc import IntegrityError
from sqlalchemy import func
from typing import List, Optional
from pydantic import ValidationError
from app.core.config import settings
from app.core.utils import format_amount
from app.models.receipt import Receipt, SETTLED_RECEIPT_STATUSES
from app.models.settlement import Settlement
from app.models.trip import Trip, TripParticipant
from app.schemas.receipt import ReceiptData
from app.schemas.settlement import (
    SettlementParticipant, SettlementReceipt, SettlementData, SettlementUpdate
)
from app.services.exceptions import NotFoundError, InvalidRequestError
from app.services.settlement_engine import calculate_settlement
from app.services.trip_service import get_trip

logger = logging.getLogger(__name__)


def load_settlement_participants(trip_id: str, db: Session) -> List[SettlementParticipant]:
    """Load the current trip participants with household names and weights."""
    participants = db.query(TripParticipant).options(
        joinedload(TripParticipant.household)
    ).filter(
        TripParticipant.trip_id == trip_id
    ).order_by(TripParticipant.created_at, TripParticipant.id).all()

    return [
        SettlementParticipant(
            household_id=p.household_id,
            household_name=p.household.display_name,
            weight=p.weight
        )
        for p in participants
    ]


def resolve_receipt_data(receipt: Receipt) -> ReceiptData:
    """
    Return the payload that counts for a receipt.

    Manual edits replace the parsed payload as a whole when present.
    A payload that does not validate is treated as empty.
    """
    payload = receipt.manual_edits_json
    if payload is None:
        payload = receipt.parsed_json
    if payload is None:
        payload = {}
    try:
        return ReceiptData.model_validate(payload)
    except ValidationError as e:
        logger.warning(f"Receipt {receipt.id} has an invalid payload, using defaults: {e}")
        return ReceiptData()


def to_settlement_receipt(
    receipt: Receipt,
    participants: List[SettlementParticipant]
) -> SettlementReceipt:
    """Map a stored receipt to engine input, filling missing fields with defaults."""
    data = resolve_receipt_data(receipt)

    # An explicit empty participant list is kept; only a missing one means everybody
    if data.participants is None:
        receipt_participants = [p.household_id for p in participants]
    else:
        receipt_participants = list(data.participants)

    return SettlementReceipt(
        id=receipt.id,
        grand_total=data.grand_total or 0,
        category=data.category or settings.DEFAULT_RECEIPT_CATEGORY,
        paid_by=data.paid_by or participants[0].household_id,
        participants=receipt_participants
    )


def log_receipt_anomalies(
    receipts: List[SettlementReceipt],
    participants: List[SettlementParticipant]
) -> int:
    """
    Log receipts the engine will partly or fully ignore.

    Returns the number of anomalies found.
    """
    weights = {p.household_id: p.weight for p in participants}
    anomalies = 0
    for receipt in receipts:
        participating_weight = sum(
            weights[hid] for hid in set(receipt.participants) if hid in weights
        )
        if participating_weight == 0:
            anomalies += 1
            logger.warning(
                f"Receipt {receipt.id} has no weighted participant in the trip and is ignored"
            )
        elif receipt.paid_by not in weights:
            anomalies += 1
            logger.warning(
                f"Receipt {receipt.id} is paid by unknown household {receipt.paid_by}; "
                f"{receipt.grand_total:.2f} is not credited"
            )
    return anomalies


def build_summary(data: SettlementData, currency: str) -> str:
    """Create a human-readable summary of a settlement."""
    summary_lines = []
    total_should_pay = sum(h.should_pay for h in data.households)
    summary_lines.append(f"Total expenses: {total_should_pay:.2f} {currency}")
    summary_lines.append(f"Households: {len(data.households)} (total weight {data.total_weight:.1f})")
    summary_lines.append("\nNet amounts:")
    for household in data.households:
        summary_lines.append(f"  {household.household_name}: {household.net_amount:+.2f} {currency}")
    summary_lines.append("\nTransfers:")
    for transfer in data.transfers:
        summary_lines.append(
            f"  {transfer.from_name} -> {transfer.to_name}: {transfer.amount:.2f} {currency}"
        )
    return "\n".join(summary_lines)


def next_settlement_version(trip_id: str, db: Session) -> int:
    """Return the version number the next settlement of a trip should get."""
    latest = db.query(func.max(Settlement.version)).filter(
        Settlement.trip_id == trip_id
    ).scalar()
    return (latest or 0) + 1


def recompute_settlement(trip_id: str, db: Session) -> Settlement:
    """
    Calculate a settlement from the current receipts and store it as a new version.

    Earlier versions are never modified.
    """
    trip = get_trip(trip_id, db)

    receipts = db.query(Receipt).filter(
        Receipt.trip_id == trip_id,
        Receipt.status.in_(SETTLED_RECEIPT_STATUSES)
    ).order_by(Receipt.created_at, Receipt.id).all()

    participants = load_settlement_participants(trip_id, db)
    if not participants:
        raise InvalidRequestError("No participants in trip")

    receipt_data = [to_settlement_receipt(r, participants) for r in receipts]
    log_receipt_anomalies(receipt_data, participants)

    data = calculate_settlement(receipt_data, participants)
    table_json = {
        "households": [h.model_dump() for h in data.households],
        "categories": [c.model_dump() for c in data.categories],
        "total_weight": data.total_weight,
    }
    transfers_json = [t.model_dump() for t in data.transfers]
    summary = build_summary(data, trip.currency)

    # A concurrent recompute may take the same version; the unique constraint catches it
    attempts = max(settings.SETTLEMENT_VERSION_RETRIES, 1)
    for attempt in range(1, attempts + 1):
        settlement = Settlement(
            trip_id=trip_id,
            version=next_settlement_version(trip_id, db),
            table_json=table_json,
            transfers_json=transfers_json,
            summary=summary
        )
        db.add(settlement)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            if attempt == attempts:
                logger.error(f"Could not allocate a settlement version for trip {trip_id}", exc_info=True)
                raise
            logger.warning(f"Settlement version conflict for trip {trip_id}, retrying ({attempt}/{attempts})")
            continue
        db.refresh(settlement)
        break

    logger.info(
        f"Settlement v{settlement.version} computed for trip {trip_id}: "
        f"{len(receipt_data)} receipts, {len(data.transfers)} transfers"
    )
    return settlement


def list_settlements(trip_id: str, db: Session) -> List[Settlement]:
    """List all settlement versions of a trip, newest first."""
    get_trip(trip_id, db)
    return db.query(Settlement).filter(
        Settlement.trip_id == trip_id
    ).order_by(Settlement.version.desc()).all()


def get_settlement_by_version(trip_id: str, version: int, db: Session) -> Settlement:
    """Get one settlement snapshot of a trip by version."""
    settlement = db.query(Settlement).filter(
        Settlement.trip_id == trip_id,
        Settlement.version == version
    ).first()
    if not settlement:
        raise NotFoundError("Settlement not found")
    return settlement


def update_settlement(
    trip_id: str,
    settlement_id: str,
    payload: SettlementUpdate,
    db: Session
) -> Settlement:
    """Apply manual edits to a settlement snapshot; absent fields are kept."""
    settlement = db.query(Settlement).filter(
        Settlement.id == settlement_id,
        Settlement.trip_id == trip_id
    ).first()
    if not settlement:
        raise NotFoundError("Settlement not found")

    if payload.table_json is not None:
        settlement.table_json = payload.table_json
    if payload.transfers_json is not None:
        settlement.transfers_json = payload.transfers_json
    if payload.locked is not None:
        settlement.locked = payload.locked

    db.commit()
    db.refresh(settlement)
    return settlement


def render_settlement_report(settlement: Settlement, trip: Optional[Trip] = None) -> str:
    """
    Render a settlement snapshot as a plain-text table.

    Reads the stored payload, so manual edits show up in the report.
    """
    trip = trip or settlement.trip
    table = settlement.table_json or {}
    households = table.get("households") or []
    categories = table.get("categories") or []
    total_weight = table.get("total_weight") or 0

    header = ["Category"] + [h.get("household_name", "") for h in households]
    rows = [
        ["Adults (x1)"] + [str(h.get("adults", 0)) for h in households],
        ["Kids (x0.5)"] + [str(h.get("kids", 0)) for h in households],
        ["Total Weight"] + [f"{h.get('weight', 0):.1f}" for h in households],
    ]
    for category in categories:
        expenses = category.get("expenses") or {}
        rows.append(
            [category.get("category", "")]
            + [format_amount(expenses.get(h.get("household_id"), 0)) for h in households]
        )
    rows.append(["Should Pay"] + [format_amount(h.get("should_pay", 0)) for h in households])
    rows.append(["Paid"] + [f"({h.get('paid', 0):.2f})" for h in households])
    rows.append(
        ["Net Amount"]
        + [format_amount(h.get("net_amount", 0), negative_in_parens=True) for h in households]
    )

    widths = [
        max(len(row[i]) for row in [header] + rows)
        for i in range(len(header))
    ]

    def format_row(row: List[str]) -> str:
        cells = [row[0].ljust(widths[0])]
        cells += [cell.rjust(width) for cell, width in zip(row[1:], widths[1:])]
        return "  ".join(cells).rstrip()

    lines = [
        trip.name,
        f"Settlement Report v{settlement.version}",
        "",
        format_row(header),
        "-" * len(format_row(header)),
    ]
    lines += [format_row(row) for row in rows]
    lines += [
        "",
        f"Total Weight: {total_weight:.1f}",
        f"Currency: {trip.currency}",
    ]
    if settlement.locked:
        lines.append("Locked: yes")
    return "\n".join(lines) + "\n"
