"""
Settlement management routes.
"""
from fastapi import APIRouter, Depends, status
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.schemas.settlement import SettlementResponse, SettlementUpdate, SettlementListResponse
from app.services import settlement_service
from app.services.trip_service import get_trip

router = APIRouter(prefix="/trips", tags=["settlements"])


@router.get("/{trip_id}/settlements", response_model=SettlementListResponse)
async def list_settlements(trip_id: str, db: Session = Depends(get_db)):
    """List all settlement versions, newest first."""
    settlements = settlement_service.list_settlements(trip_id, db)
    return SettlementListResponse(
        settlements=[SettlementResponse.model_validate(s) for s in settlements]
    )


@router.post(
    "/{trip_id}/settlements/recompute",
    response_model=SettlementResponse,
    status_code=status.HTTP_201_CREATED
)
async def recompute_settlement(trip_id: str, db: Session = Depends(get_db)):
    """Compute a new settlement version from the current receipts."""
    return settlement_service.recompute_settlement(trip_id, db)


@router.get("/{trip_id}/settlements/{version}", response_model=SettlementResponse)
async def get_settlement(trip_id: str, version: int, db: Session = Depends(get_db)):
    """Get one settlement version."""
    return settlement_service.get_settlement_by_version(trip_id, version, db)


@router.get("/{trip_id}/settlements/{version}/export", response_class=PlainTextResponse)
async def export_settlement(trip_id: str, version: int, db: Session = Depends(get_db)):
    """Export one settlement version as a printable text report."""
    trip = get_trip(trip_id, db)
    settlement = settlement_service.get_settlement_by_version(trip_id, version, db)
    return settlement_service.render_settlement_report(settlement, trip)


@router.patch("/{trip_id}/settlements/{settlement_id}", response_model=SettlementResponse)
async def update_settlement(
    trip_id: str,
    settlement_id: str,
    payload: SettlementUpdate,
    db: Session = Depends(get_db)
):
    """Apply manual edits to a settlement or lock it."""
    return settlement_service.update_settlement(trip_id, settlement_id, payload, db)
