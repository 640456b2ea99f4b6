"""
Pydantic schemas for Settlement entity and settlement engine records.
"""
from pydantic import BaseModel, Field
from typing import List, Dict, Any, Optional
from datetime import datetime


class SettlementParticipant(BaseModel):
    """A household taking part in a settlement with its cost weight."""
    household_id: str
    household_name: str
    weight: float


class SettlementReceipt(BaseModel):
    """A receipt as seen by the settlement engine."""
    id: str
    grand_total: float
    category: str
    paid_by: str  # household id
    participants: List[str]  # household ids sharing this expense


class HouseholdExpense(BaseModel):
    """Ledger row for one household."""
    household_id: str
    household_name: str
    adults: int
    kids: int
    weight: float
    should_pay: float
    paid: float
    net_amount: float  # positive = is owed money, negative = owes money


class ExpenseCategory(BaseModel):
    """Per-household share of one expense category."""
    category: str
    expenses: Dict[str, float]  # household id -> share


class Transfer(BaseModel):
    """Schema for a single transfer in settlement."""
    from_household_id: str
    from_name: str
    to_household_id: str
    to_name: str
    amount: float


class SettlementData(BaseModel):
    """Full settlement engine output."""
    households: List[HouseholdExpense]
    categories: List[ExpenseCategory]
    transfers: List[Transfer]
    total_weight: float


class SettlementResponse(BaseModel):
    """Schema for settlement snapshot response."""
    id: str
    trip_id: str
    version: int
    table_json: Dict[str, Any]
    transfers_json: List[Dict[str, Any]]
    summary: Optional[str] = None
    locked: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class SettlementUpdate(BaseModel):
    """Schema for manual settlement edits by trip admins."""
    table_json: Optional[Dict[str, Any]] = None
    transfers_json: Optional[List[Dict[str, Any]]] = None
    locked: Optional[bool] = None


class SettlementListResponse(BaseModel):
    """Schema for all settlement versions of a trip."""
    settlements: List[SettlementResponse] = Field(default_factory=list)
