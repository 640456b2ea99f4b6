"""Models package - Import all models for SQLAlchemy registration."""
from app.models.user import User
from app.models.household import Household, HouseholdMember, HouseholdRole
from app.models.trip import Trip, TripAdmin, TripParticipant
from app.models.invite import Invite
from app.models.receipt import Receipt, ReceiptStatus
from app.models.settlement import Settlement

__all__ = [
    "User",
    "Household",
    "HouseholdMember",
    "HouseholdRole",
    "Trip",
    "TripAdmin",
    "TripParticipant",
    "Invite",
    "Receipt",
    "ReceiptStatus",
    "Settlement",
]
