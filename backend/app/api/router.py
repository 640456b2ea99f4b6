"""
Main API router that includes all route modules.
"""
from fastapi import APIRouter
from app.api.routes import (
    users, households, trips, invites, receipts, settlements
)

api_router = APIRouter()

# Include all route modules
api_router.include_router(users.router)
api_router.include_router(households.router)
api_router.include_router(trips.router)
api_router.include_router(invites.router)
api_router.include_router(receipts.router)
api_router.include_router(settlements.router)
