"""API version 1 routes."""

from fastapi import APIRouter

from expense_tracker.api.v1 import auth, transactions

router = APIRouter(prefix="/api/v1")

# Include routers
router.include_router(auth.router)
router.include_router(transactions.router)
