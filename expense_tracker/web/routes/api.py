"""JSON API router collecting every resource under /api."""
from __future__ import annotations

from fastapi import APIRouter

from expense_tracker.web.routes import api_categories, api_summary, api_transactions, health

router = APIRouter()

router.include_router(api_transactions.router, prefix="/transactions", tags=["transactions"])
router.include_router(api_categories.router, prefix="/categories", tags=["categories"])
router.include_router(api_summary.router, tags=["summary"])
router.include_router(health.router, tags=["health"])
