import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request

from expense_tracker.core.database import Database
from expense_tracker.web.dependencies import get_database

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health", summary="Health check")
async def health(request: Request, db: Database = Depends(get_database)) -> dict[str, str]:
    """Simple health check that also touches the database."""
    connected = db.is_active and await db.ping()
    if not connected:
        logger.warning("Health check: database is not reachable")

    return {
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "database": "Connected" if connected else "Disconnected",
        "backend": db.backend_kind.value,
        "version": request.app.version,
    }
