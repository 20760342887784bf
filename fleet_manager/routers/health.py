# fleet_manager/routers/health.py
"""
System health check endpoint.
Returns status of backend + DB, plus a few fleet counters.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import text
from fleet_manager.database import get_db
from fleet_manager.config import settings
from fleet_manager.services.user_service import count_users
from datetime import datetime

router = APIRouter()


@router.get("/health", summary="System health check")
def health_check(db: Session = Depends(get_db)):
    """
    Returns:
    - Backend status
    - Database connectivity
    - Registered users vs. the user limit
    """
    result = {
        "status": "ok",
        "timestamp": datetime.utcnow().isoformat(),
        "backend": "ok",
        "database": "unknown",
        "users": None,
        "max_users": settings.MAX_USERS,
    }

    try:
        db.execute(text("SELECT 1"))
        result["database"] = "ok"
        result["users"] = count_users(db)
    except Exception as e:
        result["database"] = f"error: {str(e)}"
        result["status"] = "degraded"

    return result
