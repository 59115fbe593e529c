import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from fitcoach.api.deps import get_db
from fitcoach.core.config import settings
from fitcoach.db.session import check_database_health

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=Dict[str, Any])
async def health_check(db: Session = Depends(get_db)):
    """
    Basic health check endpoint.

    Returns:
        dict: Service and database status
    """
    connected = check_database_health(db)
    if not connected:
        logger.error("Health check failed: database unreachable")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Service unavailable")

    return {
        "status": "healthy",
        "database": "connected",
        "service": "fitcoach-api",
        "version": settings.VERSION,
    }
