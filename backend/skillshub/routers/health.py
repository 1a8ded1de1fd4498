import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from skillshub.database import get_db

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/health")
def health_check(db: Session = Depends(get_db)):
    """Health check endpoint that verifies database connectivity."""
    try:
        db.execute(text("SELECT 1"))
        db_status = "healthy"
    except SQLAlchemyError as e:
        logger.warning("Health check database ping failed: %s", e)
        db_status = f"unhealthy: {e.__class__.__name__}"

    return {
        "status": "ok" if db_status == "healthy" else "degraded",
        "database": db_status,
    }
