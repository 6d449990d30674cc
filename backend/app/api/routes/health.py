"""
Health check endpoints
"""
from datetime import datetime

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.database import get_db
from app.core.logging_config import LoggingConfig

logger = LoggingConfig.get_logger(__name__)
router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check():
    """
    Basic liveness check

    Returns:
        dict: Health status
    """
    return {
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat(),
        "service": get_settings().app_name
    }


@router.get("/health/detailed")
async def detailed_health_check(db: Session = Depends(get_db)):
    """Health including the database connection and log counts by level; 503 when the database is down"""
    settings = get_settings()
    health_status = {
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat(),
        "service": settings.app_name,
        "environment": settings.app_env,
        "components": {},
        "log_counts": LoggingConfig.get_metrics(),
    }

    try:
        db.execute(text("SELECT 1"))
        health_status["components"]["database"] = {
            "status": "healthy",
            "message": "Database connection successful"
        }
    except SQLAlchemyError as e:
        logger.error("Database health check failed", exc_info=True)
        health_status["status"] = "unhealthy"
        health_status["components"]["database"] = {
            "status": "unhealthy",
            "message": "Database connection failed",
            "error": type(e).__name__
        }
        return JSONResponse(status_code=503, content=health_status)

    return health_status
