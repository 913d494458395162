"""Health check endpoints."""

from fastapi import APIRouter
from sqlalchemy import text

from config import settings
from database import SessionLocal

router = APIRouter(tags=["health"])


@router.get("/health")
def health_check() -> dict:
    """Basic health check."""
    return {"status": "ok"}


@router.get("/health/detailed")
def detailed_health_check() -> dict:
    """Detailed health check including database and gateway configuration."""
    database_status = "unknown"

    try:
        with SessionLocal() as session:
            session.execute(text("SELECT 1"))
        database_status = "connected"
    except Exception as e:
        database_status = f"error: {str(e)}"

    return {
        "status": "ok" if database_status == "connected" else "degraded",
        "database": database_status,
        "gateway_configured": bool(settings.OPENROUTER_API_KEY),
    }
