"""
Health check endpoints for monitoring application status
"""
from datetime import datetime

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.models.common import HealthResponse

router = APIRouter(prefix="/health")

VERSION = "1.0.0"


@router.get("", response_model=HealthResponse)
async def health_check():
    """
    Health check endpoint to verify the API is running
    """
    return HealthResponse(
        status="healthy",
        message="Visa Circle API is running",
        timestamp=datetime.utcnow(),
        version=VERSION,
    )


@router.get("/ready", response_model=HealthResponse)
async def readiness_check(db: AsyncSession = Depends(get_db)):
    """
    Readiness check: the database must answer a trivial query
    """
    try:
        await db.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        return JSONResponse(
            status_code=503,
            content=HealthResponse(
                status="not_ready",
                message=f"Database unavailable: {e.__class__.__name__}",
                timestamp=datetime.utcnow(),
                version=VERSION,
            ).model_dump(mode="json"),
        )

    return HealthResponse(
        status="ready",
        message="Visa Circle API is ready to accept requests",
        timestamp=datetime.utcnow(),
        version=VERSION,
    )
