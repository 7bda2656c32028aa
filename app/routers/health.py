"""Liveness endpoint: API, database and photo storage backend."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.db import get_db
from app.config import get_settings
from app.models.schemas import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(db: AsyncSession = Depends(get_db)):
    """Report whether the database answers and where photos are stored."""
    settings = get_settings()
    try:
        await db.execute(text("SELECT 1"))
        database = "connected"
    except SQLAlchemyError as e:
        print(f"❌ Health check query failed: {e}")
        database = "unreachable"

    return HealthResponse(
        status="healthy" if database == "connected" else "unhealthy",
        environment=settings.environment,
        database=database,
        photo_storage="s3" if settings.s3_enabled else "disk",
    )
