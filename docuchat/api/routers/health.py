"""
Health check API endpoints.

Routes: GET /health, GET /health/db, GET /health/services

Dependencies: sqlalchemy, docuchat.api.deps
System role: Health check HTTP API
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from docuchat.api.deps import ServiceContainer, get_async_db, get_container
from docuchat.models.health import ComponentHealth, HealthResponse, ServicesHealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic health check."""
    return HealthResponse(status="healthy", message="Server Healthy")


@router.get("/db", response_model=HealthResponse)
async def health_check_db(db: AsyncSession = Depends(get_async_db)):
    """Database health check (SELECT 1)."""
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"{__name__}:health_check_db - {e}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=HealthResponse(status="unhealthy", message="Database connection failed").model_dump(),
        )
    return HealthResponse(status="healthy", message="Database connection OK")


def _component(result: dict) -> ComponentHealth:
    return ComponentHealth(
        status="healthy" if result.get("success") else "unhealthy",
        message=result.get("error", ""),
        timestamp=datetime.now(timezone.utc),
    )


@router.get("/services", response_model=ServicesHealthResponse)
async def health_check_services(
    container: ServiceContainer = Depends(get_container),
) -> ServicesHealthResponse:
    """S3 bucket and knowledge base reachability."""
    services = {
        "s3": _component(await run_in_threadpool(container.storage.test_connection)),
        "knowledge_base": _component(await container.indexer.test_connection()),
    }
    overall = "healthy" if all(s.status == "healthy" for s in services.values()) else "degraded"
    return ServicesHealthResponse(status=overall, services=services)
