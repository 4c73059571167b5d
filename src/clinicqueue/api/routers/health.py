"""
Health check endpoints.
"""

from datetime import datetime

from fastapi import APIRouter, Request
from pydantic import BaseModel

from ...core.config import get_settings
from ..schemas.common import ApiResponse
from ..utils.responses import ok

router = APIRouter(prefix="/health", tags=["health"])


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str
    timestamp: datetime
    version: str
    service: str


@router.get("", response_model=ApiResponse[HealthResponse])
async def health_check(request: Request):
    """
    Health check endpoint.

    Returns the current status of the service.
    """
    settings = get_settings()
    return ok(request, data=HealthResponse(
        status="healthy",
        timestamp=datetime.utcnow(),
        version=settings.app_version,
        service=settings.app_name,
    ), message="OK")


@router.get("/ready", response_model=ApiResponse[dict])
async def readiness_check(request: Request):
    """
    Readiness check endpoint.

    Pings MongoDB when the mongo backend is configured; the in-memory
    backend is always ready.
    """
    settings = get_settings()
    checks = {"backend": settings.database.backend}
    all_ok = True

    if settings.database.backend == "mongo":
        try:
            from motor.motor_asyncio import AsyncIOMotorClient
            client = AsyncIOMotorClient(settings.database.uri, serverSelectionTimeoutMS=5000)
            await client.admin.command("ping")
            checks["database"] = "ok"
        except Exception as e:
            checks["database"] = f"error: {str(e)[:50]}"
            all_ok = False
    else:
        checks["database"] = "in_memory"

    status = "ready" if all_ok else "degraded"
    return ok(request, data={
        "status": status,
        "timestamp": datetime.utcnow(),
        "checks": checks,
    }, message="OK" if all_ok else "Some services unavailable")
