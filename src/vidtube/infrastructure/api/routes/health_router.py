"""Health, readiness and liveness probes."""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from vidtube.core.config import get_settings
from vidtube.infrastructure.persistence.database import get_db_manager

router = APIRouter(tags=["health"])


def _service() -> dict[str, str]:
    settings = get_settings()
    return {"service": settings.app_name, "version": settings.app_version}


@router.get("/health")
async def health() -> dict[str, str]:
    """Process is up; does not touch the database."""
    return {"status": "healthy", **_service()}


@router.get("/live")
async def live() -> dict[str, str]:
    return {"status": "alive", **_service()}


@router.get("/ready", response_model=None)
async def ready() -> dict[str, str] | JSONResponse:
    """Ready to serve: the database answers ``SELECT 1``."""
    if await get_db_manager().check_connection():
        return {"status": "ready", "database": "connected", **_service()}
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "not_ready", "database": "disconnected", **_service()},
    )
