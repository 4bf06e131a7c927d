"""Health check."""

from fastapi import APIRouter

from app import __version__
from app.config import settings
from app.schemas.system import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Lightweight liveness check; does not call Appwrite."""
    return HealthResponse(
        version=__version__,
        appwrite_configured=bool(settings.appwrite_project_id and settings.appwrite_api_key),
    )


@router.get("/ping")
async def ping():
    """Ultra-lightweight ping."""
    return {"status": "ok"}
