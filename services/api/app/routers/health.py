"""Health check endpoint."""

from fastapi import APIRouter, Depends

from app.config import Settings, get_settings

router = APIRouter(tags=["health"])


@router.get("/health")
def health_check(settings: Settings = Depends(get_settings)) -> dict[str, str]:
    """Check API health status and report the running environment."""
    return {"status": "healthy", "environment": settings.app_env}
