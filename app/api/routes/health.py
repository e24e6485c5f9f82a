from fastapi import APIRouter, Depends, status
from pydantic import BaseModel
from datetime import datetime, timezone
from app.config.settings import settings
from app.core.dependencies import get_ai_service, get_jira_service
from app.repositories.interfaces.ai_service import IAIService
from app.repositories.interfaces.jira_service import IJiraService

router = APIRouter(prefix="/health", tags=["health"])

VERSION = "1.0.0"


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
    version: str
    environment: str


@router.get("/", response_model=HealthResponse, status_code=status.HTTP_200_OK)
async def health_check():
    """Health check endpoint"""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc),
        version=VERSION,
        environment=settings.environment
    )


@router.get("/readiness")
async def readiness_check(
    ai_service: IAIService = Depends(get_ai_service),
    jira_service: IJiraService = Depends(get_jira_service),
):
    """Readiness check endpoint"""
    checks = {
        "ai_service": "ok" if ai_service.is_configured() else "not_configured",
        "jira": "ok" if jira_service.is_configured() else "not_configured",
        "zephyr": "ok" if settings.zephyr_api_token else "not_configured",
    }

    # Only the AI service is required for the core workflow
    ready = checks["ai_service"] == "ok"

    return {
        "status": "ready" if ready else "not_ready",
        "checks": checks,
        "coverage_strategy": settings.coverage_strategy,
        "timestamp": datetime.now(timezone.utc)
    }
