"""Health check endpoint."""

from fastapi import APIRouter

from agent_proxy.config import settings
from agent_proxy.models import HealthResponse

router = APIRouter()


@router.get("/api/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    status = "ok" if settings.openai_configured else "degraded"
    return HealthResponse(
        status=status,
        openai_configured=settings.openai_configured,
        search_engine=settings.search_engine.value,
    )
