"""
Health API endpoints
"""

from fastapi import APIRouter, Depends

from mockview.api.dependencies import get_engine
from mockview.core.context import EngineContext

router = APIRouter()


@router.get("")
async def health_check(engine: EngineContext = Depends(get_engine)) -> dict:
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": engine.settings.app_version,
    }


@router.get("/generation")
async def generation_health(engine: EngineContext = Depends(get_engine)) -> dict:
    """Check the generation backend and its required models."""
    health = await engine.gateway.check_health()
    models = await engine.gateway.check_required_models()

    return {
        "status": "healthy" if health.healthy and models.all_present else "degraded",
        "backend": health.model_dump(),
        "models": models.model_dump(),
    }
