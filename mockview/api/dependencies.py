"""
API Dependencies

Provides dependency injection for API endpoints. The engine context is
built once in the application lifespan and stored on ``app.state``.
"""

from fastapi import Request

from mockview.core.context import EngineContext
from mockview.core.generation_gateway import GenerationGateway
from mockview.core.interview_orchestrator import InterviewOrchestrator


def get_engine(request: Request) -> EngineContext:
    """Get the engine context created at startup."""
    engine = getattr(request.app.state, "engine", None)
    if engine is None:
        raise RuntimeError("Engine context not initialized; is the app lifespan running?")
    return engine


def get_orchestrator(request: Request) -> InterviewOrchestrator:
    """Get the interview orchestrator."""
    return get_engine(request).orchestrator


def get_gateway(request: Request) -> GenerationGateway:
    """Get the generation gateway."""
    return get_engine(request).gateway
