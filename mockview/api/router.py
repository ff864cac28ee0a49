"""
Main API router for MockView

Aggregates all API routes and provides the main application router.
"""

from fastapi import APIRouter

from mockview.api.endpoints import health, interview

api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(
    interview.router,
    prefix="/interview",
    tags=["Interview"]
)

api_router.include_router(
    health.router,
    prefix="/health",
    tags=["Health"]
)
