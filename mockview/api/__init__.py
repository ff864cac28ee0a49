"""
API layer for MockView

Contains FastAPI routers for:
- Interview lifecycle
- Health checks
"""

from mockview.api.router import api_router

__all__ = ["api_router"]
