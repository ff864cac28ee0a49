"""
MockView - Adaptive Mock Interview Engine

Main application entry point.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mockview.api.errors import engine_error_handler
from mockview.api.router import api_router
from mockview.config.settings import Settings, get_settings
from mockview.core.context import EngineContext
from mockview.core.errors import InterviewEngineError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI application around one engine context."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager."""
        # Startup
        logger.info(f"Starting {settings.app_name}...")
        logger.info(f"Running in {'debug' if settings.debug else 'production'} mode")
        app.state.engine = EngineContext.create(settings)

        yield

        # Shutdown
        logger.info(f"Shutting down {settings.app_name}...")
        await app.state.engine.close()
        app.state.engine = None

    app = FastAPI(
        title=settings.app_name,
        description="Adaptive mock interview engine",
        version=settings.app_version,
        lifespan=lifespan,
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(InterviewEngineError, engine_error_handler)

    # Mount API routes
    app.include_router(api_router, prefix="/api")

    return app


app = create_app()


# ============================================================================
# RUN SERVER
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
