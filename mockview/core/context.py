"""
Engine context for MockView

Builds every core component exactly once, at process start, and hands
them around as one explicit handle.
"""

import logging
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict

from mockview.config.settings import Settings
from mockview.core.evaluator import Evaluator
from mockview.core.generation_gateway import GenerationGateway
from mockview.core.interview_orchestrator import InterviewOrchestrator
from mockview.core.repository import InMemoryInterviewRepository

logger = logging.getLogger(__name__)


class EngineContext(BaseModel):
    """Handle holding the wired-up engine components."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    settings: Settings
    gateway: GenerationGateway
    evaluator: Evaluator
    repository: Any  # InterviewRepository
    orchestrator: InterviewOrchestrator

    @classmethod
    def create(
        cls,
        settings: Settings,
        client: httpx.AsyncClient | None = None,
        repository=None,
    ) -> "EngineContext":
        """
        Wire all components.

        Args:
            settings: Application settings
            client: Optional HTTP client for the gateway
            repository: Optional persistence implementation
        """
        gateway = GenerationGateway(settings, client=client)
        evaluator = Evaluator(gateway)
        repository = repository or InMemoryInterviewRepository()
        orchestrator = InterviewOrchestrator(
            settings=settings,
            gateway=gateway,
            evaluator=evaluator,
            repository=repository,
        )

        logger.info(
            f"Engine initialized (generation={'local' if settings.mock_ai_services else settings.ollama_host}, "
            f"max_questions={settings.max_questions}, max_depth={settings.max_follow_up_depth})"
        )

        return cls(
            settings=settings,
            gateway=gateway,
            evaluator=evaluator,
            repository=repository,
            orchestrator=orchestrator,
        )

    async def close(self) -> None:
        """Release network resources."""
        await self.gateway.close()
