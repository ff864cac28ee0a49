"""
Core business logic modules for MockView

Contains:
- Plan Builder: Weighted question allocation
- Generation Gateway: Resilient backend calls
- Evaluator: Answer scoring
- Decision Engine: Follow-up vs. advance
- Interview Orchestrator: State machine for interview lifecycle
"""

from mockview.core.context import EngineContext
from mockview.core.decision_engine import Action, ActionType, decide, resolve_advance
from mockview.core.evaluator import Evaluator
from mockview.core.generation_gateway import GenerationGateway
from mockview.core.interview_orchestrator import InterviewOrchestrator
from mockview.core.plan_builder import build_question_plan, initialize_interview_state
from mockview.core.repository import InMemoryInterviewRepository, InterviewRepository

__all__ = [
    "EngineContext",
    "Action",
    "ActionType",
    "decide",
    "resolve_advance",
    "Evaluator",
    "GenerationGateway",
    "InterviewOrchestrator",
    "build_question_plan",
    "initialize_interview_state",
    "InMemoryInterviewRepository",
    "InterviewRepository",
]
