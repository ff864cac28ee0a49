"""
Interview API endpoints

Handles interview lifecycle:
- Starting interviews
- Submitting answers
- Finishing early
- Resuming after a reconnect
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from mockview.api.dependencies import get_orchestrator
from mockview.core.interview_orchestrator import InterviewOrchestrator
from mockview.models.competency import PlanInput
from mockview.models.results import (
    FinishResult,
    OpenState,
    StartResult,
    TranscriptEntry,
    TurnResult,
)

router = APIRouter()


# ============================================================================
# REQUEST MODELS
# ============================================================================

class SubmitAnswerRequest(BaseModel):
    """Request model for submitting an answer."""
    question_id: str
    answer_text: str = Field(..., min_length=1)
    response_time_ms: int | None = Field(default=None, ge=0)


# ============================================================================
# REST ENDPOINTS
# ============================================================================

@router.post("/start", response_model=StartResult)
async def start_interview(
    request: PlanInput,
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> StartResult:
    """
    Start a new interview.

    Builds the question plan from the role's competency areas and
    returns the first question.
    """
    return await orchestrator.start(request)


@router.post("/{interview_id}/answer", response_model=TurnResult)
async def submit_answer(
    interview_id: str,
    request: SubmitAnswerRequest,
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> TurnResult:
    """
    Submit an answer to the current open question.

    The answer is evaluated and the next question (or completion) returned.
    """
    return await orchestrator.submit_answer(
        interview_id,
        question_id=request.question_id,
        answer_text=request.answer_text,
        response_time_ms=request.response_time_ms,
    )


@router.post("/{interview_id}/finish", response_model=FinishResult)
async def finish_interview(
    interview_id: str,
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> FinishResult:
    """Finish the interview early, or confirm completion. Idempotent."""
    return await orchestrator.finish_early(interview_id)


@router.get("/{interview_id}/state", response_model=OpenState)
async def get_interview_state(
    interview_id: str,
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> OpenState:
    """Get the current open question and progress (for resuming)."""
    return orchestrator.get_open_state(interview_id)


@router.get("/{interview_id}/transcript", response_model=list[TranscriptEntry])
async def get_transcript(
    interview_id: str,
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> list[TranscriptEntry]:
    """Get all questions and answers so far."""
    return orchestrator.get_transcript(interview_id)
