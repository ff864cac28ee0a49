"""
Results returned by the interview orchestrator's public operations
"""

from datetime import datetime

from pydantic import BaseModel

from mockview.models.evaluation import Evaluation, FollowUpType
from mockview.models.interview import Answer, CompletionReason, InterviewStatus, Question


class Progress(BaseModel):
    """Where the candidate is in the interview."""

    current: int
    estimated_total: int
    competency: str


class QuestionView(BaseModel):
    """Question as presented to the candidate."""

    id: str
    text: str
    competency: str
    is_follow_up: bool = False
    depth: int = 0
    follow_up_type: FollowUpType | None = None

    @classmethod
    def from_question(cls, question: Question) -> "QuestionView":
        return cls(
            id=question.id,
            text=question.text,
            competency=question.competency,
            is_follow_up=question.is_follow_up,
            depth=question.depth_level,
            follow_up_type=question.follow_up_type,
        )


class StartResult(BaseModel):
    interview_id: str
    first_question: QuestionView
    progress: Progress


class TurnResult(BaseModel):
    evaluation: Evaluation
    next_question: QuestionView | None = None
    progress: Progress
    is_complete: bool = False
    completion_reason: CompletionReason | None = None


class FinishResult(BaseModel):
    interview_id: str
    status: InterviewStatus
    completion_reason: CompletionReason | None = None
    total_questions: int
    duration_minutes: int
    completed_at: datetime | None = None


class OpenState(BaseModel):
    interview_id: str
    status: InterviewStatus
    current_question: QuestionView | None = None
    progress: Progress


class TranscriptEntry(BaseModel):
    """One question with its answer (if any), for read-only consumers."""

    question: Question
    answer: Answer | None = None
