"""
Generation request/result models for MockView

These are the structured shapes exchanged with the generation backend.
Payloads are validated here, at the deserialization boundary; anything
that fails validation counts as malformed output.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from mockview.models.competency import CandidateProfile, CompetencyArea, RoleRequirements
from mockview.models.evaluation import FollowUpType, SuggestedFollowUp


class GenerationKind(str, Enum):
    """Result shapes the gateway can produce."""

    QUESTION = "question"
    FOLLOW_UP = "follow_up"
    EVALUATION = "evaluation"


# ============================================================================
# CONTEXTS (what the caller supplies)
# ============================================================================

class QuestionContext(BaseModel):
    """Context for generating a root question in a competency."""

    profile: CandidateProfile
    role: RoleRequirements
    competency: CompetencyArea
    question_number: int = Field(..., ge=1)


class FollowUpContext(BaseModel):
    """Context for generating a follow-up to the previous answer."""

    previous_question: str
    previous_answer: str
    evaluation_reasoning: str = ""
    competency: str
    follow_up_type: FollowUpType
    depth: int = Field(..., ge=1)


class EvaluationContext(BaseModel):
    """Context for scoring one answer."""

    question_text: str
    answer_text: str
    competency: str
    expected_topics: list[str] = Field(default_factory=list)


GenerationContext = QuestionContext | FollowUpContext | EvaluationContext


# ============================================================================
# RESULTS (what the backend must return)
# ============================================================================

class GeneratedQuestion(BaseModel):
    """A question produced by the backend (root or follow-up)."""

    question_text: str = Field(..., min_length=1)
    competency: str = ""
    expected_topics: list[str] = Field(default_factory=list)
    difficulty: str | None = None
    type: str = "technical"
    follow_up_type: FollowUpType | None = None
    transition: str | None = None

    @field_validator("question_text")
    @classmethod
    def _reject_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("question_text is blank")
        return value.strip()


class GeneratedEvaluation(BaseModel):
    """
    Raw evaluation as reported by the backend.

    Dimension values are not range-checked here; the evaluator clamps
    them and recomputes the overall score. Infinite or NaN values are
    rejected, so they count as malformed output.
    """

    model_config = ConfigDict(allow_inf_nan=False)

    relevance: float
    depth: float
    accuracy: float
    examples: float
    communication: float
    overall_score: float | None = None
    reasoning: str = ""
    suggested_follow_up: SuggestedFollowUp = SuggestedFollowUp.NONE
    key_points_covered: list[str] = Field(default_factory=list)
    missed_opportunities: list[str] = Field(default_factory=list)

    @field_validator("suggested_follow_up", mode="before")
    @classmethod
    def _normalize_suggestion(cls, value):
        if value is None:
            return SuggestedFollowUp.NONE
        if isinstance(value, str):
            return value.strip().lower()
        return value


GenerationResult = GeneratedQuestion | GeneratedEvaluation

RESULT_MODELS: dict[GenerationKind, type[BaseModel]] = {
    GenerationKind.QUESTION: GeneratedQuestion,
    GenerationKind.FOLLOW_UP: GeneratedQuestion,
    GenerationKind.EVALUATION: GeneratedEvaluation,
}

CONTEXT_MODELS: dict[GenerationKind, type[BaseModel]] = {
    GenerationKind.QUESTION: QuestionContext,
    GenerationKind.FOLLOW_UP: FollowUpContext,
    GenerationKind.EVALUATION: EvaluationContext,
}
