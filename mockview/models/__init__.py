"""
Data models and schemas for MockView

Contains Pydantic models for:
- Competency areas and plan input
- Question plan and interview state
- Interview, question and answer records
- Evaluations
- Generation requests and results
"""

from mockview.models.competency import (
    CompetencyArea,
    CandidateProfile,
    ExperienceEntry,
    RoleRequirements,
    PlanInput,
)
from mockview.models.plan import (
    CompetencyStatus,
    PlannedCompetency,
    QuestionPlan,
    CompetencyState,
    InterviewState,
)
from mockview.models.interview import (
    Interview,
    InterviewStatus,
    CompletionReason,
    Question,
    Answer,
    QuestionForest,
    QuestionForestError,
)
from mockview.models.evaluation import Evaluation, FollowUpType, SuggestedFollowUp
from mockview.models.generation import (
    GenerationKind,
    QuestionContext,
    FollowUpContext,
    EvaluationContext,
    GeneratedQuestion,
    GeneratedEvaluation,
)
from mockview.models.results import (
    Progress,
    QuestionView,
    StartResult,
    TurnResult,
    FinishResult,
    OpenState,
    TranscriptEntry,
)

__all__ = [
    # Competency
    "CompetencyArea",
    "CandidateProfile",
    "ExperienceEntry",
    "RoleRequirements",
    "PlanInput",
    # Plan / state
    "CompetencyStatus",
    "PlannedCompetency",
    "QuestionPlan",
    "CompetencyState",
    "InterviewState",
    # Interview
    "Interview",
    "InterviewStatus",
    "CompletionReason",
    "Question",
    "Answer",
    "QuestionForest",
    "QuestionForestError",
    # Evaluation
    "Evaluation",
    "FollowUpType",
    "SuggestedFollowUp",
    # Generation
    "GenerationKind",
    "QuestionContext",
    "FollowUpContext",
    "EvaluationContext",
    "GeneratedQuestion",
    "GeneratedEvaluation",
    # Results
    "Progress",
    "QuestionView",
    "StartResult",
    "TurnResult",
    "FinishResult",
    "OpenState",
    "TranscriptEntry",
]
