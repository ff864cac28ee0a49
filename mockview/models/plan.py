"""
Question plan and interview state models for MockView

The plan is frozen at interview start. The state is the only aggregate
that changes turn by turn, and only the orchestrator mutates it.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

PLAN_SCHEMA_VERSION = 1
STATE_SCHEMA_VERSION = 1


class CompetencyStatus(str, Enum):
    """Coverage status of one competency."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class PlannedCompetency(BaseModel):
    """Allocation of questions to one competency."""

    model_config = ConfigDict(frozen=True)

    name: str
    weight: float
    planned_questions: int = Field(..., ge=1)
    skills_to_cover: tuple[str, ...] = ()


class QuestionPlan(BaseModel):
    """Ordered, immutable allocation of questions across competencies."""

    model_config = ConfigDict(frozen=True)

    schema_version: int = PLAN_SCHEMA_VERSION
    competencies: tuple[PlannedCompetency, ...] = Field(..., min_length=1)
    total_planned_questions: int = Field(..., ge=1)
    estimated_duration_minutes: int = Field(..., ge=0)

    @model_validator(mode="after")
    def _check_total(self) -> "QuestionPlan":
        actual = sum(c.planned_questions for c in self.competencies)
        if actual != self.total_planned_questions:
            raise ValueError(
                f"total_planned_questions={self.total_planned_questions} "
                f"does not match allocation sum {actual}"
            )
        names = [c.name for c in self.competencies]
        if len(set(names)) != len(names):
            raise ValueError("competency names must be unique within a plan")
        return self

    def get(self, name: str) -> PlannedCompetency | None:
        """Get the planned entry for a competency."""
        for comp in self.competencies:
            if comp.name == name:
                return comp
        return None

    def index_of(self, name: str) -> int:
        """Position of a competency in plan order (-1 if absent)."""
        for idx, comp in enumerate(self.competencies):
            if comp.name == name:
                return idx
        return -1


class CompetencyState(BaseModel):
    """Running coverage state for one competency."""

    status: CompetencyStatus = CompetencyStatus.PENDING
    questions_asked: int = Field(default=0, ge=0)
    current_depth: int = Field(default=0, ge=0)
    avg_score: float = 0.0

    def record_score(self, overall_score: float) -> None:
        """Fold one more answer score into the running mean."""
        self.questions_asked += 1
        self.avg_score += (overall_score - self.avg_score) / self.questions_asked


class InterviewState(BaseModel):
    """Per-interview progress aggregate."""

    schema_version: int = STATE_SCHEMA_VERSION
    competencies: dict[str, CompetencyState] = Field(default_factory=dict)
    total_questions: int = Field(default=0, ge=0)
    current_competency: str = ""
    estimated_remaining: int = Field(default=0, ge=0)

    def all_completed(self) -> bool:
        """Whether every competency has been covered."""
        return bool(self.competencies) and all(
            c.status == CompetencyStatus.COMPLETED for c in self.competencies.values()
        )

    def current(self) -> CompetencyState | None:
        """State of the current competency."""
        return self.competencies.get(self.current_competency)
