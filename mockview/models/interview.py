"""
Interview, question and answer records for MockView
"""

from datetime import datetime
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from mockview.models.competency import PlanInput
from mockview.models.evaluation import Evaluation, FollowUpType
from mockview.models.plan import InterviewState, QuestionPlan


class InterviewStatus(str, Enum):
    """Interview lifecycle states."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class CompletionReason(str, Enum):
    """Which terminal trigger ended the interview."""

    ALL_COMPETENCIES_COMPLETED = "all_competencies_completed"
    MAX_QUESTIONS_REACHED = "max_questions_reached"
    FINISHED_EARLY = "finished_early"
    DURATION_CAP_REACHED = "duration_cap_reached"


class Question(BaseModel):
    """A single question asked during the interview. Never mutated."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: f"q_{uuid4().hex[:12]}")
    interview_id: str
    parent_id: str | None = None
    sequence_num: int = Field(..., ge=1)
    competency: str
    text: str
    depth_level: int = Field(default=0, ge=0)
    follow_up_type: FollowUpType | None = None
    expected_topics: tuple[str, ...] = ()
    asked_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def is_follow_up(self) -> bool:
        return self.parent_id is not None


class Answer(BaseModel):
    """The candidate's answer to one question. Never mutated."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: f"a_{uuid4().hex[:12]}")
    question_id: str
    text: str
    response_time_ms: int | None = Field(default=None, ge=0)
    evaluation: Evaluation
    created_at: datetime = Field(default_factory=datetime.utcnow)


class Interview(BaseModel):
    """Interview record: lifecycle, frozen plan and running state."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    status: InterviewStatus = InterviewStatus.PENDING
    plan_input: PlanInput
    plan: QuestionPlan | None = None
    state: InterviewState = Field(default_factory=InterviewState)

    created_at: datetime = Field(default_factory=datetime.utcnow)
    started_at: datetime | None = None
    completed_at: datetime | None = None
    completion_reason: CompletionReason | None = None

    def get_duration_seconds(self, now: datetime | None = None) -> float:
        """Get interview duration in seconds."""
        if not self.started_at:
            return 0.0
        end = self.completed_at or now or datetime.utcnow()
        return (end - self.started_at).total_seconds()


class QuestionForestError(ValueError):
    """Raised when a question would break the forest structure."""


class QuestionForest:
    """
    Arena of questions indexed by id, with an explicit parent index.

    Roots have depth 0. A child must reference an existing parent from the
    same interview and competency and sit exactly one level below it, so
    cycles and cross-competency chains cannot be represented.
    """

    def __init__(self, interview_id: str):
        self.interview_id = interview_id
        self._nodes: dict[str, Question] = {}
        self._parent: dict[str, str | None] = {}
        self._children: dict[str, list[str]] = {}
        self._order: list[str] = []

    @classmethod
    def from_questions(cls, interview_id: str, questions: list[Question]) -> "QuestionForest":
        forest = cls(interview_id)
        for question in sorted(questions, key=lambda q: q.sequence_num):
            forest.add(question)
        return forest

    def __len__(self) -> int:
        return len(self._order)

    def __contains__(self, question_id: str) -> bool:
        return question_id in self._nodes

    def __iter__(self):
        return (self._nodes[qid] for qid in self._order)

    def add(self, question: Question) -> None:
        """Insert a question, validating the forest invariants."""
        if question.interview_id != self.interview_id:
            raise QuestionForestError(
                f"Question {question.id} belongs to interview {question.interview_id}, "
                f"not {self.interview_id}"
            )
        if question.id in self._nodes:
            raise QuestionForestError(f"Duplicate question id: {question.id}")

        if question.parent_id is None:
            if question.depth_level != 0:
                raise QuestionForestError(f"Root question {question.id} must have depth 0")
        else:
            parent = self._nodes.get(question.parent_id)
            if parent is None:
                raise QuestionForestError(f"Unknown parent {question.parent_id} for {question.id}")
            if parent.competency != question.competency:
                raise QuestionForestError(
                    f"Follow-up {question.id} ({question.competency}) cannot chain to "
                    f"{parent.id} ({parent.competency})"
                )
            if question.depth_level != parent.depth_level + 1:
                raise QuestionForestError(
                    f"Follow-up {question.id} depth {question.depth_level} must be "
                    f"{parent.depth_level + 1}"
                )

        self._nodes[question.id] = question
        self._parent[question.id] = question.parent_id
        self._children.setdefault(question.id, [])
        if question.parent_id is not None:
            self._children[question.parent_id].append(question.id)
        self._order.append(question.id)

    def get(self, question_id: str) -> Question | None:
        return self._nodes.get(question_id)

    def parent_of(self, question_id: str) -> Question | None:
        parent_id = self._parent.get(question_id)
        return self._nodes.get(parent_id) if parent_id else None

    def children_of(self, question_id: str) -> list[Question]:
        return [self._nodes[cid] for cid in self._children.get(question_id, [])]

    def root_of(self, question_id: str) -> Question | None:
        """Walk the parent index up to the root of a chain."""
        node = self._nodes.get(question_id)
        while node is not None and node.parent_id is not None:
            node = self._nodes[node.parent_id]
        return node

    def chain(self, question_id: str) -> list[Question]:
        """Questions from the root down to (and including) the given one."""
        chain = []
        node = self._nodes.get(question_id)
        while node is not None:
            chain.append(node)
            node = self._nodes.get(node.parent_id) if node.parent_id else None
        return list(reversed(chain))

    def latest(self) -> Question | None:
        """Most recently asked question."""
        return self._nodes[self._order[-1]] if self._order else None

    def root_count(self, competency: str) -> int:
        """Number of depth-0 questions asked in a competency."""
        return sum(
            1 for q in self._nodes.values()
            if q.competency == competency and q.parent_id is None
        )
