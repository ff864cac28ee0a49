"""
Interview Orchestrator - State machine for managing interview lifecycle.

This is the central coordinator for the interview process. It sequences
Plan Builder -> Generation Gateway -> Evaluator -> Decision Engine across
turns and owns the Interview/Question/Answer records.
"""

import asyncio
import logging
import weakref
from datetime import datetime
from typing import Callable

from mockview.config.settings import Settings
from mockview.core.decision_engine import ActionType, AdvanceOutcome, decide, resolve_advance
from mockview.core.errors import (
    InterviewNotFound,
    InvariantViolation,
    StateInconsistency,
)
from mockview.core.plan_builder import build_question_plan, initialize_interview_state
from mockview.models.competency import CompetencyArea, PlanInput
from mockview.models.evaluation import FollowUpType
from mockview.models.generation import FollowUpContext, GenerationKind, QuestionContext
from mockview.models.interview import (
    Answer,
    CompletionReason,
    Interview,
    InterviewStatus,
    Question,
    QuestionForest,
    QuestionForestError,
)
from mockview.models.plan import InterviewState
from mockview.models.results import (
    FinishResult,
    OpenState,
    Progress,
    QuestionView,
    StartResult,
    TranscriptEntry,
    TurnResult,
)

logger = logging.getLogger(__name__)


class InterviewOrchestrator:
    """
    Manages the interview lifecycle using a state machine pattern.

    States:
        PENDING -> IN_PROGRESS -> COMPLETED
              \\-> CANCELLED

    COMPLETED and CANCELLED are absorbing. Each turn loads the aggregate,
    mutates a private copy and persists it in one repository call, so a
    failed generation call never leaves partial records behind.
    """

    VALID_TRANSITIONS: dict[InterviewStatus, list[InterviewStatus]] = {
        InterviewStatus.PENDING: [InterviewStatus.IN_PROGRESS, InterviewStatus.CANCELLED],
        InterviewStatus.IN_PROGRESS: [InterviewStatus.COMPLETED, InterviewStatus.CANCELLED],
        InterviewStatus.COMPLETED: [],  # Terminal state
        InterviewStatus.CANCELLED: [],  # Terminal state
    }

    def __init__(
        self,
        settings: Settings,
        gateway,
        evaluator,
        repository,
        clock: Callable[[], datetime] = datetime.utcnow,
    ):
        """
        Initialize the orchestrator with component dependencies.

        Args:
            settings: Interview limits (max questions, depth, duration cap)
            gateway: GenerationGateway for question generation
            evaluator: Evaluator for scoring answers
            repository: InterviewRepository for persistence
            clock: Source of "now" (tests inject a fixed clock)
        """
        self.settings = settings
        self.gateway = gateway
        self.evaluator = evaluator
        self.repository = repository
        self._clock = clock

        # Serializes requests per interview; an entry lives only while a
        # request holds or waits on its lock
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = weakref.WeakValueDictionary()

    # =========================================================================
    # STATE MACHINE
    # =========================================================================

    def _transition(self, interview: Interview, new_status: InterviewStatus) -> None:
        """
        Move an interview to a new status.

        Raises:
            InvariantViolation: If the transition is not allowed
        """
        old_status = interview.status
        if new_status not in self.VALID_TRANSITIONS.get(old_status, []):
            raise InvariantViolation(
                f"Invalid transition from {old_status.value} to {new_status.value}"
            )

        interview.status = new_status
        if new_status == InterviewStatus.IN_PROGRESS:
            interview.started_at = self._clock()
        elif new_status in (InterviewStatus.COMPLETED, InterviewStatus.CANCELLED):
            interview.completed_at = self._clock()

        logger.info(f"Interview {interview.id}: {old_status.value} → {new_status.value}")

    def _complete(self, interview: Interview, reason: CompletionReason) -> None:
        self._transition(interview, InterviewStatus.COMPLETED)
        interview.completion_reason = reason
        logger.info(f"Interview {interview.id} completed: {reason.value}")

    def _lock_for(self, interview_id: str) -> asyncio.Lock:
        """
        Get the lock for an existing interview.

        Raises:
            InterviewNotFound: Unknown interview (no lock is created)
        """
        lock = self._locks.get(interview_id)
        if lock is None:
            self._load(interview_id)
            lock = asyncio.Lock()
            self._locks[interview_id] = lock
        return lock

    # =========================================================================
    # LOADING
    # =========================================================================

    def _load(self, interview_id: str) -> Interview:
        interview = self.repository.get_interview(interview_id)
        if interview is None:
            raise InterviewNotFound(f"Interview not found: {interview_id}")
        return interview

    def _load_forest(self, interview: Interview) -> QuestionForest:
        try:
            return QuestionForest.from_questions(interview.id, self.repository.list_questions(interview.id))
        except QuestionForestError as e:
            raise StateInconsistency(f"Stored questions for {interview.id} are corrupt: {e}")

    def _find_open_question(self, interview: Interview, forest: QuestionForest) -> Question | None:
        """
        Most recent question lacking an answer.

        Raises:
            StateInconsistency: If an in-progress interview has no open question
        """
        latest = forest.latest()
        if latest is not None and self.repository.get_answer(latest.id) is None:
            return latest

        if interview.status == InterviewStatus.IN_PROGRESS:
            raise StateInconsistency(
                f"Interview {interview.id} is in progress but has no open question"
            )
        return None

    def _competency_area(self, interview: Interview, name: str) -> CompetencyArea:
        """Resolve the competency area for question generation."""
        area = interview.plan_input.role.find_competency(name)
        if area is not None:
            return area

        planned = interview.plan.get(name) if interview.plan else None
        if planned is None:
            raise StateInconsistency(f"Competency '{name}' is not part of the plan")
        return CompetencyArea(name=planned.name, weight=planned.weight, skills=list(planned.skills_to_cover))

    # =========================================================================
    # INTERVIEW FLOW
    # =========================================================================

    async def start(self, plan_input: PlanInput) -> StartResult:
        """
        Start a new interview: build the plan and ask the first question.

        Nothing is persisted unless the first question was generated.

        Raises:
            ValidationError: Empty or invalid competency list
            GenerationUnavailable, MalformedGenerationOutput: First question failed
        """
        plan = build_question_plan(
            plan_input.role.competency_areas,
            target_total=self.settings.max_questions,
            minutes_per_question=self.settings.minutes_per_question,
        )
        state = initialize_interview_state(plan)

        interview = Interview(plan_input=plan_input, plan=plan, state=state)
        self._transition(interview, InterviewStatus.IN_PROGRESS)

        first_area = self._competency_area(interview, state.current_competency)
        first_question = await self._generate_root_question(interview, first_area, sequence_num=1)

        self.repository.create_interview(interview, first_question)

        logger.info(
            f"Started interview {interview.id}: {len(plan.competencies)} competencies, "
            f"{plan.total_planned_questions} planned questions"
        )

        return StartResult(
            interview_id=interview.id,
            first_question=QuestionView.from_question(first_question),
            progress=Progress(
                current=1,
                estimated_total=plan.total_planned_questions,
                competency=first_question.competency,
            ),
        )

    async def submit_answer(
        self,
        interview_id: str,
        question_id: str,
        answer_text: str,
        response_time_ms: int | None = None,
    ) -> TurnResult:
        """
        Process an answer and produce the next question or completion.

        Args:
            interview_id: Interview ID
            question_id: Must be the interview's current open question
            answer_text: Candidate's answer (already transcribed)
            response_time_ms: Optional time the candidate took

        Returns:
            TurnResult with the evaluation and next question (or completion)

        Raises:
            InterviewNotFound: Unknown interview
            InvariantViolation: Interview not in progress, or question not open
            StateInconsistency: In-progress interview without an open question
            GenerationUnavailable, MalformedGenerationOutput: Nothing persisted
        """
        async with self._lock_for(interview_id):
            interview = self._load(interview_id)

            if interview.status != InterviewStatus.IN_PROGRESS:
                raise InvariantViolation(
                    f"Cannot submit an answer to interview in status {interview.status.value}"
                )

            forest = self._load_forest(interview)
            question = self._find_open_question(interview, forest)
            if question.id != question_id:
                raise InvariantViolation(
                    f"Question {question_id} is not the open question of interview {interview_id}"
                )

            return await self._process_turn(interview, forest, question, answer_text, response_time_ms)

    async def _process_turn(
        self,
        interview: Interview,
        forest: QuestionForest,
        question: Question,
        answer_text: str,
        response_time_ms: int | None,
    ) -> TurnResult:
        """Evaluate, decide, generate, then persist as a single unit."""
        evaluation = await self.evaluator.evaluate(
            question_text=question.text,
            answer_text=answer_text,
            competency=question.competency,
            expected_topics=list(question.expected_topics),
        )

        answer = Answer(
            question_id=question.id,
            text=answer_text,
            response_time_ms=response_time_ms,
            evaluation=evaluation,
        )

        state: InterviewState = interview.state.model_copy(deep=True)
        state.total_questions += 1
        comp_state = state.competencies.get(question.competency)
        if comp_state is None:
            raise StateInconsistency(f"No state for competency '{question.competency}'")
        comp_state.record_score(evaluation.overall_score)

        max_depth = self.settings.max_follow_up_depth
        action = decide(evaluation.overall_score, question.depth_level, max_depth, evaluation.suggested_follow_up)
        logger.info(
            f"Interview {interview.id}: score={evaluation.overall_score:.2f} "
            f"depth={question.depth_level}/{max_depth} → {action.type.value}"
            + (f"({action.follow_up_type.value})" if action.follow_up_type else "")
        )

        reason = self._terminal_reason(interview, forest)
        next_question = None

        if reason is None and action.type == ActionType.FOLLOW_UP:
            next_question = await self._generate_follow_up(
                interview, question, answer_text, evaluation.reasoning,
                action.follow_up_type, sequence_num=len(forest) + 1,
            )
            comp_state.current_depth = next_question.depth_level

        elif reason is None:
            resolution = resolve_advance(
                interview.plan, state, question.competency, forest.root_count(question.competency)
            )
            state = resolution.state

            if resolution.outcome == AdvanceOutcome.END_INTERVIEW:
                reason = CompletionReason.ALL_COMPETENCIES_COMPLETED
            else:
                area = self._competency_area(interview, resolution.competency)
                next_question = await self._generate_root_question(
                    interview, area, sequence_num=len(forest) + 1
                )

        # Everything the backend could fail on has succeeded; apply and persist
        interview.state = state
        if reason is not None:
            self._complete(interview, reason)
        else:
            state.estimated_remaining = max(0, state.estimated_remaining - 1)

        self.repository.commit_turn(interview, answer, next_question)

        if next_question is None:
            asked = len(forest)
            return TurnResult(
                evaluation=evaluation,
                progress=Progress(current=asked, estimated_total=asked, competency=question.competency),
                is_complete=True,
                completion_reason=reason,
            )

        return TurnResult(
            evaluation=evaluation,
            next_question=QuestionView.from_question(next_question),
            progress=Progress(
                current=len(forest) + 1,
                estimated_total=interview.plan.total_planned_questions,
                competency=next_question.competency,
            ),
            is_complete=False,
        )

    def _terminal_reason(self, interview: Interview, forest: QuestionForest) -> CompletionReason | None:
        """Check the end triggers that do not depend on the decision."""
        if len(forest) >= self.settings.max_questions:
            return CompletionReason.MAX_QUESTIONS_REACHED

        if self.settings.enforce_duration_cap:
            limit = self.settings.max_duration_minutes * 60
            if interview.get_duration_seconds(now=self._clock()) >= limit:
                return CompletionReason.DURATION_CAP_REACHED

        return None

    async def finish_early(self, interview_id: str) -> FinishResult:
        """
        End the interview now. Idempotent.

        A completed (or cancelled) interview is returned as stored, without
        any mutation. An in-flight turn for the same interview is allowed to
        settle first.
        """
        async with self._lock_for(interview_id):
            interview = self._load(interview_id)

            if interview.status in (InterviewStatus.PENDING, InterviewStatus.IN_PROGRESS):
                if interview.status == InterviewStatus.PENDING:
                    self._transition(interview, InterviewStatus.IN_PROGRESS)
                self._complete(interview, CompletionReason.FINISHED_EARLY)
                self.repository.save_interview(interview)
            else:
                logger.info(f"Interview {interview_id} already {interview.status.value}, finish is a no-op")

            return self._finish_result(interview)

    def _finish_result(self, interview: Interview) -> FinishResult:
        duration = interview.get_duration_seconds()
        total = interview.state.total_questions
        if not total and interview.plan:
            total = interview.plan.total_planned_questions

        return FinishResult(
            interview_id=interview.id,
            status=interview.status,
            completion_reason=interview.completion_reason,
            total_questions=total,
            duration_minutes=round(duration / 60),
            completed_at=interview.completed_at,
        )

    def get_open_state(self, interview_id: str) -> OpenState:
        """
        Recover the current open question after a reconnect.

        Raises:
            InterviewNotFound: Unknown interview
            StateInconsistency: In-progress interview without an open question
        """
        interview = self._load(interview_id)
        forest = self._load_forest(interview)

        current = None
        if interview.status == InterviewStatus.IN_PROGRESS:
            current = self._find_open_question(interview, forest)

        state = interview.state
        return OpenState(
            interview_id=interview.id,
            status=interview.status,
            current_question=QuestionView.from_question(current) if current else None,
            progress=Progress(
                current=state.total_questions + (1 if current else 0),
                estimated_total=interview.plan.total_planned_questions if interview.plan else 0,
                competency=state.current_competency,
            ),
        )

    # =========================================================================
    # READ-ONLY ACCESS (summary collaborators)
    # =========================================================================

    def get_interview(self, interview_id: str) -> Interview:
        """Get an interview record by ID."""
        return self._load(interview_id)

    def get_transcript(self, interview_id: str) -> list[TranscriptEntry]:
        """All questions in order, each with its answer if given."""
        interview = self._load(interview_id)
        return [
            TranscriptEntry(question=q, answer=self.repository.get_answer(q.id))
            for q in self._load_forest(interview)
        ]

    # =========================================================================
    # QUESTION GENERATION
    # =========================================================================

    async def _generate_root_question(
        self,
        interview: Interview,
        area: CompetencyArea,
        sequence_num: int,
    ) -> Question:
        context = QuestionContext(
            profile=interview.plan_input.profile,
            role=interview.plan_input.role,
            competency=area,
            question_number=sequence_num,
        )
        generated = await self.gateway.generate(GenerationKind.QUESTION, context)

        return Question(
            interview_id=interview.id,
            sequence_num=sequence_num,
            competency=area.name,  # The plan decides the competency, not the backend
            text=generated.question_text,
            depth_level=0,
            expected_topics=tuple(generated.expected_topics),
        )

    async def _generate_follow_up(
        self,
        interview: Interview,
        parent: Question,
        answer_text: str,
        reasoning: str,
        follow_up_type: FollowUpType,
        sequence_num: int,
    ) -> Question:
        depth = parent.depth_level + 1
        context = FollowUpContext(
            previous_question=parent.text,
            previous_answer=answer_text,
            evaluation_reasoning=reasoning,
            competency=parent.competency,
            follow_up_type=follow_up_type,
            depth=depth,
        )
        generated = await self.gateway.generate(GenerationKind.FOLLOW_UP, context)

        return Question(
            interview_id=interview.id,
            parent_id=parent.id,
            sequence_num=sequence_num,
            competency=parent.competency,
            text=generated.question_text,
            depth_level=depth,
            follow_up_type=follow_up_type,
            expected_topics=tuple(generated.expected_topics),
        )
