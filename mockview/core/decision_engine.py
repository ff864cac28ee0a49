"""
Decision Engine for MockView

Pure functions that map an evaluation and depth state to the next action.
No I/O and no mutation of inputs: the same arguments always give the same
result.

Thresholds (score on the 1-5 scale):
- >= 4, or depth at the limit: advance
- <= 2 with room to go deeper: clarify
- exactly 3 with a probe suggestion and room to go deeper: probe
- anything else: advance
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict

from mockview.models.evaluation import FollowUpType, SuggestedFollowUp
from mockview.models.plan import CompetencyStatus, InterviewState, QuestionPlan

STRONG_SCORE = 4
WEAK_SCORE = 2
ADEQUATE_SCORE = 3


class ActionType(str, Enum):
    ADVANCE = "advance"
    FOLLOW_UP = "follow_up"


class Action(BaseModel):
    """Outcome of one decision."""

    model_config = ConfigDict(frozen=True)

    type: ActionType
    follow_up_type: FollowUpType | None = None

    @classmethod
    def advance(cls) -> "Action":
        return cls(type=ActionType.ADVANCE)

    @classmethod
    def follow_up(cls, follow_up_type: FollowUpType) -> "Action":
        return cls(type=ActionType.FOLLOW_UP, follow_up_type=follow_up_type)


def _coerce_suggestion(value: SuggestedFollowUp | str | None) -> SuggestedFollowUp:
    if not value:
        return SuggestedFollowUp.NONE
    try:
        return SuggestedFollowUp(value)
    except ValueError:
        return SuggestedFollowUp.NONE


def decide(
    overall_score: float,
    depth: int,
    max_depth: int,
    suggested_follow_up: SuggestedFollowUp | str | None = None,
) -> Action:
    """
    Choose between a follow-up and advancing, in strict priority order.

    Args:
        overall_score: Normalized overall score (1-5)
        depth: Depth of the question just answered (0 = root)
        max_depth: Configured maximum follow-up depth
        suggested_follow_up: Evaluator's suggestion; missing or unrecognized
            values are treated as NONE

    Returns:
        Action to take
    """
    suggestion = _coerce_suggestion(suggested_follow_up)

    if overall_score >= STRONG_SCORE or depth >= max_depth:
        return Action.advance()

    if overall_score <= WEAK_SCORE and depth < max_depth:
        return Action.follow_up(FollowUpType.CLARIFY)

    if overall_score == ADEQUATE_SCORE and depth < max_depth and suggestion == SuggestedFollowUp.PROBE:
        return Action.follow_up(FollowUpType.PROBE)

    # Covers scores strictly between 2 and 4 that are not an exact 3 with a probe hint
    return Action.advance()


# ============================================================================
# ADVANCE RESOLUTION
# ============================================================================

class AdvanceOutcome(str, Enum):
    SAME_COMPETENCY = "same_competency"
    NEXT_COMPETENCY = "next_competency"
    END_INTERVIEW = "end_interview"


class AdvanceResolution(BaseModel):
    """Where an advance lands, and the state after applying it."""

    outcome: AdvanceOutcome
    competency: str | None = None
    state: InterviewState


def resolve_advance(
    plan: QuestionPlan,
    state: InterviewState,
    competency: str,
    root_questions_asked: int,
) -> AdvanceResolution:
    """
    Resolve an advance from ``competency``.

    Stays in the competency while its root-question count is below the plan.
    Otherwise marks it completed and moves to the next pending competency in
    plan order. With none left the interview ends.

    Args:
        plan: Frozen question plan
        state: Current interview state (not mutated)
        competency: Competency of the question just answered
        root_questions_asked: Depth-0 questions asked so far in that competency

    Returns:
        AdvanceResolution with an updated copy of the state
    """
    new_state = state.model_copy(deep=True)
    planned = plan.get(competency)
    comp_state = new_state.competencies.get(competency)

    if planned is not None and root_questions_asked < planned.planned_questions:
        if comp_state is not None:
            comp_state.current_depth = 0
        return AdvanceResolution(
            outcome=AdvanceOutcome.SAME_COMPETENCY,
            competency=competency,
            state=new_state,
        )

    if comp_state is not None:
        comp_state.status = CompetencyStatus.COMPLETED
        comp_state.current_depth = 0

    start = plan.index_of(competency) + 1
    for comp in plan.competencies[start:]:
        next_state = new_state.competencies.get(comp.name)
        if next_state is not None and next_state.status == CompetencyStatus.PENDING:
            next_state.status = CompetencyStatus.IN_PROGRESS
            new_state.current_competency = comp.name
            return AdvanceResolution(
                outcome=AdvanceOutcome.NEXT_COMPETENCY,
                competency=comp.name,
                state=new_state,
            )

    return AdvanceResolution(outcome=AdvanceOutcome.END_INTERVIEW, state=new_state)
