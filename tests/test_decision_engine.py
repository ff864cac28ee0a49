import pytest

from mockview.core.decision_engine import (
    Action,
    ActionType,
    AdvanceOutcome,
    decide,
    resolve_advance,
)
from mockview.core.plan_builder import build_question_plan, initialize_interview_state
from mockview.models.competency import CompetencyArea
from mockview.models.evaluation import FollowUpType, SuggestedFollowUp

MAX_DEPTH = 3

ADVANCE = Action.advance()
CLARIFY = Action.follow_up(FollowUpType.CLARIFY)
PROBE = Action.follow_up(FollowUpType.PROBE)


def _expected(score, depth, suggestion):
    if depth >= MAX_DEPTH or score >= 4:
        return ADVANCE
    if score <= 2:
        return CLARIFY
    if score == 3 and suggestion == SuggestedFollowUp.PROBE:
        return PROBE
    return ADVANCE


@pytest.mark.parametrize("suggestion", [SuggestedFollowUp.PROBE, SuggestedFollowUp.NONE, SuggestedFollowUp.CLARIFY])
@pytest.mark.parametrize("depth", [0, MAX_DEPTH - 1, MAX_DEPTH])
@pytest.mark.parametrize("score", [1, 1.9, 2, 2.1, 3, 3.9, 4, 5])
def test_boundary_table(score, depth, suggestion):
    assert decide(score, depth, MAX_DEPTH, suggestion) == _expected(score, depth, suggestion)


@pytest.mark.parametrize(
    "score,depth,suggestion,expected",
    [
        (1, 0, "none", CLARIFY),
        (2, 2, "probe", CLARIFY),
        (2.1, 0, "probe", ADVANCE),
        (3, 0, "probe", PROBE),
        (3, 0, "none", ADVANCE),
        (3, 3, "probe", ADVANCE),
        (3.9, 1, "probe", ADVANCE),
        (1, 3, "clarify", ADVANCE),
        (4, 0, "probe", ADVANCE),
    ],
)
def test_priority_order(score, depth, suggestion, expected):
    assert decide(score, depth, MAX_DEPTH, suggestion) == expected


def test_weak_answer_at_root_asks_for_clarification():
    action = decide(1.5, 0, 3, SuggestedFollowUp.NONE)
    assert action.type == ActionType.FOLLOW_UP
    assert action.follow_up_type == FollowUpType.CLARIFY


def test_strong_answer_advances():
    assert decide(4.2, 1, 3, SuggestedFollowUp.PROBE) == ADVANCE


def test_missing_suggestion_defaults_to_advance():
    assert decide(3, 0, 3, None) == ADVANCE


@pytest.mark.parametrize("suggestion", ["dig_deeper", "unknown", 42])
def test_unrecognized_suggestion_is_treated_as_none(suggestion):
    assert decide(3, 0, 3, suggestion) == ADVANCE


def test_decide_is_referentially_pure():
    results = {decide(3, 1, 3, "probe") for _ in range(50)}
    assert results == {PROBE}


def test_zero_max_depth_never_follows_up():
    for score in (1, 2, 3):
        assert decide(score, 0, 0, "probe") == ADVANCE


# ============================================================================
# ADVANCE RESOLUTION
# ============================================================================

def _plan():
    areas = [
        CompetencyArea(name="A", weight=0.5),
        CompetencyArea(name="B", weight=0.25),
        CompetencyArea(name="C", weight=0.25),
    ]
    return build_question_plan(areas, target_total=4)  # A=2, B=1, C=1


def test_stays_in_competency_until_planned_roots_asked():
    plan = _plan()
    state = initialize_interview_state(plan)
    state.competencies["A"].current_depth = 2

    resolution = resolve_advance(plan, state, "A", root_questions_asked=1)

    assert resolution.outcome == AdvanceOutcome.SAME_COMPETENCY
    assert resolution.competency == "A"
    assert resolution.state.competencies["A"].current_depth == 0
    # Input untouched
    assert state.competencies["A"].current_depth == 2


def test_moves_to_next_pending_competency():
    plan = _plan()
    state = initialize_interview_state(plan)

    resolution = resolve_advance(plan, state, "A", root_questions_asked=2)

    assert resolution.outcome == AdvanceOutcome.NEXT_COMPETENCY
    assert resolution.competency == "B"
    assert resolution.state.current_competency == "B"
    assert resolution.state.competencies["A"].status == "completed"
    assert resolution.state.competencies["B"].status == "in_progress"
    assert resolution.state.competencies["C"].status == "pending"


def test_ends_after_last_competency():
    plan = _plan()
    state = initialize_interview_state(plan)
    state = resolve_advance(plan, state, "A", 2).state
    state = resolve_advance(plan, state, "B", 1).state

    resolution = resolve_advance(plan, state, "C", 1)

    assert resolution.outcome == AdvanceOutcome.END_INTERVIEW
    assert resolution.competency is None
    assert resolution.state.all_completed()
