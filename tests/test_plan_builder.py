import pytest

from mockview.core.errors import ValidationError
from mockview.core.plan_builder import (
    build_question_plan,
    initialize_interview_state,
    normalize_weights,
)
from mockview.models.competency import CompetencyArea
from mockview.models.plan import CompetencyStatus


def _areas(*weights):
    return [CompetencyArea(name=f"C{i}", weight=w, skills=[f"s{i}"]) for i, w in enumerate(weights)]


def test_equal_split_matches_target():
    plan = build_question_plan(
        [CompetencyArea(name="A", weight=0.5), CompetencyArea(name="B", weight=0.5)],
        target_total=4,
    )
    assert [c.planned_questions for c in plan.competencies] == [2, 2]
    assert plan.total_planned_questions == 4
    assert plan.estimated_duration_minutes == 16


@pytest.mark.parametrize(
    "weights,target",
    [
        ((0.5, 0.5), 4),
        ((0.7, 0.2, 0.1), 15),
        ((0.05, 0.05, 0.9), 10),
        ((0.3, 0.3, 0.3), 7),
        ((1.0,), 1),
        ((0.1, 0.1, 0.1, 0.1, 0.1, 0.1, 0.1, 0.1, 0.1, 0.1), 3),
        ((0.2, 0.9), 15),
    ],
)
def test_total_is_sum_and_each_competency_gets_a_question(weights, target):
    plan = build_question_plan(_areas(*weights), target_total=target)
    assert plan.total_planned_questions == sum(c.planned_questions for c in plan.competencies)
    assert all(c.planned_questions >= 1 for c in plan.competencies)


def test_rounding_drift_is_recorded_not_corrected():
    # Ten equal competencies with target 3: each gets the minimum of one
    plan = build_question_plan(_areas(*([0.1] * 10)), target_total=3)
    assert plan.total_planned_questions == 10


def test_weights_are_normalized_by_observed_sum():
    plan = build_question_plan(_areas(0.2, 0.2), target_total=6)
    assert [c.planned_questions for c in plan.competencies] == [3, 3]


def test_zero_weights_split_uniformly():
    assert normalize_weights(_areas(0, 0, 0, 0)) == [0.25] * 4
    plan = build_question_plan(_areas(0, 0), target_total=4)
    assert [c.planned_questions for c in plan.competencies] == [2, 2]


def test_half_rounds_up():
    # 0.5 * 5 = 2.5 must become 3, not banker's-rounded to 2
    plan = build_question_plan(_areas(0.5, 0.5), target_total=5)
    assert [c.planned_questions for c in plan.competencies] == [3, 3]


def test_plan_keeps_input_order_and_skills():
    areas = [
        CompetencyArea(name="Soft Skills", weight=0.2, skills=["mentoring"]),
        CompetencyArea(name="Backend", weight=0.8, skills=["APIs", "SQL"]),
    ]
    plan = build_question_plan(areas, target_total=10)
    assert [c.name for c in plan.competencies] == ["Soft Skills", "Backend"]
    assert plan.competencies[1].skills_to_cover == ("APIs", "SQL")


def test_empty_competency_list_is_rejected():
    with pytest.raises(ValidationError):
        build_question_plan([], target_total=10)


def test_duplicate_names_are_rejected():
    areas = [CompetencyArea(name="A", weight=0.5), CompetencyArea(name="A", weight=0.5)]
    with pytest.raises(ValidationError):
        build_question_plan(areas, target_total=4)


def test_plan_is_immutable():
    plan = build_question_plan(_areas(0.5, 0.5), target_total=4)
    with pytest.raises(Exception):
        plan.total_planned_questions = 99


def test_initial_state_starts_first_competency():
    plan = build_question_plan(_areas(0.5, 0.3, 0.2), target_total=10)
    state = initialize_interview_state(plan)

    assert state.current_competency == "C0"
    assert state.competencies["C0"].status == CompetencyStatus.IN_PROGRESS
    assert state.competencies["C1"].status == CompetencyStatus.PENDING
    assert state.competencies["C2"].status == CompetencyStatus.PENDING
    assert state.total_questions == 0
    assert state.estimated_remaining == plan.total_planned_questions
    assert list(state.competencies) == ["C0", "C1", "C2"]
