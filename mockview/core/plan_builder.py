"""
Plan Builder for MockView

Turns a weighted competency list into a bounded question allocation and
the initial interview state.
"""

import logging
import math

from mockview.core.errors import ValidationError
from mockview.models.competency import CompetencyArea
from mockview.models.plan import (
    CompetencyState,
    CompetencyStatus,
    InterviewState,
    PlannedCompetency,
    QuestionPlan,
)

logger = logging.getLogger(__name__)

DEFAULT_MINUTES_PER_QUESTION = 4


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def normalize_weights(areas: list[CompetencyArea]) -> list[float]:
    """
    Normalize weights so they sum to 1.

    Each weight is divided by the observed sum; a zero sum gives a
    uniform split.
    """
    total = sum(area.weight for area in areas)
    if total <= 0:
        return [1 / len(areas)] * len(areas)
    return [area.weight / total for area in areas]


def build_question_plan(
    areas: list[CompetencyArea],
    target_total: int,
    minutes_per_question: int = DEFAULT_MINUTES_PER_QUESTION,
) -> QuestionPlan:
    """
    Allocate questions to competencies proportionally to their weight.

    Every competency gets at least one question. Rounding may make the
    allocation drift from ``target_total``; the recorded total is the
    actual sum.

    Args:
        areas: Competency areas in the order they should be covered
        target_total: Desired number of root questions
        minutes_per_question: Used for the duration estimate

    Returns:
        Frozen QuestionPlan

    Raises:
        ValidationError: If ``areas`` is empty, names repeat, or the target is not positive
    """
    if not areas:
        raise ValidationError("Cannot build a question plan from an empty competency list")
    if target_total < 1:
        raise ValidationError(f"Target question count must be positive, got {target_total}")

    names = [area.name for area in areas]
    if len(set(names)) != len(names):
        raise ValidationError(f"Competency names must be unique: {names}")

    weights = normalize_weights(areas)

    planned = [
        PlannedCompetency(
            name=area.name,
            weight=area.weight,
            planned_questions=max(1, _round_half_up(weight * target_total)),
            skills_to_cover=tuple(area.skills),
        )
        for area, weight in zip(areas, weights)
    ]

    actual_total = sum(p.planned_questions for p in planned)
    if actual_total != target_total:
        logger.info(f"Plan allocation drifted from target: {actual_total} vs {target_total}")

    return QuestionPlan(
        competencies=tuple(planned),
        total_planned_questions=actual_total,
        estimated_duration_minutes=actual_total * minutes_per_question,
    )


def initialize_interview_state(plan: QuestionPlan) -> InterviewState:
    """Create the starting state: first competency in progress, rest pending."""
    competencies = {comp.name: CompetencyState() for comp in plan.competencies}

    first = plan.competencies[0].name
    competencies[first].status = CompetencyStatus.IN_PROGRESS

    return InterviewState(
        competencies=competencies,
        total_questions=0,
        current_competency=first,
        estimated_remaining=plan.total_planned_questions,
    )
