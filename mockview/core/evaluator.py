"""
Evaluator for MockView

Scores one answer via the generation gateway and normalizes the result.
The backend's own overall score is never trusted.
"""

import logging
import math

from mockview.models.evaluation import SCORE_DIMENSIONS, Evaluation
from mockview.models.generation import EvaluationContext, GeneratedEvaluation, GenerationKind

logger = logging.getLogger(__name__)

MIN_SCORE = 1
MAX_SCORE = 5


def clamp_dimension(value: float) -> int:
    """Round a raw dimension score half-up and clamp it to 1-5 (NaN scores 1)."""
    if math.isnan(value):
        return MIN_SCORE
    if math.isinf(value):
        return MAX_SCORE if value > 0 else MIN_SCORE
    return max(MIN_SCORE, min(MAX_SCORE, math.floor(value + 0.5)))


def normalize_evaluation(raw: GeneratedEvaluation) -> Evaluation:
    """
    Turn a raw backend evaluation into a normalized, immutable one.

    Each dimension is clamped to [1, 5] and ``overall_score`` is recomputed
    as the mean of the five dimensions.
    """
    dimensions = {name: clamp_dimension(getattr(raw, name)) for name in SCORE_DIMENSIONS}
    overall = sum(dimensions.values()) / len(dimensions)
    overall = max(float(MIN_SCORE), min(float(MAX_SCORE), overall))

    if raw.overall_score is not None and abs(raw.overall_score - overall) > 0.5:
        logger.debug(f"Backend overall_score {raw.overall_score} replaced by recomputed {overall:.2f}")

    return Evaluation(
        **dimensions,
        overall_score=overall,
        reasoning=raw.reasoning,
        suggested_follow_up=raw.suggested_follow_up,
        key_points_covered=tuple(raw.key_points_covered),
        missed_opportunities=tuple(raw.missed_opportunities),
    )


class Evaluator:
    """Scores candidate answers against a question."""

    def __init__(self, gateway):
        """
        Initialize evaluator.

        Args:
            gateway: GenerationGateway used for the ``evaluation`` call
        """
        self.gateway = gateway

    async def evaluate(
        self,
        question_text: str,
        answer_text: str,
        competency: str,
        expected_topics: list[str] | None = None,
    ) -> Evaluation:
        """
        Evaluate a single answer.

        Raises:
            GenerationUnavailable, MalformedGenerationOutput: From the gateway
        """
        context = EvaluationContext(
            question_text=question_text,
            answer_text=answer_text,
            competency=competency,
            expected_topics=list(expected_topics or []),
        )

        raw = await self.gateway.generate(GenerationKind.EVALUATION, context)
        evaluation = normalize_evaluation(raw)
        self.gateway.record_score("overall_score", evaluation.overall_score, comment=f"Competency: {competency}")

        logger.info(
            f"Evaluation complete: competency={competency}, "
            f"score={evaluation.overall_score:.2f}, suggestion={evaluation.suggested_follow_up.value}"
        )
        return evaluation
