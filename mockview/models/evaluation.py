"""
Evaluation models for MockView

Defines the five-dimension rubric attached to every answer.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SuggestedFollowUp(str, Enum):
    """Evaluator's hint about what to do next."""

    CLARIFY = "clarify"
    PROBE = "probe"
    NONE = "none"


class FollowUpType(str, Enum):
    """Kinds of follow-up question the interviewer can ask."""

    CLARIFY = "clarify"  # Answer was vague, ask for specifics
    PROBE = "probe"      # Answer was adequate, dig deeper


SCORE_DIMENSIONS = ("relevance", "depth", "accuracy", "examples", "communication")


class Evaluation(BaseModel):
    """Normalized evaluation of a single answer. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    # Dimensions (each 1-5)
    relevance: int = Field(..., ge=1, le=5)
    depth: int = Field(..., ge=1, le=5)
    accuracy: int = Field(..., ge=1, le=5)
    examples: int = Field(..., ge=1, le=5)
    communication: int = Field(..., ge=1, le=5)

    overall_score: float = Field(..., ge=1, le=5)
    reasoning: str = ""
    suggested_follow_up: SuggestedFollowUp = SuggestedFollowUp.NONE

    key_points_covered: tuple[str, ...] = ()
    missed_opportunities: tuple[str, ...] = ()

    def dimension_scores(self) -> dict[str, int]:
        """Get the five dimension scores keyed by name."""
        return {name: getattr(self, name) for name in SCORE_DIMENSIONS}
