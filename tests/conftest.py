import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from mockview.config.settings import Settings
from mockview.core.errors import GenerationUnavailable
from mockview.models.competency import (
    CandidateProfile,
    CompetencyArea,
    ExperienceEntry,
    PlanInput,
    RoleRequirements,
)
from mockview.models.evaluation import SuggestedFollowUp
from mockview.models.generation import GeneratedEvaluation, GeneratedQuestion, GenerationKind


def make_settings(**overrides) -> Settings:
    values = dict(
        mock_ai_services=True,
        max_questions=15,
        max_follow_up_depth=3,
        generation_max_retries=3,
        generation_backoff_base_seconds=0,
        malformed_output_retries=3,
        generation_timeout_seconds=5,
    )
    values.update(overrides)
    return Settings(**values)


def make_plan_input(*areas: tuple[str, float]) -> PlanInput:
    areas = areas or (("Backend", 0.5), ("Soft Skills", 0.5))
    return PlanInput(
        profile=CandidateProfile(
            skills=["Python", "PostgreSQL", "Kubernetes"],
            experience=[ExperienceEntry(company="Acme", role="Backend Engineer", duration_months=36)],
            total_years_experience=5,
            seniority="senior",
        ),
        role=RoleRequirements(
            title="Backend Engineer",
            seniority="senior",
            competency_areas=[
                CompetencyArea(name=name, weight=weight, skills=[f"{name.lower()}-skill"])
                for name, weight in areas
            ],
        ),
    )


def raw_evaluation(score: int, suggestion: str = "none", **overrides) -> GeneratedEvaluation:
    values = dict(
        relevance=score,
        depth=score,
        accuracy=score,
        examples=score,
        communication=score,
        overall_score=score,
        reasoning=f"scored {score}",
        suggested_follow_up=SuggestedFollowUp(suggestion),
    )
    values.update(overrides)
    return GeneratedEvaluation(**values)


class ScriptedGateway:
    """
    Gateway stand-in with scripted evaluations.

    Evaluations are popped from ``scores`` (default 5); questions are
    numbered. ``fail_on`` makes the given kinds raise GenerationUnavailable.
    """

    def __init__(self, scores=None, suggestions=None):
        self.scores = list(scores or [])
        self.suggestions = list(suggestions or [])
        self.fail_on: set[GenerationKind] = set()
        self.calls: list[GenerationKind] = []
        self.scores_recorded: list[float] = []
        self._counter = 0

    def record_score(self, name, value, comment=None):
        self.scores_recorded.append(value)

    async def generate(self, kind, context):
        kind = GenerationKind(kind)
        self.calls.append(kind)
        if kind in self.fail_on:
            raise GenerationUnavailable("backend down", attempts=3)

        if kind == GenerationKind.EVALUATION:
            score = self.scores.pop(0) if self.scores else 5
            suggestion = self.suggestions.pop(0) if self.suggestions else "none"
            return raw_evaluation(score, suggestion)

        self._counter += 1
        return GeneratedQuestion(
            question_text=f"{kind.value} question {self._counter}",
            competency="ignored",
            expected_topics=["topic"],
        )


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def plan_input() -> PlanInput:
    return make_plan_input()
