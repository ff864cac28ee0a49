"""
Local (offline) generation for MockView

Deterministic stand-in content used when ``mock_ai_services`` is enabled.
Produces the same result models as the backend so callers cannot tell
which mode is active. Same input always gives the same output.
"""

import logging
import re

from mockview.models.evaluation import FollowUpType, SuggestedFollowUp
from mockview.models.generation import (
    EvaluationContext,
    FollowUpContext,
    GeneratedEvaluation,
    GeneratedQuestion,
    GenerationContext,
    GenerationKind,
    GenerationResult,
    QuestionContext,
)

logger = logging.getLogger(__name__)


# Question bank keyed by lowercase competency name
QUESTION_BANK: dict[str, list[str]] = {
    "frontend": [
        "Tell me about a complex UI component you built. What were the main challenges?",
        "How do you approach state management in large front-end applications?",
        "Describe how you diagnosed and fixed a rendering performance problem.",
    ],
    "backend": [
        "Describe a time when you had to optimize a slow API endpoint.",
        "How do you design APIs for scalability?",
        "Walk me through how you handled a data consistency issue between services.",
    ],
    "devops": [
        "How have you used containers in your development workflow?",
        "Tell me about your experience with CI/CD pipelines.",
        "Describe an outage you helped resolve and what you changed afterwards.",
    ],
    "soft skills": [
        "Tell me about a time when you had to mentor a junior developer.",
        "How do you handle disagreements in code reviews?",
        "Describe a situation where you had to push back on a requirement.",
    ],
}

GENERIC_TEMPLATES = [
    "Tell me about a project where you relied on {skill}. What decisions did you make and why?",
    "How would you approach a problem in {competency} that required {skill}?",
    "Describe a challenge you faced involving {skill} and how you resolved it.",
]

FOLLOW_UP_BANK: dict[FollowUpType, list[str]] = {
    FollowUpType.CLARIFY: [
        "Could you give me a specific example of that?",
        "Walk me through the steps you took.",
        "What was the specific outcome?",
    ],
    FollowUpType.PROBE: [
        "How would you approach it differently today?",
        "What were the trade-offs you considered?",
        "How did you measure success?",
    ],
}

EXAMPLE_MARKERS = (
    "for example", "for instance", "such as", "when i", "at my", "we built",
    "i built", "i led", "i implemented", "in my last", "in my previous",
)


class LocalGenerator:
    """Algorithmic generator mirroring the backend's output contract."""

    def generate(self, kind: GenerationKind, context: GenerationContext) -> GenerationResult:
        if kind == GenerationKind.QUESTION:
            return self.question(context)
        if kind == GenerationKind.FOLLOW_UP:
            return self.follow_up(context)
        return self.evaluation(context)

    def question(self, context: QuestionContext) -> GeneratedQuestion:
        """Pick a root question for the competency by question number."""
        competency = context.competency
        bank = QUESTION_BANK.get(competency.name.strip().lower())
        index = context.question_number - 1

        if bank:
            text = bank[index % len(bank)]
        else:
            skills = competency.skills or [competency.name]
            template = GENERIC_TEMPLATES[index % len(GENERIC_TEMPLATES)]
            text = template.format(skill=skills[index % len(skills)], competency=competency.name)

        return GeneratedQuestion(
            question_text=text,
            competency=competency.name,
            expected_topics=list(competency.skills[:3]),
            type="behavioral",
        )

    def follow_up(self, context: FollowUpContext) -> GeneratedQuestion:
        questions = FOLLOW_UP_BANK[context.follow_up_type]
        return GeneratedQuestion(
            question_text=questions[context.depth % len(questions)],
            competency=context.competency,
            expected_topics=[],
            type="follow_up",
            follow_up_type=context.follow_up_type,
        )

    def evaluation(self, context: EvaluationContext) -> GeneratedEvaluation:
        """
        Score an answer from surface features only.

        Base score comes from answer length (>=200 chars: 4, >=100: 3,
        otherwise 2). The examples dimension drops one point when the
        answer has no concrete-example markers.
        """
        answer = context.answer_text.strip()
        length = len(answer)
        base = 4 if length >= 200 else 3 if length >= 100 else 2

        lowered = answer.lower()
        has_example = any(marker in lowered for marker in EXAMPLE_MARKERS) or bool(re.search(r"\d", answer))
        examples = base if has_example else max(1, base - 1)

        covered = [t for t in context.expected_topics if t.lower() in lowered]
        missed = [t for t in context.expected_topics if t.lower() not in lowered]

        if base <= 2:
            suggestion = SuggestedFollowUp.CLARIFY
        elif base == 3:
            suggestion = SuggestedFollowUp.PROBE
        else:
            suggestion = SuggestedFollowUp.NONE

        return GeneratedEvaluation(
            relevance=base,
            depth=base,
            accuracy=base,
            examples=examples,
            communication=base,
            overall_score=base,
            reasoning=f"Local evaluation based on answer length ({length} chars).",
            suggested_follow_up=suggestion,
            key_points_covered=covered,
            missed_opportunities=missed,
        )
