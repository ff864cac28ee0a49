"""
Interview persistence for MockView

The orchestrator talks to storage only through ``InterviewRepository``.
Storage holds no business logic: it stores records exactly as directed,
one logical unit per call.
"""

import logging
from typing import Protocol

from mockview.core.errors import InvariantViolation
from mockview.models.interview import Answer, Interview, Question

logger = logging.getLogger(__name__)


class InterviewRepository(Protocol):
    """Persistence collaborator contract."""

    def get_interview(self, interview_id: str) -> Interview | None: ...

    def list_questions(self, interview_id: str) -> list[Question]: ...

    def list_answers(self, interview_id: str) -> list[Answer]: ...

    def get_answer(self, question_id: str) -> Answer | None: ...

    def create_interview(self, interview: Interview, first_question: Question) -> None: ...

    def commit_turn(self, interview: Interview, answer: Answer, next_question: Question | None) -> None: ...

    def save_interview(self, interview: Interview) -> None: ...


class InMemoryInterviewRepository:
    """
    Process-local storage (default for dev and tests).

    Records are copied on the way in and out so callers can never
    mutate stored state outside a commit.
    """

    def __init__(self):
        self._interviews: dict[str, Interview] = {}
        self._questions: dict[str, list[Question]] = {}
        self._answers: dict[str, Answer] = {}

    def get_interview(self, interview_id: str) -> Interview | None:
        interview = self._interviews.get(interview_id)
        return interview.model_copy(deep=True) if interview else None

    def list_questions(self, interview_id: str) -> list[Question]:
        return list(self._questions.get(interview_id, []))

    def list_answers(self, interview_id: str) -> list[Answer]:
        return [
            self._answers[q.id]
            for q in self._questions.get(interview_id, [])
            if q.id in self._answers
        ]

    def get_answer(self, question_id: str) -> Answer | None:
        return self._answers.get(question_id)

    def create_interview(self, interview: Interview, first_question: Question) -> None:
        if interview.id in self._interviews:
            raise InvariantViolation(f"Interview already exists: {interview.id}")
        self._interviews[interview.id] = interview.model_copy(deep=True)
        self._questions[interview.id] = [first_question]
        logger.debug(f"Stored interview {interview.id} with first question {first_question.id}")

    def commit_turn(self, interview: Interview, answer: Answer, next_question: Question | None) -> None:
        if answer.question_id in self._answers:
            raise InvariantViolation(f"Question {answer.question_id} already has an answer")

        # Questions and answers are frozen models, safe to share
        self._answers[answer.question_id] = answer
        if next_question is not None:
            self._questions.setdefault(interview.id, []).append(next_question)
        self._interviews[interview.id] = interview.model_copy(deep=True)

    def save_interview(self, interview: Interview) -> None:
        self._interviews[interview.id] = interview.model_copy(deep=True)
