"""
AI prompt templates for MockView

Contains structured prompts for:
- Question generation
- Follow-up questions
- Response evaluation
"""

from mockview.prompts.interviewer import InterviewerPrompts
from mockview.prompts.evaluator import EvaluatorPrompts

__all__ = [
    "InterviewerPrompts",
    "EvaluatorPrompts",
]
