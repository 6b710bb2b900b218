"""Quiz models and the scoring engine."""

from astrograph.core.quiz.engine import QuizEngine, question_from_wire
from astrograph.core.quiz.models import (
    OPTIONS_PER_QUESTION,
    Quiz,
    QuizCompleted,
    QuizQuestion,
    QuizSession,
)

__all__ = [
    "OPTIONS_PER_QUESTION",
    "Quiz",
    "QuizCompleted",
    "QuizEngine",
    "QuizQuestion",
    "QuizSession",
    "question_from_wire",
]
