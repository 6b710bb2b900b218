"""
Quiz generation and scoring.

start_quiz() makes one GENERATE_QUIZ call per Profile. submit_answer() is a
pure, deterministic transition from one QuizSession to the next.
"""

import logging

from astrograph.core.errors import StateError, ValidationError
from astrograph.core.generative.client import GenerativeClient
from astrograph.core.generative.models import CallKind
from astrograph.core.generative.schemas import QuizQuestionWire
from astrograph.core.profile.models import Profile

from .models import OPTIONS_PER_QUESTION, QuizCompleted, QuizQuestion, QuizSession

logger = logging.getLogger(__name__)


def question_from_wire(wire: QuizQuestionWire) -> QuizQuestion:
    return QuizQuestion(
        prompt=wire.question,
        options=tuple(wire.options),
        correct_option_index=wire.correct_index,
    )


class QuizEngine:
    """
    Serves and scores the assessment derived from a Profile.

    Example:
        >>> engine = QuizEngine(client, question_count=3)
        >>> session = await engine.start_quiz(profile)
        >>> outcome = engine.submit_answer(session, 2)
    """

    def __init__(self, client: GenerativeClient, question_count: int = 3) -> None:
        self.client = client
        self.question_count = question_count

    async def start_quiz(self, profile: Profile) -> QuizSession:
        """
        Generate a quiz for the profile and open a session on it.

        Raises:
            GenerationError: If the backend fails or returns an invalid quiz
        """
        wire = await self.client.invoke(
            CallKind.GENERATE_QUIZ,
            {"context": profile.context, "question_count": self.question_count},
        )
        quiz = tuple(question_from_wire(item) for item in wire)
        logger.info("Quiz generated with %d questions", len(quiz))
        return QuizSession(quiz=quiz)

    @staticmethod
    def check_answer_index(chosen_index: int) -> None:
        """
        Raises:
            ValidationError: If chosen_index is not a valid option index
        """
        if isinstance(chosen_index, bool) or not isinstance(chosen_index, int):
            raise ValidationError("chosen_index", f"Expected an integer, got {chosen_index!r}")
        if not 0 <= chosen_index < OPTIONS_PER_QUESTION:
            raise ValidationError(
                "chosen_index",
                f"Must be between 0 and {OPTIONS_PER_QUESTION - 1}, got {chosen_index}",
            )

    @staticmethod
    def is_correct(session: QuizSession, chosen_index: int) -> bool:
        question = session.current_question
        return question is not None and chosen_index == question.correct_option_index

    def submit_answer(
        self, session: QuizSession, chosen_index: int
    ) -> QuizSession | QuizCompleted:
        """
        Score one answer and advance to the next question.

        Score and index move together in a single new session. Answers are
        final: there is no way back to a previous question.

        Args:
            session: Current, non-terminal session
            chosen_index: Option picked by the user (0-3)

        Returns:
            The next QuizSession, or QuizCompleted if this was the last question

        Raises:
            ValidationError: If chosen_index is out of range
            StateError: If the session is already terminal
        """
        self.check_answer_index(chosen_index)
        if session.is_terminal:
            raise StateError("submit answer", "ASSESSMENT", "the quiz is already complete")

        gained = 1 if self.is_correct(session, chosen_index) else 0
        advanced = QuizSession(
            quiz=session.quiz,
            current_index=session.current_index + 1,
            score=session.score + gained,
        )

        if advanced.is_terminal:
            logger.info("Quiz complete: %d/%d", advanced.score, advanced.total)
            return QuizCompleted(final_score=advanced.score, total=advanced.total, session=advanced)
        return advanced
