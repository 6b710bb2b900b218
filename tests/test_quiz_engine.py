"""
Tests for QuizEngine and the quiz models.

Covers quiz generation, the pure submit_answer() transition and the
QuizSession invariants.
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from astrograph.core.errors import GenerationError, StateError, ValidationError
from astrograph.core.generative.models import CallKind
from astrograph.core.quiz import QuizCompleted, QuizEngine, QuizQuestion, QuizSession


@pytest.fixture
def engine(client) -> QuizEngine:
    return QuizEngine(client, question_count=3)


class TestQuizModels:
    """Model-level invariants."""

    def test_question_needs_four_options(self):
        with pytest.raises(PydanticValidationError):
            QuizQuestion(prompt="q", options=("a", "b", "c"), correct_option_index=0)

    def test_correct_index_range(self):
        with pytest.raises(PydanticValidationError):
            QuizQuestion(prompt="q", options=("a", "b", "c", "d"), correct_option_index=4)

    def test_empty_quiz_rejected(self):
        with pytest.raises(PydanticValidationError):
            QuizSession(quiz=())

    def test_score_cannot_exceed_index(self, sample_quiz):
        with pytest.raises(PydanticValidationError):
            QuizSession(quiz=sample_quiz, current_index=1, score=2)

    def test_index_cannot_exceed_length(self, sample_quiz):
        with pytest.raises(PydanticValidationError):
            QuizSession(quiz=sample_quiz, current_index=4, score=0)

    def test_terminal_exactly_at_end(self, sample_quiz):
        assert not QuizSession(quiz=sample_quiz, current_index=2).is_terminal
        terminal = QuizSession(quiz=sample_quiz, current_index=3, score=1)
        assert terminal.is_terminal
        assert terminal.current_question is None


class TestStartQuiz:
    """QuizEngine.start_quiz()."""

    @pytest.mark.asyncio
    async def test_generates_fresh_session(self, backend, engine, sample_profile, quiz_payload):
        backend.queue_json(CallKind.GENERATE_QUIZ, quiz_payload)

        session = await engine.start_quiz(sample_profile)

        assert session.current_index == 0
        assert session.score == 0
        assert session.total == 3
        assert session.quiz[1].options[1] == "Distributed tracing"
        assert session.quiz[1].correct_option == "Distributed tracing"

    @pytest.mark.asyncio
    async def test_prompt_uses_archetype_context_and_count(
        self, backend, client, sample_profile, quiz_payload
    ):
        backend.queue_json(CallKind.GENERATE_QUIZ, quiz_payload)

        await QuizEngine(client, question_count=5).start_quiz(sample_profile)

        prompt = backend.requests[0].prompt
        assert f'"{sample_profile.context}"' in prompt
        assert "generate 5 psychometric questions" in prompt

    @pytest.mark.asyncio
    async def test_fewer_questions_than_requested_accepted(
        self, backend, engine, sample_profile, quiz_payload
    ):
        backend.queue_json(CallKind.GENERATE_QUIZ, quiz_payload[:2])
        assert (await engine.start_quiz(sample_profile)).total == 2

    @pytest.mark.asyncio
    async def test_empty_quiz_is_generation_error(self, backend, engine, sample_profile):
        backend.queue(CallKind.GENERATE_QUIZ, "[]")
        with pytest.raises(GenerationError):
            await engine.start_quiz(sample_profile)


class TestSubmitAnswer:
    """QuizEngine.submit_answer()."""

    def test_correct_answer_scores(self, engine, sample_session):
        after = engine.submit_answer(sample_session, 0)
        assert isinstance(after, QuizSession)
        assert (after.current_index, after.score) == (1, 1)

    def test_wrong_answer_advances_without_score(self, engine, sample_session):
        after = engine.submit_answer(sample_session, 3)
        assert (after.current_index, after.score) == (1, 0)

    def test_original_session_unchanged(self, engine, sample_session):
        engine.submit_answer(sample_session, 0)
        assert (sample_session.current_index, sample_session.score) == (0, 0)

    def test_scenario_correct_wrong_correct(self, engine, sample_session):
        """Answers [correct, wrong, correct] on a 3-question quiz score 2."""
        first = engine.submit_answer(sample_session, 0)
        second = engine.submit_answer(first, 0)
        outcome = engine.submit_answer(second, 2)

        assert isinstance(first, QuizSession) and isinstance(second, QuizSession)
        assert isinstance(outcome, QuizCompleted)
        assert outcome.final_score == 2
        assert outcome.total == 3
        assert outcome.session.current_index == 3
        assert outcome.session.is_terminal

    def test_completion_score_includes_last_answer(self, engine, sample_quiz):
        session = QuizSession(quiz=sample_quiz, current_index=2, score=2)
        outcome = engine.submit_answer(session, 2)
        assert outcome.final_score == 3

    @pytest.mark.parametrize("index", [-1, 4, 10])
    def test_index_out_of_range(self, engine, sample_session, index):
        with pytest.raises(ValidationError) as exc_info:
            engine.submit_answer(sample_session, index)
        assert exc_info.value.field == "chosen_index"

    def test_non_integer_index(self, engine, sample_session):
        with pytest.raises(ValidationError):
            engine.submit_answer(sample_session, True)

    def test_terminal_session_rejected(self, engine, sample_quiz):
        terminal = QuizSession(quiz=sample_quiz, current_index=3, score=1)
        with pytest.raises(StateError):
            engine.submit_answer(terminal, 0)

    @pytest.mark.parametrize("index", range(4))
    def test_score_and_index_move_together(self, engine, sample_session, index):
        after = engine.submit_answer(sample_session, index)
        assert after.current_index == sample_session.current_index + 1
        assert after.score in (sample_session.score, sample_session.score + 1)

    def test_is_correct(self, engine, sample_session):
        assert engine.is_correct(sample_session, 0) is True
        assert engine.is_correct(sample_session, 1) is False
