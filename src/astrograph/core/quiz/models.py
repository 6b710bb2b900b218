"""
Quiz data models for astrograph.

A Quiz is generated once per Profile and never changes. A QuizSession is the
user's attempt at it: an immutable snapshot replaced on every answer.
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator

OPTIONS_PER_QUESTION = 4


class QuizQuestion(BaseModel):
    """A multiple-choice question with exactly four options."""

    model_config = ConfigDict(frozen=True)

    prompt: str = Field(..., min_length=1, description="Question text")
    options: tuple[str, str, str, str] = Field(..., description="The four answer options")
    correct_option_index: int = Field(
        ..., ge=0, le=OPTIONS_PER_QUESTION - 1, description="Index of the correct option"
    )

    @property
    def correct_option(self) -> str:
        return self.options[self.correct_option_index]


Quiz = tuple[QuizQuestion, ...]


class QuizSession(BaseModel):
    """
    Progress through a quiz.

    current_index only moves forward and score only grows; the validator
    enforces score <= current_index <= len(quiz).

    Example:
        >>> session = QuizSession(quiz=(question,))
        >>> session.is_terminal
        False
    """

    model_config = ConfigDict(frozen=True)

    quiz: Quiz = Field(..., min_length=1, description="Questions in order")
    current_index: int = Field(default=0, ge=0, description="Index of the next question")
    score: int = Field(default=0, ge=0, description="Correct answers so far")

    @model_validator(mode="after")
    def _check_progress(self) -> "QuizSession":
        if self.current_index > len(self.quiz):
            raise ValueError(
                f"current_index {self.current_index} exceeds quiz length {len(self.quiz)}"
            )
        if self.score > self.current_index:
            raise ValueError(f"score {self.score} exceeds answered count {self.current_index}")
        return self

    @property
    def total(self) -> int:
        return len(self.quiz)

    @property
    def is_terminal(self) -> bool:
        """True once every question has been answered."""
        return self.current_index == len(self.quiz)

    @property
    def current_question(self) -> QuizQuestion | None:
        """The question awaiting an answer, or None when terminal."""
        if self.is_terminal:
            return None
        return self.quiz[self.current_index]


class QuizCompleted(BaseModel):
    """
    Completion event emitted by the answer that finishes a quiz.

    final_score includes that last answer; callers should read it from here
    rather than from an earlier session snapshot.
    """

    model_config = ConfigDict(frozen=True)

    final_score: int = Field(..., ge=0)
    total: int = Field(..., ge=1)
    session: QuizSession
