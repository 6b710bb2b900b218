"""
Stage machine for the discovery flow.

The StageMachine owns the SessionState, the NavigationLog and the
components that produce each stage's artifact. Every mutation goes through
one of its intent methods:

    submit_dossier    INTAKE      -> ANALYSIS -> ASSESSMENT
    start_assessment  ANALYSIS    -> ASSESSMENT
    answer_question   ASSESSMENT  (-> ROADMAP on the last answer)
    chart_roadmap     ASSESSMENT  -> ROADMAP
    advance_roadmap / retreat_roadmap   ROADMAP
    reset             any         -> INTAKE

Backend calls are tagged with the session generation at issue time. A reset
bumps the generation, so a call that resolves afterwards is discarded
without touching state or the log.
"""

import logging
from collections.abc import Callable
from pathlib import Path

from astrograph.core.config import AstrographConfig, load_config, resolve_api_key
from astrograph.core.errors import ConfigurationError, GenerationError, StateError
from astrograph.core.generative import CallKind, GenerativeBackend, GenerativeClient, get_backend
from astrograph.core.generative.models import ImageAttachment
from astrograph.core.navlog import LogSource, NavigationLog
from astrograph.core.profile import ProfileAnalyzer
from astrograph.core.quiz import QuizCompleted, QuizEngine
from astrograph.core.roadmap import RoadmapPlanner
from astrograph.utils.logging import AstrographLogger, EventType, generate_session_id

from .models import SessionSnapshot, SessionState, Stage

logger = logging.getLogger(__name__)

SnapshotListener = Callable[[SessionSnapshot], None]

INITIAL_MESSAGE = "Astrograph initialized. Waiting for user dossier."
RESET_MESSAGE = "Trajectory reset. Awaiting new dossier."


def _heading_to(stage: Stage) -> str:
    return f"Adjusting trajectory to {stage.value} sector."


class StageMachine:
    """
    Owns and advances the discovery session.

    Example:
        >>> machine = build_machine()
        >>> await machine.submit_dossier("Senior backend engineer, 8 years of Go")
        >>> machine.state.stage
        <Stage.ASSESSMENT: 'ASSESSMENT'>
    """

    def __init__(
        self,
        analyzer: ProfileAnalyzer,
        quiz_engine: QuizEngine,
        planner: RoadmapPlanner,
        log: NavigationLog | None = None,
        journal: AstrographLogger | None = None,
    ) -> None:
        self.analyzer = analyzer
        self.quiz_engine = quiz_engine
        self.planner = planner
        self.log = log if log is not None else NavigationLog(journal)
        self.journal = journal

        self._state = SessionState()
        self._pending: dict[CallKind, int] = {}
        self._listeners: list[SnapshotListener] = []

        self.log.append(LogSource.SYSTEM, INITIAL_MESSAGE)

    @property
    def state(self) -> SessionState:
        return self._state

    # Observation

    def snapshot(self) -> SessionSnapshot:
        """Build a read-only view of the current session."""
        state = self._state
        has_roadmap = state.roadmap is not None
        return SessionSnapshot(
            stage=state.stage,
            profile=state.profile,
            quiz_session=state.quiz_session,
            roadmap=state.roadmap,
            generation=state.generation,
            roadmap_step_index=self.planner.current_step_index if has_roadmap else 0,
            current_step=self.planner.current_step if has_roadmap else None,
            current_milestone=self.planner.current_milestone if has_roadmap else None,
            loading=self.loading,
            log=self.log.entries,
        )

    @property
    def loading(self) -> tuple[CallKind, ...]:
        """Call kinds in flight for the current generation."""
        generation = self._state.generation
        return tuple(kind for kind, issued in self._pending.items() if issued == generation)

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """
        Register a listener called with a snapshot after every change.

        Returns:
            A callable that unsubscribes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        if not self._listeners:
            return
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            listener(snapshot)

    # Internal mutation helpers

    def _append(self, source: LogSource, message: str) -> None:
        self.log.append(source, message)
        self._notify()

    def _commit(self, new_state: SessionState) -> None:
        previous = self._state
        self._state = new_state
        if previous.stage != new_state.stage:
            logger.info("Stage %s -> %s", previous.stage.value, new_state.stage.value)
            if self.journal:
                self.journal.log_stage_transition(
                    previous.stage.value, new_state.stage.value, new_state.generation
                )
        self._notify()

    def _require(self, operation: str, *stages: Stage) -> None:
        if self._state.stage not in stages:
            allowed = " or ".join(s.value for s in stages)
            raise StateError(operation, self._state.stage.value, f"only allowed during {allowed}")

    def _begin(self, kind: CallKind, operation: str) -> int:
        generation = self._state.generation
        if self._pending.get(kind) == generation:
            raise StateError(
                operation, self._state.stage.value, f"{kind.value} is already in flight"
            )
        self._pending[kind] = generation
        self._notify()
        return generation

    def _finish(self, kind: CallKind, generation: int) -> None:
        if self._pending.get(kind) == generation:
            del self._pending[kind]

    def _is_stale(self, kind: CallKind, generation: int) -> bool:
        if generation != self._state.generation:
            logger.info("Discarding stale %s outcome from generation %d", kind.value, generation)
            return True
        return False

    # Intents

    async def submit_dossier(
        self, free_text: str, image: ImageAttachment | None = None
    ) -> SessionSnapshot:
        """
        Analyze a dossier, then prepare the assessment.

        On success the machine ends in ASSESSMENT. If quiz generation fails
        it rests in ANALYSIS and start_assessment() retries without
        re-analyzing.

        Raises:
            StateError: If not in INTAKE or an analysis is already in flight
            ValidationError: If both text and image are empty
            GenerationError: If a backend call fails in the current generation
        """
        operation = "submit dossier"
        self._require(operation, Stage.INTAKE)
        self.analyzer.check_input(free_text, image)

        kind = CallKind.ANALYZE_PROFILE
        generation = self._begin(kind, operation)
        try:
            self._append(LogSource.SYSTEM, _heading_to(Stage.ANALYSIS))
            profile = await self.analyzer.analyze(free_text, image)
        except GenerationError:
            if self._is_stale(kind, generation):
                return self.snapshot()
            raise
        finally:
            self._finish(kind, generation)

        if self._is_stale(kind, generation):
            return self.snapshot()

        self._commit(
            SessionState(stage=Stage.ANALYSIS, profile=profile, generation=generation)
        )
        self._append(LogSource.ANALYZER, f"Constellation identified: {profile.archetype_name}")

        return await self.start_assessment()

    async def start_assessment(self) -> SessionSnapshot:
        """
        Generate the quiz for the current profile.

        Raises:
            StateError: If not in ANALYSIS or quiz generation is in flight
            GenerationError: If the backend call fails
        """
        operation = "start assessment"
        self._require(operation, Stage.ANALYSIS)
        profile = self._state.profile

        kind = CallKind.GENERATE_QUIZ
        generation = self._begin(kind, operation)
        try:
            self._append(LogSource.SYSTEM, _heading_to(Stage.ASSESSMENT))
            session = await self.quiz_engine.start_quiz(profile)
        except GenerationError:
            if self._is_stale(kind, generation):
                return self.snapshot()
            raise
        finally:
            self._finish(kind, generation)

        if self._is_stale(kind, generation):
            return self.snapshot()

        self._commit(
            SessionState(
                stage=Stage.ASSESSMENT,
                profile=profile,
                quiz_session=session,
                generation=generation,
            )
        )
        self._append(LogSource.QUIZ, f"Assessment prepared: {session.total} questions.")
        return self.snapshot()

    async def answer_question(self, chosen_index: int) -> SessionSnapshot:
        """
        Score an answer to the current question.

        The last answer also charts the roadmap.

        Raises:
            StateError: If not in ASSESSMENT or the quiz is already complete
            ValidationError: If chosen_index is not in 0..3
            GenerationError: If charting the roadmap fails
        """
        operation = "answer question"
        self._require(operation, Stage.ASSESSMENT)
        state = self._state
        if state.quiz_session.is_terminal:
            raise StateError(operation, state.stage.value, "the quiz is already complete")

        outcome = self.quiz_engine.submit_answer(state.quiz_session, chosen_index)

        if not isinstance(outcome, QuizCompleted):
            self._commit(
                SessionState(
                    stage=Stage.ASSESSMENT,
                    profile=state.profile,
                    quiz_session=outcome,
                    generation=state.generation,
                )
            )
            return self.snapshot()

        self._commit(
            SessionState(
                stage=Stage.ASSESSMENT,
                profile=state.profile,
                quiz_session=outcome.session,
                generation=state.generation,
            )
        )
        self._append(
            LogSource.QUIZ,
            f"Aptitude aligned (score {outcome.final_score}/{outcome.total}). "
            "Constructing roadmap.",
        )
        return await self.chart_roadmap()

    async def chart_roadmap(self) -> SessionSnapshot:
        """
        Build the roadmap for the current profile and enter ROADMAP.

        A roadmap already charted for this profile is reused without a
        backend call. In ROADMAP with the roadmap present this is a no-op.

        Raises:
            StateError: If the quiz is not complete or roadmap generation is
                already in flight
            GenerationError: If the backend call fails
        """
        operation = "chart roadmap"
        self._require(operation, Stage.ASSESSMENT, Stage.ROADMAP)
        state = self._state
        if state.stage == Stage.ROADMAP:
            return self.snapshot()
        if not state.quiz_session.is_terminal:
            raise StateError(operation, state.stage.value, "the quiz is not complete")

        kind = CallKind.GENERATE_ROADMAP
        generation = state.generation
        roadmap = self.planner.cached_for(state.profile)
        if roadmap is None:
            generation = self._begin(kind, operation)
            try:
                self._append(LogSource.SYSTEM, _heading_to(Stage.ROADMAP))
                roadmap = await self.planner.build_roadmap(state.profile)
            except GenerationError:
                if self._is_stale(kind, generation):
                    return self.snapshot()
                raise
            finally:
                self._finish(kind, generation)

            if self._is_stale(kind, generation):
                return self.snapshot()

        self._commit(
            SessionState(
                stage=Stage.ROADMAP,
                profile=state.profile,
                quiz_session=state.quiz_session,
                roadmap=roadmap,
                generation=generation,
            )
        )
        self._append(LogSource.SYSTEM, f"Ascension plan charted: {len(roadmap)} phases.")
        return self.snapshot()

    def advance_roadmap(self) -> SessionSnapshot:
        """Move to the next roadmap step (clamped)."""
        self._require("advance roadmap", Stage.ROADMAP)
        self.planner.advance()
        self._notify()
        return self.snapshot()

    def retreat_roadmap(self) -> SessionSnapshot:
        """Move to the previous roadmap step (clamped)."""
        self._require("retreat roadmap", Stage.ROADMAP)
        self.planner.retreat()
        self._notify()
        return self.snapshot()

    def reset(self) -> SessionSnapshot:
        """
        Return to INTAKE from any stage.

        Clears the profile, quiz and roadmap, bumps the generation so in-flight
        results are discarded, and keeps the navigation log.
        """
        previous = self._state
        self.planner.forget()
        if self.journal:
            self.journal.log_event(
                EventType.SESSION_RESET,
                {"from": previous.stage.value, "generation": previous.generation + 1},
            )
        self._commit(SessionState(generation=previous.generation + 1))
        self._append(LogSource.SYSTEM, RESET_MESSAGE)
        return self.snapshot()


def build_machine(
    config: AstrographConfig | None = None,
    backend: GenerativeBackend | None = None,
    session_id: str | None = None,
) -> StageMachine:
    """
    Wire up a StageMachine from configuration.

    Args:
        config: Configuration (loaded from disk and env if None)
        backend: Backend to use instead of the configured one (tests)
        session_id: Journal session id (generated if None)

    Raises:
        ConfigurationError: If no API key is available, or the backend is unknown
            or not available
    """
    if config is None:
        config = load_config()

    if backend is None:
        api_key = resolve_api_key(config)
        try:
            backend = get_backend(
                config.backend.name,
                api_key=api_key,
                timeout_seconds=config.backend.timeout_seconds,
            )
        except ValueError as e:
            raise ConfigurationError(str(e)) from e

    if not backend.is_available():
        raise ConfigurationError(f"Backend '{backend.name}' is not available")

    journal = None
    if config.journal.enabled:
        directory = Path(config.journal.directory) if config.journal.directory else None
        journal = AstrographLogger.init(session_id or generate_session_id(), directory)
        journal.log_event(
            EventType.SESSION_START,
            {"backend": backend.name, "model": config.backend.model},
        )

    client = GenerativeClient(backend, config.backend.model, journal)
    return StageMachine(
        analyzer=ProfileAnalyzer(client),
        quiz_engine=QuizEngine(client, question_count=config.quiz.question_count),
        planner=RoadmapPlanner(client),
        journal=journal,
    )
