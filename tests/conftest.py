"""
Pytest configuration and shared fixtures.

Provides a scripted fake backend, canned wire payloads for each call kind,
sample domain objects and a fully wired StageMachine.
"""

import asyncio
import json
from collections import defaultdict
from typing import Any

import pytest

from astrograph.core.config import clear_cache
from astrograph.core.generative.client import GenerativeClient
from astrograph.core.generative.models import (
    CallKind,
    GenerationRequest,
    GenerationResponse,
    TokenUsage,
)
from astrograph.core.navlog import NavigationLog
from astrograph.core.profile import Coordinate, Profile, ProfileAnalyzer, RiskLevel
from astrograph.core.quiz import QuizEngine, QuizQuestion, QuizSession
from astrograph.core.roadmap import RoadmapPlanner
from astrograph.core.stage import StageMachine

API_KEY_VARS = ("GEMINI_API_KEY", "GOOGLE_API_KEY", "API_KEY")
ASTROGRAPH_VARS = (
    "ASTROGRAPH_BACKEND",
    "ASTROGRAPH_MODEL",
    "ASTROGRAPH_QUIZ_QUESTIONS",
    "ASTROGRAPH_TIMEOUT",
    "ASTROGRAPH_JOURNAL",
)

# ==============================================================================
# Fake Backend
# ==============================================================================


class FakeBackend:
    """
    Scripted GenerativeBackend.

    Responses are queued per call kind and consumed in order. A queued
    Exception is raised instead of returned. hold(kind) makes calls of that
    kind wait on an asyncio.Event until the test releases it.
    """

    name = "fake"

    def __init__(self) -> None:
        self.responses: dict[CallKind, list[str | Exception]] = defaultdict(list)
        self.requests: list[GenerationRequest] = []
        self.gates: dict[CallKind, asyncio.Event] = {}

    def queue(self, kind: CallKind, *responses: str | Exception) -> "FakeBackend":
        self.responses[kind].extend(responses)
        return self

    def queue_json(self, kind: CallKind, payload: Any) -> "FakeBackend":
        return self.queue(kind, json.dumps(payload))

    def hold(self, kind: CallKind) -> asyncio.Event:
        gate = asyncio.Event()
        self.gates[kind] = gate
        return gate

    def calls(self, kind: CallKind) -> list[GenerationRequest]:
        return [r for r in self.requests if r.kind == kind]

    def is_available(self) -> bool:
        return True

    async def generate(self, request: GenerationRequest) -> GenerationResponse:
        self.requests.append(request)
        gate = self.gates.get(request.kind)
        if gate is not None:
            await gate.wait()

        queued = self.responses[request.kind]
        if not queued:
            raise AssertionError(f"No response queued for {request.kind.value}")
        item = queued.pop(0)
        if isinstance(item, Exception):
            raise item
        return GenerationResponse(
            text=item,
            model=request.model,
            usage=TokenUsage(input_tokens=100, output_tokens=50),
            duration_seconds=0.01,
        )


# ==============================================================================
# Environment Fixtures
# ==============================================================================


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep real config, keys and journals out of every test."""
    for name in API_KEY_VARS + ASTROGRAPH_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg-config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg-data"))
    monkeypatch.chdir(tmp_path)
    clear_cache()
    yield
    clear_cache()


# ==============================================================================
# Wire Payload Fixtures
# ==============================================================================


@pytest.fixture
def profile_payload() -> dict[str, Any]:
    """ANALYZE_PROFILE response as the backend emits it."""
    return {
        "summary": "Backend engineer with eight years of Go. Ready to lead distributed platforms.",
        "constellationName": "The Forge of Distributed Systems",
        "threatLevel": "MEDIUM",
        "coordinates": [
            {"x": 10, "y": 90},
            {"x": 30, "y": 70},
            {"x": 50, "y": 55},
            {"x": 70, "y": 30},
            {"x": 90, "y": 10},
        ],
    }


@pytest.fixture
def quiz_payload() -> list[dict[str, Any]]:
    """GENERATE_QUIZ response with three questions; correct answers are 0, 1, 2."""
    return [
        {
            "question": "A partition splits your cluster. What do you protect first?",
            "options": ["Consistency", "Latency", "Throughput", "Cost"],
            "correctIndex": 0,
        },
        {
            "question": "Which tool traces a request across services?",
            "options": ["grep", "Distributed tracing", "A debugger", "Unit tests"],
            "correctIndex": 1,
        },
        {
            "question": "How do you roll out a risky schema change?",
            "options": ["Big bang", "Friday deploy", "Expand and contract", "Skip review"],
            "correctIndex": 2,
        },
    ]


@pytest.fixture
def roadmap_payload() -> list[dict[str, Any]]:
    """GENERATE_ROADMAP response with the five canonical phases."""
    phases = ["Awakening", "Ascension", "Alignment", "Radiance", "Apex"]
    return [
        {
            "phase": phase,
            "instruction": f"Step {i + 1}: take on a larger system",
            "objective": f"Objective {i + 1}",
        }
        for i, phase in enumerate(phases)
    ]


# ==============================================================================
# Domain Fixtures
# ==============================================================================


@pytest.fixture
def sample_profile() -> Profile:
    return Profile(
        summary="Backend engineer with eight years of Go. Ready to lead distributed platforms.",
        archetype_name="The Forge of Distributed Systems",
        risk_level=RiskLevel.MEDIUM,
        trajectory=tuple(
            Coordinate(x=x, y=y) for x, y in [(10, 90), (30, 70), (50, 55), (70, 30), (90, 10)]
        ),
    )


@pytest.fixture
def sample_quiz() -> tuple[QuizQuestion, ...]:
    return tuple(
        QuizQuestion(
            prompt=f"Question {i}",
            options=("A", "B", "C", "D"),
            correct_option_index=i,
        )
        for i in range(3)
    )


@pytest.fixture
def sample_session(sample_quiz) -> QuizSession:
    return QuizSession(quiz=sample_quiz)


# ==============================================================================
# Component Fixtures
# ==============================================================================


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def client(backend) -> GenerativeClient:
    return GenerativeClient(backend, "gemini-test")


@pytest.fixture
def machine(client) -> StageMachine:
    """StageMachine wired to the fake backend, without a journal."""
    return StageMachine(
        analyzer=ProfileAnalyzer(client),
        quiz_engine=QuizEngine(client, question_count=3),
        planner=RoadmapPlanner(client),
        log=NavigationLog(),
    )


@pytest.fixture
def scripted_backend(backend, profile_payload, quiz_payload, roadmap_payload) -> FakeBackend:
    """Fake backend with one good response queued for each call kind."""
    backend.queue_json(CallKind.ANALYZE_PROFILE, profile_payload)
    backend.queue_json(CallKind.GENERATE_QUIZ, quiz_payload)
    backend.queue_json(CallKind.GENERATE_ROADMAP, roadmap_payload)
    return backend
