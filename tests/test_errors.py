"""Tests for the astrograph error taxonomy."""

import pytest

from astrograph.core.errors import (
    AstrographError,
    ConfigurationError,
    GenerationError,
    GenerationFailure,
    StateError,
    ValidationError,
)
from astrograph.core.generative.models import CallKind


class TestErrorHierarchy:
    """Every core error derives from AstrographError."""

    @pytest.mark.parametrize(
        "error",
        [
            ConfigurationError("missing key"),
            ValidationError("dossier", "empty"),
            StateError("answer question", "INTAKE", "no quiz"),
            GenerationError(CallKind.GENERATE_QUIZ, "boom"),
        ],
    )
    def test_base_class(self, error):
        assert isinstance(error, AstrographError)


class TestValidationError:
    def test_attributes_and_message(self):
        error = ValidationError("chosen_index", "Must be between 0 and 3, got 7")
        assert error.field == "chosen_index"
        assert str(error) == "chosen_index: Must be between 0 and 3, got 7"


class TestStateError:
    def test_message_names_operation_and_stage(self):
        error = StateError("submit dossier", "ASSESSMENT", "only allowed during INTAKE")
        assert error.operation == "submit dossier"
        assert error.stage == "ASSESSMENT"
        assert str(error) == "Cannot submit dossier during ASSESSMENT: only allowed during INTAKE"


class TestGenerationError:
    def test_defaults_to_transport(self):
        error = GenerationError(CallKind.ANALYZE_PROFILE, ConnectionError("refused"))
        assert error.reason is GenerationFailure.TRANSPORT
        assert isinstance(error.cause, ConnectionError)
        assert str(error) == "analyze_profile failed (transport): refused"

    def test_schema_reason(self):
        error = GenerationError(CallKind.GENERATE_ROADMAP, "4 steps", GenerationFailure.SCHEMA)
        assert "generate_roadmap failed (schema)" in str(error)
