"""
Declarative response schemas for each backend call kind.

Each call kind is described by one CallSpec: its prompt template, the wire
model its JSON response must satisfy, and whether an image may be attached.
One generic validator (validate_response) checks any response against its
descriptor, so adding a call kind means adding one entry to CALL_SPECS.

Wire models use the field names the backend emits (camelCase aliases) and
run in strict mode: a missing field, a wrong type, an out-of-range number or
an unknown enum value is a failure, never a silent default.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from functools import cached_property
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from astrograph.core.errors import GenerationError, GenerationFailure

from .models import CallKind
from .prompts import (
    ANALYZE_PROFILE_TEMPLATE,
    GENERATE_QUIZ_TEMPLATE,
    GENERATE_ROADMAP_TEMPLATE,
)

TRAJECTORY_LENGTH = 5
OPTIONS_PER_QUESTION = 4
ROADMAP_LENGTH = 5

# Surrounding whitespace is stripped before the length check, so blank text fails.
NonBlankStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class _WireModel(BaseModel):
    model_config = ConfigDict(strict=True, populate_by_name=True, extra="ignore", frozen=True)


class CoordinateWire(_WireModel):
    x: float = Field(..., ge=0, le=100)
    y: float = Field(..., ge=0, le=100)


class ProfileWire(_WireModel):
    """ANALYZE_PROFILE response."""

    summary: NonBlankStr
    constellation_name: NonBlankStr = Field(..., alias="constellationName")
    threat_level: Literal["LOW", "MEDIUM", "HIGH"] = Field(..., alias="threatLevel")
    coordinates: list[CoordinateWire] = Field(
        ..., min_length=TRAJECTORY_LENGTH, max_length=TRAJECTORY_LENGTH
    )


class QuizQuestionWire(_WireModel):
    """One GENERATE_QUIZ array item."""

    question: NonBlankStr
    options: list[NonBlankStr] = Field(
        ..., min_length=OPTIONS_PER_QUESTION, max_length=OPTIONS_PER_QUESTION
    )
    correct_index: int = Field(..., alias="correctIndex", ge=0, le=OPTIONS_PER_QUESTION - 1)


class AscensionStepWire(_WireModel):
    """One GENERATE_ROADMAP array item."""

    phase: NonBlankStr
    instruction: NonBlankStr
    objective: NonBlankStr


QuizWire = Annotated[list[QuizQuestionWire], Field(min_length=1)]
RoadmapWire = Annotated[
    list[AscensionStepWire], Field(min_length=ROADMAP_LENGTH, max_length=ROADMAP_LENGTH)
]


@dataclass(frozen=True)
class CallSpec:
    """
    Descriptor for one call kind.

    Attributes:
        kind: The call kind described
        template: str.format template for the prompt
        response_type: Type the parsed JSON must validate against
        accepts_image: Whether an inline image may be attached
    """

    kind: CallKind
    template: str
    response_type: Any
    accepts_image: bool = False

    @cached_property
    def adapter(self) -> TypeAdapter[Any]:
        return TypeAdapter(self.response_type)

    def render(self, payload: dict[str, Any]) -> str:
        """
        Interpolate the payload into the prompt template.

        Raises:
            ValueError: If a placeholder has no value in the payload
        """
        try:
            return self.template.format(**payload)
        except KeyError as e:
            raise ValueError(f"{self.kind.value} payload is missing {e.args[0]!r}") from e

    def json_schema(self) -> dict[str, Any]:
        """JSON schema of the expected response, using wire field names."""
        return self.adapter.json_schema(by_alias=True)


CALL_SPECS: dict[CallKind, CallSpec] = {
    CallKind.ANALYZE_PROFILE: CallSpec(
        kind=CallKind.ANALYZE_PROFILE,
        template=ANALYZE_PROFILE_TEMPLATE,
        response_type=ProfileWire,
        accepts_image=True,
    ),
    CallKind.GENERATE_QUIZ: CallSpec(
        kind=CallKind.GENERATE_QUIZ,
        template=GENERATE_QUIZ_TEMPLATE,
        response_type=QuizWire,
    ),
    CallKind.GENERATE_ROADMAP: CallSpec(
        kind=CallKind.GENERATE_ROADMAP,
        template=GENERATE_ROADMAP_TEMPLATE,
        response_type=RoadmapWire,
    ),
}


def get_call_spec(kind: CallKind) -> CallSpec:
    """Look up the descriptor for a call kind."""
    return CALL_SPECS[kind]


_FENCE_RE = re.compile(r"^\s*```[a-zA-Z]*\s*\n?(.*?)\n?\s*```\s*$", re.DOTALL)


def strip_code_fences(text: str) -> str:
    """Remove a single markdown code fence wrapping the whole text, if any."""
    match = _FENCE_RE.match(text)
    return match.group(1) if match else text.strip()


def validate_response(kind: CallKind, text: str) -> Any:
    """
    Parse and validate backend text against the descriptor for `kind`.

    Args:
        kind: Call kind whose schema applies
        text: Raw text returned by the backend

    Returns:
        The validated wire object (a model or a list of models)

    Raises:
        GenerationError: reason PARSE if the text is not JSON,
            reason SCHEMA if it does not satisfy the schema
    """
    body = strip_code_fences(text or "")
    try:
        json.loads(body)
    except json.JSONDecodeError as e:
        raise GenerationError(kind, e, GenerationFailure.PARSE) from e

    try:
        return get_call_spec(kind).adapter.validate_json(body, strict=True)
    except PydanticValidationError as e:
        raise GenerationError(kind, e, GenerationFailure.SCHEMA) from e
