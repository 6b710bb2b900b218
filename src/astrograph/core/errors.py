"""
Error taxonomy for astrograph.

Every failure the core raises derives from AstrographError so the
presentation layer can catch one base class and branch on the subtype:

- ValidationError: a caller-side precondition was violated (empty dossier,
  answer index out of range). Raised before any backend call.
- GenerationError: a backend call failed in transport, returned text that
  is not JSON, or returned JSON that does not match the expected schema.
- StateError: an intent was invoked in a stage that does not allow it.
- ConfigurationError: the process cannot start (missing API key, bad config).
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from astrograph.core.generative.models import CallKind


class AstrographError(Exception):
    """Base class for all astrograph errors."""

    pass


class ConfigurationError(AstrographError):
    """Raised at startup when configuration is missing or invalid."""

    pass


class ValidationError(AstrographError):
    """
    Caller-side precondition violated.

    Attributes:
        field: Name of the offending input (e.g. 'dossier', 'chosen_index')
        message: Human-readable explanation
    """

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class StateError(AstrographError):
    """
    Operation invoked while the machine is in an incompatible stage.

    This is an integration error: callers should never retry it blindly.

    Attributes:
        operation: Intent that was rejected
        stage: Stage value at the time of the rejection
        message: Human-readable explanation
    """

    def __init__(self, operation: str, stage: str, message: str) -> None:
        self.operation = operation
        self.stage = stage
        self.message = message
        super().__init__(f"Cannot {operation} during {stage}: {message}")


class GenerationFailure(str, Enum):
    """Which step of a backend round trip failed."""

    TRANSPORT = "transport"
    PARSE = "parse"
    SCHEMA = "schema"


class GenerationError(AstrographError):
    """
    A call to the generative backend failed.

    Attributes:
        kind: The call kind that failed
        reason: Which step failed (transport, parse or schema)
        cause: Underlying exception or description
    """

    def __init__(
        self,
        kind: CallKind,
        cause: Exception | str,
        reason: GenerationFailure = GenerationFailure.TRANSPORT,
    ) -> None:
        self.kind = kind
        self.cause = cause
        self.reason = reason
        super().__init__(f"{kind.value} failed ({reason.value}): {cause}")
