"""
Generative backend access.

The GenerativeClient wraps a pluggable backend (registered by name) and
enforces one declarative response schema per call kind.
"""

# Import backends to trigger registration
from . import gemini  # noqa: F401
from .backend import GenerativeBackend, get_backend, list_backends, register_backend
from .client import GenerativeClient
from .models import (
    CallKind,
    GenerationRequest,
    GenerationResponse,
    ImageAttachment,
    TokenUsage,
)
from .schemas import CALL_SPECS, CallSpec, get_call_spec, validate_response

__all__ = [
    "CALL_SPECS",
    "CallKind",
    "CallSpec",
    "GenerationRequest",
    "GenerationResponse",
    "GenerativeBackend",
    "GenerativeClient",
    "ImageAttachment",
    "TokenUsage",
    "get_backend",
    "get_call_spec",
    "list_backends",
    "register_backend",
    "validate_response",
]
