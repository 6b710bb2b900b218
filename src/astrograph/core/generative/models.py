"""
Generative backend data models.

Defines the request/response envelope exchanged between the
GenerativeClient and a backend implementation, plus the image attachment
carried by profile analysis requests.
"""

import base64
import binascii
import mimetypes
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class CallKind(str, Enum):
    """The three kinds of backend calls astrograph makes."""

    ANALYZE_PROFILE = "analyze_profile"
    GENERATE_QUIZ = "generate_quiz"
    GENERATE_ROADMAP = "generate_roadmap"


class ImageAttachment(BaseModel):
    """
    Binary image sent inline with a profile analysis request.

    Example:
        >>> image = ImageAttachment.from_data_url("data:image/png;base64,iVBORw0KGgo=")
        >>> image.mime_type
        'image/png'
    """

    model_config = ConfigDict(frozen=True)

    data: bytes = Field(..., min_length=1, description="Raw image bytes")
    mime_type: str = Field(default="image/jpeg", description="MIME type of the image")

    @classmethod
    def from_path(cls, path: Path) -> "ImageAttachment":
        """
        Read an image file from disk.

        Raises:
            OSError: If the file cannot be read
        """
        path = Path(path)
        mime_type, _ = mimetypes.guess_type(path.name)
        return cls(data=path.read_bytes(), mime_type=mime_type or "image/jpeg")

    @classmethod
    def from_data_url(cls, url: str) -> "ImageAttachment":
        """
        Decode a base64 `data:` URL as produced by browser file readers.

        Raises:
            ValueError: If the URL is not a base64 data URL
        """
        header, sep, payload = url.partition(",")
        if not sep or not header.startswith("data:") or ";base64" not in header:
            raise ValueError("Expected a base64 data: URL")
        mime_type = header[len("data:"):].split(";", 1)[0] or "image/jpeg"
        try:
            data = base64.b64decode(payload, validate=True)
        except binascii.Error as e:
            raise ValueError(f"Invalid base64 payload: {e}") from e
        return cls(data=data, mime_type=mime_type)


class TokenUsage(BaseModel):
    """Token usage reported by the backend for one call."""

    input_tokens: int = Field(default=0, ge=0, description="Prompt tokens consumed")
    output_tokens: int = Field(default=0, ge=0, description="Tokens generated")

    @property
    def total_tokens(self) -> int:
        """Total tokens consumed (input + output)."""
        return self.input_tokens + self.output_tokens


class GenerationRequest(BaseModel):
    """
    One request to a generative backend.

    The backend must honor response_schema (a JSON schema) and return
    JSON text.
    """

    model_config = ConfigDict(frozen=True)

    kind: CallKind = Field(..., description="Which call this is")
    model: str = Field(..., min_length=1, description="Model identifier")
    prompt: str = Field(..., min_length=1, description="Rendered prompt text")
    image: ImageAttachment | None = Field(default=None, description="Optional inline image")
    response_schema: dict[str, Any] = Field(
        default_factory=dict, description="Expected-output JSON schema"
    )


class GenerationResponse(BaseModel):
    """Raw backend output before parsing and validation."""

    text: str = Field(default="", description="Text returned by the model")
    model: str = Field(default="", description="Model that produced the text")
    usage: TokenUsage = Field(default_factory=TokenUsage, description="Token usage statistics")
    duration_seconds: float = Field(default=0.0, ge=0.0, description="Round-trip time")
