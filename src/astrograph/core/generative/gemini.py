"""
Gemini backend implementation.

Talks to Google's Gemini API through the google-genai SDK's async client,
asking for JSON output constrained by the request's response schema.
"""

import logging
import time

from google import genai
from google.genai import types

from .backend import register_backend
from .models import GenerationRequest, GenerationResponse, TokenUsage

logger = logging.getLogger(__name__)


@register_backend("gemini")
class GeminiBackend:
    """
    Gemini backend.

    - JSON mode via response_mime_type="application/json"
    - Expected-output schema via response_json_schema
    - Inline image bytes as an extra content part
    - Token usage from usage_metadata
    """

    def __init__(self, api_key: str, timeout_seconds: float | None = None) -> None:
        """
        Create the SDK client.

        Args:
            api_key: Gemini API key
            timeout_seconds: Optional per-request timeout
        """
        http_options = None
        if timeout_seconds is not None:
            # google-genai expects milliseconds
            http_options = types.HttpOptions(timeout=int(timeout_seconds * 1000))
        self._has_key = bool(api_key and api_key.strip())
        self._client = genai.Client(api_key=api_key, http_options=http_options)

    @property
    def name(self) -> str:
        return "gemini"

    def is_available(self) -> bool:
        """True when the client was created with a non-blank API key."""
        return self._has_key

    def _build_contents(self, request: GenerationRequest) -> list[types.Part]:
        parts = [types.Part.from_text(text=request.prompt)]
        if request.image is not None:
            parts.append(
                types.Part.from_bytes(data=request.image.data, mime_type=request.image.mime_type)
            )
        return parts

    async def generate(self, request: GenerationRequest) -> GenerationResponse:
        start_time = time.monotonic()
        config = types.GenerateContentConfig(
            response_mime_type="application/json",
            response_json_schema=request.response_schema or None,
        )

        logger.debug(
            "Gemini request kind=%s model=%s image=%s",
            request.kind.value,
            request.model,
            request.image is not None,
        )
        response = await self._client.aio.models.generate_content(
            model=request.model,
            contents=self._build_contents(request),
            config=config,
        )
        duration = time.monotonic() - start_time

        usage = TokenUsage()
        if metadata := response.usage_metadata:
            usage = TokenUsage(
                input_tokens=metadata.prompt_token_count or 0,
                output_tokens=metadata.candidates_token_count or 0,
            )

        return GenerationResponse(
            text=response.text or "",
            model=request.model,
            usage=usage,
            duration_seconds=duration,
        )
