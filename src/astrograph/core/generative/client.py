"""
Typed request/response wrapper around a generative backend.

The GenerativeClient is the only component that talks to a backend. For
every call it renders the kind's prompt template, submits the request,
parses the returned text as JSON and validates it against the kind's
declarative schema. It never caches, retries or coalesces calls: each
invoke() is one fresh round trip.
"""

import logging
import time
from collections.abc import Mapping
from typing import Any

from astrograph.core.errors import GenerationError, GenerationFailure
from astrograph.utils.logging import AstrographLogger

from .backend import GenerativeBackend
from .models import CallKind, GenerationRequest, ImageAttachment, TokenUsage
from .schemas import get_call_spec, validate_response

logger = logging.getLogger(__name__)


class GenerativeClient:
    """
    Schema-enforcing client for the three astrograph call kinds.

    Example:
        >>> client = GenerativeClient(get_backend("gemini", api_key=key), "gemini-2.5-flash")
        >>> wire = await client.invoke(CallKind.GENERATE_QUIZ, {"context": "...", "question_count": 3})
    """

    def __init__(
        self,
        backend: GenerativeBackend,
        model: str,
        journal: AstrographLogger | None = None,
    ) -> None:
        """
        Args:
            backend: Backend that performs the transport
            model: Model identifier sent with every request
            journal: Optional structured event journal
        """
        self.backend = backend
        self.model = model
        self.journal = journal
        self.usage = TokenUsage()

    def _accumulate(self, usage: TokenUsage) -> None:
        self.usage = TokenUsage(
            input_tokens=self.usage.input_tokens + usage.input_tokens,
            output_tokens=self.usage.output_tokens + usage.output_tokens,
        )

    def _fail(self, error: GenerationError) -> GenerationError:
        logger.warning("%s", error)
        if self.journal:
            self.journal.log_generation_error(
                error.kind.value, error.reason.value, str(error.cause)
            )
        return error

    def build_request(
        self,
        kind: CallKind,
        payload: Mapping[str, Any],
        image: ImageAttachment | None = None,
    ) -> GenerationRequest:
        """
        Render the request for a call without sending it.

        Raises:
            ValueError: If the payload misses a placeholder or an image is
                attached to a kind that does not accept one
        """
        spec = get_call_spec(kind)
        if image is not None and not spec.accepts_image:
            raise ValueError(f"{kind.value} does not accept an image attachment")

        return GenerationRequest(
            kind=kind,
            model=self.model,
            prompt=spec.render(dict(payload)),
            image=image,
            response_schema=spec.json_schema(),
        )

    async def invoke(
        self,
        kind: CallKind,
        payload: Mapping[str, Any],
        image: ImageAttachment | None = None,
    ) -> Any:
        """
        Perform one validated round trip.

        Args:
            kind: Which call to make
            payload: Values for the kind's prompt placeholders
            image: Optional inline image (ANALYZE_PROFILE only)

        Returns:
            The validated wire object for the kind

        Raises:
            GenerationError: On transport, parse or schema failure
        """
        request = self.build_request(kind, payload, image)

        logger.info("Invoking %s on %s", kind.value, self.model)
        if self.journal:
            self.journal.log_generation_start(kind.value, self.model, has_image=image is not None)

        start_time = time.monotonic()
        try:
            response = await self.backend.generate(request)
        except Exception as e:
            raise self._fail(GenerationError(kind, e, GenerationFailure.TRANSPORT)) from e

        self._accumulate(response.usage)

        try:
            result = validate_response(kind, response.text)
        except GenerationError as e:
            self._fail(e)
            raise

        duration = time.monotonic() - start_time
        logger.info("%s completed in %.2fs", kind.value, duration)
        if self.journal:
            self.journal.log_generation_end(
                kind.value,
                duration,
                input_tokens=response.usage.input_tokens,
                output_tokens=response.usage.output_tokens,
            )
        return result
