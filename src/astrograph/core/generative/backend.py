"""
Generative backend protocol and registry.

This module defines the GenerativeBackend protocol that every backend must
implement, so the GenerativeClient can talk to any model provider through
one interface.
"""

from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

from .models import GenerationRequest, GenerationResponse


@runtime_checkable
class GenerativeBackend(Protocol):
    """
    Protocol for generative backend implementations.

    Backends are responsible for:
    - Reporting whether their SDK is importable and configured
    - Submitting one request and returning the raw text plus usage

    Backends never parse or validate the returned text; that is the
    client's job. Backends never retry.
    """

    @property
    def name(self) -> str:
        """Lowercase backend identifier (e.g. 'gemini')."""
        ...

    def is_available(self) -> bool:
        """Return True if the backend can be invoked."""
        ...

    async def generate(self, request: GenerationRequest) -> GenerationResponse:
        """
        Submit one request and wait for the full response.

        Args:
            request: Rendered prompt, optional image and expected-output schema

        Returns:
            GenerationResponse with the raw model text

        Raises:
            Exception: Any transport failure; the client wraps it
        """
        ...


# Backend registry
_backends: dict[str, Callable[..., GenerativeBackend]] = {}


def register_backend(
    name: str,
) -> Callable[[Callable[..., GenerativeBackend]], Callable[..., GenerativeBackend]]:
    """
    Decorator to register a backend implementation.

    Usage:
        @register_backend('gemini')
        class GeminiBackend:
            ...

    Args:
        name: Backend name used in configuration

    Returns:
        Decorator function
    """

    def decorator(backend_class: Callable[..., GenerativeBackend]) -> Callable[..., GenerativeBackend]:
        _backends[name] = backend_class
        return backend_class

    return decorator


def get_backend(name: str, **kwargs: Any) -> GenerativeBackend:
    """
    Instantiate a registered backend by name.

    Args:
        name: Backend name (e.g. 'gemini')
        **kwargs: Constructor arguments (api_key, timeout_seconds, ...)

    Returns:
        GenerativeBackend instance

    Raises:
        ValueError: If no backend is registered under that name
    """
    backend_class = _backends.get(name)
    if backend_class is None:
        available = ", ".join(sorted(_backends)) or "none"
        raise ValueError(f"Backend '{name}' not registered. Available backends: {available}")
    return backend_class(**kwargs)


def list_backends() -> list[str]:
    """Names of all registered backends."""
    return sorted(_backends)
