"""LiteLLM catch-all backend supporting 100+ LLM providers."""

from __future__ import annotations

import logging
from typing import Any

from rag_conversation.errors import MalformedResponse, TransportFailure
from rag_conversation.generation.base import BackendRegistry, GenerationBackend
from rag_conversation.models import GenerationRequest

logger = logging.getLogger(__name__)

try:
    import litellm

    _HAS_LITELLM = True
    _LITELLM_ERRORS: tuple[type[Exception], ...] = (
        litellm.exceptions.APIError,
        litellm.exceptions.APIConnectionError,
        litellm.exceptions.Timeout,
        litellm.exceptions.RateLimitError,
        litellm.exceptions.ServiceUnavailableError,
        litellm.exceptions.InternalServerError,
        litellm.exceptions.AuthenticationError,
        litellm.exceptions.BadRequestError,
        litellm.exceptions.NotFoundError,
    )
except ImportError:  # pragma: no cover
    _HAS_LITELLM = False
    _LITELLM_ERRORS = ()


@BackendRegistry.register("litellm")
class LiteLLMBackend(GenerationBackend):
    """Backend powered by LiteLLM's unified async completion interface.

    Parameters
    ----------
    model : str
        Model identifier in LiteLLM format
        (e.g. ``"gemini/gemini-2.0-flash"``).
    api_key : str | None
        Provider API key, forwarded as ``api_key``.
    base_url : str | None
        Custom API base, forwarded as ``api_base``.
    timeout_ms : int | None
        Request deadline forwarded to LiteLLM.
    temperature : float
        Sampling temperature.
    max_tokens : int
        Maximum tokens in the response.
    """

    name = "litellm"

    def __init__(
        self,
        model: str = "gemini/gemini-2.0-flash",
        api_key: str | None = None,
        base_url: str | None = None,
        timeout_ms: int | None = None,
        temperature: float = 0.0,
        max_tokens: int = 1024,
    ) -> None:
        if not _HAS_LITELLM:
            msg = "The 'litellm' package is required: pip install litellm"
            raise ImportError(msg)
        self._model = model
        self._api_key = api_key
        self._base_url = base_url
        self._timeout_ms = timeout_ms
        self._temperature = temperature
        self._max_tokens = max_tokens

    async def generate(self, request: GenerationRequest) -> str:
        """Call ``litellm.acompletion`` and return the message content."""
        kwargs: dict[str, Any] = {
            "model": self._model,
            "messages": request.to_messages(),
            "temperature": self._temperature,
            "max_tokens": self._max_tokens,
        }
        if self._api_key:
            kwargs["api_key"] = self._api_key
        if self._base_url:
            kwargs["api_base"] = self._base_url
        if self._timeout_ms:
            kwargs["timeout"] = self._timeout_ms / 1000

        logger.debug("LiteLLM request model=%s messages=%d", kwargs["model"], len(kwargs["messages"]))
        try:
            response = await litellm.acompletion(**kwargs)
        except _LITELLM_ERRORS as exc:
            msg = f"LiteLLM completion failed: {exc}"
            raise TransportFailure(msg) from exc

        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError) as exc:
            raise MalformedResponse("Completion has no choices", response) from exc
        if not content:
            raise MalformedResponse("Completion content is empty", response)
        return content
