"""Backend for the ``generateContent`` REST endpoint."""

from __future__ import annotations

import asyncio
import logging

import httpx

from rag_conversation.errors import MalformedResponse, TransportFailure
from rag_conversation.generation.base import BackendRegistry, GenerationBackend
from rag_conversation.generation.parsing import extract_text
from rag_conversation.models import GenerationRequest

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_MODEL = "gemini-2.0-flash"


@BackendRegistry.register("gemini")
class GeminiBackend(GenerationBackend):
    """Backend that POSTs ``contents`` to ``models/{model}:generateContent``.

    Parameters
    ----------
    model : str
        Model identifier (e.g. ``"gemini-2.0-flash"``).
    api_key : str | None
        API key sent as the ``key`` query parameter.
    base_url : str | None
        API root; defaults to the public v1beta endpoint.
    timeout_ms : int | None
        Whole-call deadline.  ``None`` waits indefinitely.
    transport : httpx.AsyncBaseTransport | None
        Custom transport, mainly for tests.
    """

    name = "gemini"

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout_ms: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._model = model
        self._api_key = api_key
        self._timeout_ms = timeout_ms
        self._client = httpx.AsyncClient(
            base_url=(base_url or DEFAULT_BASE_URL).rstrip("/"),
            timeout=None,
            transport=transport,
        )

    @property
    def endpoint(self) -> str:
        return f"/models/{self._model}:generateContent"

    async def generate(self, request: GenerationRequest) -> str:
        """Send *request* and return the first generated text part."""
        payload = {"contents": request.to_contents()}
        params = {"key": self._api_key} if self._api_key else None
        logger.debug("generateContent model=%s turns=%d", self._model, len(request.turns))

        timeout = self._timeout_ms / 1000 if self._timeout_ms else None
        try:
            response = await asyncio.wait_for(
                self._client.post(self.endpoint, json=payload, params=params),
                timeout=timeout,
            )
            response.raise_for_status()
        except asyncio.TimeoutError as exc:
            msg = f"Generation timed out after {self._timeout_ms} ms"
            raise TransportFailure(msg) from exc
        except httpx.HTTPStatusError as exc:
            msg = f"Generation endpoint returned HTTP {exc.response.status_code}"
            raise TransportFailure(msg) from exc
        except httpx.HTTPError as exc:
            msg = f"Generation request failed: {exc}"
            raise TransportFailure(msg) from exc

        try:
            body = response.json()
        except ValueError as exc:
            raise MalformedResponse("Response body is not JSON") from exc
        return extract_text(body)

    async def aclose(self) -> None:
        await self._client.aclose()
