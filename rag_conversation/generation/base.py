"""Abstract generation backend and registry."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

from rag_conversation.models import GenerationRequest

logger = logging.getLogger(__name__)


class GenerationBackend(ABC):
    """Model endpoint that turns a composed request into text.

    Subclasses must set ``name`` and implement ``generate``.
    """

    name: str = ""

    @abstractmethod
    async def generate(self, request: GenerationRequest) -> str:
        """Return the first generated text part for *request*.

        Parameters
        ----------
        request : GenerationRequest
            Role-tagged turns to send.

        Returns
        -------
        str
            The generated text.

        Raises
        ------
        TransportFailure
            Network error, timeout, or non-2xx status.
        MalformedResponse
            The response carried no generated text.
        """

    async def aclose(self) -> None:
        """Release network resources held by the backend."""


class BackendRegistry:
    """Name-to-class table consulted by :func:`rag_conversation.api.build_backend`.

    Configuration refers to backends by name (``backend.type``).  Concrete
    modules add themselves at import time with :meth:`register`.
    """

    _backends: dict[str, type[GenerationBackend]] = {}

    @classmethod
    def register(cls, name: str):
        """Class decorator adding a :class:`GenerationBackend` under *name*.

        Registering a different class under a taken name is an error;
        re-registering the same class is a no-op.
        """

        def decorator(klass: type[GenerationBackend]) -> type[GenerationBackend]:
            if not issubclass(klass, GenerationBackend):
                msg = f"{klass.__name__} is not a GenerationBackend"
                raise TypeError(msg)
            existing = cls._backends.get(name)
            if existing is not None and existing is not klass:
                msg = f"Backend name {name!r} already taken by {existing.__name__}"
                raise ValueError(msg)
            cls._backends[name] = klass
            logger.debug("Registered generation backend %s -> %s", name, klass.__name__)
            return klass

        return decorator

    @classmethod
    def unregister(cls, name: str) -> None:
        cls._backends.pop(name, None)

    @classmethod
    def create(cls, name: str, **kwargs: Any) -> GenerationBackend:
        """Build the backend registered as *name* with constructor *kwargs*.

        Raises
        ------
        KeyError
            If *name* is not registered.  The message lists what is.
        """
        try:
            klass = cls._backends[name]
        except KeyError:
            available = ", ".join(sorted(cls._backends)) or "(none)"
            msg = f"Unknown backend {name!r}. Available: {available}"
            raise KeyError(msg) from None
        return klass(**kwargs)

    @classmethod
    def available(cls) -> list[str]:
        return sorted(cls._backends)
