"""Generation backends: the endpoint contract, the name registry, and response parsing."""

import importlib
import logging

from rag_conversation.generation.base import BackendRegistry, GenerationBackend
from rag_conversation.generation.parsing import extract_text

__all__ = ["BackendRegistry", "GenerationBackend", "extract_text"]

logger = logging.getLogger(__name__)

_BUILTIN_BACKENDS = ("gemini_backend", "litellm_backend")


def _load_builtin_backends() -> None:
    # A backend whose module fails to import is left unregistered.
    for module in _BUILTIN_BACKENDS:
        try:
            importlib.import_module(f"{__name__}.{module}")
        except ImportError as exc:
            logger.debug("Generation backend %s unavailable: %s", module, exc)


_load_builtin_backends()
