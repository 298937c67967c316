"""Exception taxonomy for the conversation pipeline."""

from __future__ import annotations


class RagConversationError(Exception):
    """Base class for all errors raised by this package."""


class ValidationError(RagConversationError):
    """A submit request was rejected before any side effect.

    Raised for empty queries, a session that is not ready yet, or a
    controller that is already sending.
    """


class LogError(RagConversationError):
    """The conversation log could not append or deliver entries."""


class GenerationError(RagConversationError):
    """The generation endpoint did not produce usable text."""


class TransportFailure(GenerationError):
    """Network error, timeout, or non-2xx response from the endpoint."""


class MalformedResponse(GenerationError):
    """The endpoint answered but the payload had no generated text.

    Parameters
    ----------
    message : str
        Human-readable description.
    payload : object
        The decoded response body, kept for diagnostics.
    """

    def __init__(self, message: str, payload: object = None) -> None:
        super().__init__(message)
        self.payload = payload
