"""Extract generated text from ``generateContent`` response bodies."""

from __future__ import annotations

from typing import Any

from rag_conversation.errors import MalformedResponse


def extract_text(payload: Any) -> str:
    """Return ``candidates[0].content.parts[0].text`` from *payload*.

    Parameters
    ----------
    payload : Any
        Decoded JSON response body.

    Returns
    -------
    str

    Raises
    ------
    MalformedResponse
        If any level of the expected structure is missing or empty.
    """
    try:
        candidates = payload["candidates"]
        if not candidates:
            raise MalformedResponse("Response has no candidates", payload)
        parts = candidates[0]["content"]["parts"]
        if not parts:
            raise MalformedResponse("First candidate has no parts", payload)
        text = parts[0]["text"]
    except (KeyError, IndexError, TypeError) as exc:
        msg = f"Unexpected response structure: missing {exc}"
        raise MalformedResponse(msg, payload) from exc

    if not isinstance(text, str):
        raise MalformedResponse("First part text is not a string", payload)
    return text
