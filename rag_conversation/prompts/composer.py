"""Compose the generation request from a prompt spec, passage, and query."""

from __future__ import annotations

import logging
from typing import Any

import jinja2

from rag_conversation.models import GenerationRequest, PromptSpec, Turn
from rag_conversation.prompts.templates import DEFAULT_PROMPT

logger = logging.getLogger(__name__)

SECTION_SEPARATOR = "\n\n"

_env = jinja2.Environment(undefined=jinja2.Undefined, keep_trailing_newline=True, autoescape=False)


def render_template(template: str, variables: dict[str, Any]) -> str:
    """Render a single template string."""
    if not template:
        return ""
    return _env.from_string(template).render(**variables)


def compose(query: str, passage: str | None, spec: PromptSpec = DEFAULT_PROMPT) -> GenerationRequest:
    """Build the single-turn generation request.

    The instruction block is the preamble, then either the retrieved
    passage section or the general-knowledge fallback, then the question
    and the answer cue, each separated by a blank line.

    Parameters
    ----------
    query : str
        The user's question, verbatim.
    passage : str | None
        Retrieved passage, or ``None`` when retrieval found nothing.
    spec : PromptSpec
        Template pieces; defaults to the built-in prompt.

    Returns
    -------
    GenerationRequest
        Exactly one ``user`` turn carrying the full instruction block.
    """
    variables = {"query": query, "passage": passage}
    parts = [render_template(spec.preamble, variables)]
    if passage:
        parts.append(render_template(spec.context_template, variables))
    else:
        parts.append(render_template(spec.fallback, variables))
    parts.append(render_template(spec.question_template, variables))
    parts.append(spec.answer_cue)

    text = SECTION_SEPARATOR.join(parts)
    logger.debug("Composed prompt=%s with_context=%s chars=%d", spec.name, bool(passage), len(text))
    return GenerationRequest(turns=(Turn(role="user", text=text),))
