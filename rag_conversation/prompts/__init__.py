"""Prompt templates and request composition."""

from rag_conversation.prompts.composer import compose, render_template
from rag_conversation.prompts.templates import DEFAULT_PROMPT, RELEVANT_INFORMATION_HEADER, load_prompt_spec

__all__ = ["DEFAULT_PROMPT", "RELEVANT_INFORMATION_HEADER", "compose", "load_prompt_spec", "render_template"]
