"""Built-in prompt template and YAML prompt loading."""

from __future__ import annotations

from pathlib import Path

import yaml

from rag_conversation.models import PromptSpec

RELEVANT_INFORMATION_HEADER = "Here is some relevant information:"

DEFAULT_PROMPT = PromptSpec(
    name="rag_answer",
    version="1.0",
    preamble=(
        "You are an AI assistant specialized in explaining concepts related to Generative AI, RAG, "
        "Prompt Engineering, Vector Databases, and related technologies. Answer the user's question "
        "concisely and accurately."
    ),
    context_template=RELEVANT_INFORMATION_HEADER + "\n{{ passage }}\n\n",
    fallback=(
        "No specific relevant information found in the knowledge base. Try to answer based on general "
        "knowledge about AI topics if possible, or state if you don't know."
    ),
    question_template="User's question: {{ query }}",
    answer_cue="Answer:",
)


def load_prompt_spec(path: str | Path) -> PromptSpec:
    """Load a PromptSpec from a YAML file.

    Missing keys fall back to the built-in template, so a file may override
    only the preamble.

    Parameters
    ----------
    path : str | Path
        Path to a YAML prompt template file with any of ``preamble``,
        ``context``, ``fallback``, ``question``, ``answer_cue``.

    Returns
    -------
    PromptSpec

    Raises
    ------
    FileNotFoundError
        If *path* does not exist.
    """
    path = Path(path)
    if not path.exists():
        msg = f"Prompt template not found: {path}"
        raise FileNotFoundError(msg)

    with open(path, encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}

    return PromptSpec(
        name=data.get("name", path.stem),
        version=str(data.get("version", "0.0")),
        preamble=data.get("preamble", DEFAULT_PROMPT.preamble),
        context_template=data.get("context", DEFAULT_PROMPT.context_template),
        fallback=data.get("fallback", DEFAULT_PROMPT.fallback),
        question_template=data.get("question", DEFAULT_PROMPT.question_template),
        answer_cue=data.get("answer_cue", DEFAULT_PROMPT.answer_cue),
    )
