"""Tests for prompt composition and template loading."""

import pytest

from rag_conversation.models import PromptSpec
from rag_conversation.prompts import DEFAULT_PROMPT, RELEVANT_INFORMATION_HEADER, compose, load_prompt_spec


def test_compose_with_passage_contains_passage_and_query():
    request = compose("What is RAG?", "RAG combines the strengths of retrieval.")
    prompt = request.prompt
    assert "RAG combines the strengths of retrieval." in prompt
    assert "What is RAG?" in prompt
    assert RELEVANT_INFORMATION_HEADER in prompt


def test_compose_without_passage_uses_fallback():
    prompt = compose("What's the weather today?", None).prompt
    assert RELEVANT_INFORMATION_HEADER not in prompt
    assert "No specific relevant information found in the knowledge base." in prompt
    assert "general knowledge" in prompt
    assert "User's question: What's the weather today?" in prompt


def test_compose_exact_layout_with_passage():
    prompt = compose("q?", "ctx").prompt
    expected = (
        DEFAULT_PROMPT.preamble
        + "\n\nHere is some relevant information:\nctx\n\n"
        + "\n\nUser's question: q?"
        + "\n\nAnswer:"
    )
    assert prompt == expected


def test_compose_exact_layout_without_passage():
    prompt = compose("q?", None).prompt
    expected = DEFAULT_PROMPT.preamble + "\n\n" + DEFAULT_PROMPT.fallback + "\n\nUser's question: q?\n\nAnswer:"
    assert prompt == expected


def test_compose_produces_single_user_turn():
    request = compose("hello", "ctx")
    assert len(request.turns) == 1
    assert request.turns[0].role == "user"
    assert request.to_contents() == [{"role": "user", "parts": [{"text": request.prompt}]}]


def test_compose_is_deterministic():
    assert compose("same", "ctx") == compose("same", "ctx")


def test_compose_does_not_evaluate_template_syntax_in_query():
    prompt = compose("what is {{ passage }}?", None).prompt
    assert "User's question: what is {{ passage }}?" in prompt


def test_compose_with_custom_spec():
    spec = PromptSpec(
        name="custom",
        version="2.0",
        preamble="Be brief.",
        context_template="Context: {{ passage }}",
        fallback="No context.",
        question_template="Q: {{ query }}",
        answer_cue="A:",
    )
    assert compose("x", "y", spec).prompt == "Be brief.\n\nContext: y\n\nQ: x\n\nA:"
    assert compose("x", None, spec).prompt == "Be brief.\n\nNo context.\n\nQ: x\n\nA:"


def test_load_prompt_spec_overrides_preamble(tmp_path):
    path = tmp_path / "short.yaml"
    path.write_text('name: short\nversion: 1.1\npreamble: "You answer in one sentence."\n')
    spec = load_prompt_spec(path)
    assert spec.name == "short"
    assert spec.version == "1.1"
    assert spec.preamble == "You answer in one sentence."
    assert spec.context_template == DEFAULT_PROMPT.context_template
    assert spec.answer_cue == "Answer:"


def test_load_prompt_spec_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError, match="Prompt template not found"):
        load_prompt_spec(tmp_path / "missing.yaml")
