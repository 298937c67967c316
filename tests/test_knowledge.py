"""Tests for keyword retrieval."""

import pytest

from rag_conversation.knowledge import DEFAULT_ITEMS, KeywordKnowledgeBase
from rag_conversation.models import KnowledgeItem


def _content(topic):
    return next(item.content for item in DEFAULT_ITEMS if item.topic == topic)


def test_keyword_match_returns_item_content(knowledge_base):
    passage = knowledge_base.retrieve("What is RAG?")
    assert passage == _content("RAG (Retrieval-Augmented Generation)")
    assert passage.startswith("RAG combines the strengths")


def test_match_is_case_insensitive(knowledge_base):
    assert knowledge_base.retrieve("Tell me about STREAMLIT") == _content("Streamlit Deployment")


def test_no_match_returns_none(knowledge_base):
    assert knowledge_base.retrieve("What's the weather today?") is None


def test_higher_count_wins_over_earlier_item(knowledge_base):
    # one RAG keyword against two vector database keywords
    passage = knowledge_base.retrieve("rag and vector databases with embeddings")
    assert passage == _content("Vector Databases")


def test_content_substring_counts_as_match(knowledge_base):
    passage = knowledge_base.retrieve("retrieving relevant information")
    assert passage == _content("RAG (Retrieval-Augmented Generation)")


def test_tie_keeps_earlier_item():
    kb = KeywordKnowledgeBase(
        [
            KnowledgeItem(topic="first", keywords=("alpha",), content="first passage"),
            KnowledgeItem(topic="second", keywords=("alpha",), content="second passage"),
        ]
    )
    assert kb.retrieve("tell me about alpha") == "first passage"


def test_keyword_substring_inside_word_matches():
    kb = KeywordKnowledgeBase([KnowledgeItem(topic="t", keywords=("rag",), content="passage")])
    assert kb.retrieve("average storage") == "passage"


def test_best_match_reports_score():
    kb = KeywordKnowledgeBase(
        [KnowledgeItem(topic="t", keywords=("alpha", "beta"), content="alpha beta gamma")]
    )
    item, hits = kb.best_match("alpha beta")
    assert item.topic == "t"
    assert hits == 3


def test_empty_knowledge_base_returns_none():
    kb = KeywordKnowledgeBase([])
    assert len(kb) == 0
    assert kb.retrieve("anything") is None


def test_default_corpus_order():
    topics = [item.topic for item in DEFAULT_ITEMS]
    assert len(topics) == 9
    assert topics[0] == "Generative AI"
    assert topics[-1] == "AI Clone Purpose"


def test_item_requires_keywords():
    with pytest.raises(ValueError, match="at least one keyword"):
        KnowledgeItem(topic="empty", keywords=(), content="x")


def test_item_keywords_stored_as_tuple():
    item = KnowledgeItem(topic="t", keywords=["a", "b"], content="x")
    assert item.keywords == ("a", "b")


def test_mixed_case_keywords_are_lowercased():
    item = KnowledgeItem(topic="t", keywords=["Streamlit", "LLaMA 3"], content="x")
    assert item.keywords == ("streamlit", "llama 3")


def test_custom_corpus_with_capitalized_keyword_matches():
    kb = KeywordKnowledgeBase(
        [KnowledgeItem(topic="S", keywords=("Streamlit",), content="deploy passage")]
    )
    assert kb.retrieve("how do I deploy with streamlit") == "deploy passage"
    assert kb.retrieve("STREAMLIT hosting") == "deploy passage"
