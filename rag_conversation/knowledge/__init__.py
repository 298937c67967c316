"""Knowledge base abstraction and keyword retrieval."""

from rag_conversation.knowledge.base import KnowledgeBase
from rag_conversation.knowledge.defaults import DEFAULT_ITEMS
from rag_conversation.knowledge.keyword import KeywordKnowledgeBase
from rag_conversation.knowledge.loader import items_from_records, load_knowledge_items

__all__ = ["DEFAULT_ITEMS", "KeywordKnowledgeBase", "KnowledgeBase", "items_from_records", "load_knowledge_items"]
