"""Conversation log stores with snapshot subscriptions."""

from rag_conversation.log.base import ConversationLog, Subscription, collection_path, ordered
from rag_conversation.log.memory import InMemoryConversationLog
from rag_conversation.log.sqlite import SQLiteConversationLog

__all__ = [
    "ConversationLog",
    "InMemoryConversationLog",
    "SQLiteConversationLog",
    "Subscription",
    "collection_path",
    "ordered",
]
