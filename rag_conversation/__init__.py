"""Retrieval-augmented conversation pipeline with a shared, ordered log."""

from rag_conversation.api import ask, build_controller
from rag_conversation.config import ChatConfig, load_config
from rag_conversation.controller import ControllerState, ConversationController
from rag_conversation.errors import GenerationError, LogError, MalformedResponse, TransportFailure, ValidationError
from rag_conversation.knowledge_registry import list_knowledge_bases, register_knowledge_base
from rag_conversation.models import ConversationEntry, CycleOutcome, CycleStatus, KnowledgeItem, Sender, Session
from rag_conversation.prompts import compose

__all__ = [
    "ChatConfig",
    "ControllerState",
    "ConversationController",
    "ConversationEntry",
    "CycleOutcome",
    "CycleStatus",
    "GenerationError",
    "KnowledgeItem",
    "LogError",
    "MalformedResponse",
    "Sender",
    "Session",
    "TransportFailure",
    "ValidationError",
    "ask",
    "build_controller",
    "compose",
    "list_knowledge_bases",
    "load_config",
    "register_knowledge_base",
]
