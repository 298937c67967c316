"""Package-level entry points: build_controller() and ask()."""

from __future__ import annotations

import logging
from pathlib import Path

from rag_conversation.config import BackendConfig, ChatConfig, LogConfig, load_config
from rag_conversation.controller import ConversationController
from rag_conversation.generation import BackendRegistry
from rag_conversation.generation.base import GenerationBackend
from rag_conversation.knowledge_registry import resolve_knowledge_base
from rag_conversation.log.base import ConversationLog
from rag_conversation.log.memory import InMemoryConversationLog
from rag_conversation.log.sqlite import SQLiteConversationLog
from rag_conversation.models import ConversationEntry, CycleOutcome
from rag_conversation.prompts.templates import DEFAULT_PROMPT, load_prompt_spec
from rag_conversation.session import SessionProvider

logger = logging.getLogger(__name__)


def build_log(config: LogConfig) -> ConversationLog:
    """Instantiate the conversation log described by *config*."""
    if config.type == "sqlite":
        return SQLiteConversationLog(
            config.path,
            collection=config.collection,
            poll_interval_ms=config.poll_interval_ms,
        )
    return InMemoryConversationLog(collection=config.collection)


def build_backend(config: BackendConfig) -> GenerationBackend:
    """Instantiate the registered backend described by *config*."""
    return BackendRegistry.create(config.type, **config.backend_kwargs())


async def build_controller(
    config: ChatConfig | dict | str | Path | None = None,
    *,
    sessions: SessionProvider | None = None,
    log: ConversationLog | None = None,
    backend: GenerationBackend | None = None,
) -> ConversationController:
    """Assemble and open a controller from configuration.

    Collaborators passed explicitly take precedence over the configured
    ones.  The log is opened before returning; the session provider is
    returned as is, so callers decide when to sign in.

    Parameters
    ----------
    config : ChatConfig | dict | str | Path | None
        A ``ChatConfig``, a dict, a YAML file path, or ``None`` for
        defaults plus environment overrides.
    sessions : SessionProvider | None
        Identity source; a fresh provider when omitted.
    log : ConversationLog | None
        Log override.
    backend : GenerationBackend | None
        Backend override.

    Returns
    -------
    ConversationController
    """
    if not isinstance(config, ChatConfig):
        config = load_config(config)

    if log is None:
        log = build_log(config.log)
    if backend is None:
        backend = build_backend(config.backend)
    knowledge_base = resolve_knowledge_base(config.knowledge_base)
    prompt = load_prompt_spec(config.prompt) if config.prompt else DEFAULT_PROMPT

    await log.open()
    logger.info(
        "Controller ready backend=%s log=%s collection=%s knowledge_items=%d",
        backend.name,
        log.name,
        log.collection,
        len(knowledge_base),
    )
    return ConversationController(
        log,
        sessions if sessions is not None else SessionProvider(),
        backend,
        knowledge_base,
        prompt=prompt,
    )


async def ask(
    query: str,
    config: ChatConfig | dict | str | Path | None = None,
    *,
    token: str | None = None,
    backend: GenerationBackend | None = None,
) -> tuple[CycleOutcome, list[ConversationEntry]]:
    """Run a single cycle and return its outcome with the final snapshot.

    Parameters
    ----------
    query : str
        The user's question.
    config : ChatConfig | dict | str | Path | None
        Configuration source.
    token : str | None
        Session identity; anonymous when omitted.
    backend : GenerationBackend | None
        Backend override.

    Returns
    -------
    tuple[CycleOutcome, list[ConversationEntry]]
    """
    sessions = SessionProvider()
    controller = await build_controller(config, sessions=sessions, backend=backend)
    try:
        await sessions.sign_in(token)
        outcome = await controller.submit(query)
        return outcome, await controller.log.read()
    finally:
        await controller.aclose()
