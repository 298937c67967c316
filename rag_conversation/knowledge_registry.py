"""Registry for named knowledge corpora."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from rag_conversation.knowledge.defaults import DEFAULT_ITEMS
from rag_conversation.knowledge.keyword import KeywordKnowledgeBase
from rag_conversation.knowledge.loader import items_from_records, load_knowledge_items
from rag_conversation.models import KnowledgeItem

logger = logging.getLogger(__name__)

DEFAULT_KNOWLEDGE_BASE = "default"

_registry: dict[str, Path | tuple[KnowledgeItem, ...]] = {}
_defaults_loaded = False


def _ensure_defaults_loaded() -> None:
    """Lazily register the built-in corpus on first access."""
    global _defaults_loaded
    if not _defaults_loaded:
        _registry.setdefault(DEFAULT_KNOWLEDGE_BASE, DEFAULT_ITEMS)
        _defaults_loaded = True


def register_knowledge_base(
    name: str,
    source: str | Path | Iterable[Mapping[str, Any] | KnowledgeItem],
) -> None:
    """Register a corpus under *name*.

    Parameters
    ----------
    name : str
        Registry key used to look up this corpus.
    source : str | Path | Iterable
        Path to a YAML file of items, or the items themselves.
        Files are read lazily on each load.
    """
    if isinstance(source, (str, Path)):
        _registry[name] = Path(source)
    else:
        _registry[name] = items_from_records(source)
    logger.debug("Registered knowledge base %r", name)


def load_knowledge_base(name: str = DEFAULT_KNOWLEDGE_BASE) -> KeywordKnowledgeBase:
    """Build a knowledge base from the corpus registered under *name*.

    Parameters
    ----------
    name : str
        Registered corpus name.

    Returns
    -------
    KeywordKnowledgeBase

    Raises
    ------
    KeyError
        If *name* is not registered.
    """
    _ensure_defaults_loaded()
    if name not in _registry:
        available = ", ".join(sorted(_registry)) or "(none)"
        msg = f"Knowledge base {name!r} not registered. Available: {available}"
        raise KeyError(msg)
    source = _registry[name]
    items = load_knowledge_items(source) if isinstance(source, Path) else source
    return KeywordKnowledgeBase(items)


def resolve_knowledge_base(
    source: str | Path | Iterable[Mapping[str, Any] | KnowledgeItem] | None,
) -> KeywordKnowledgeBase:
    """Turn a config value into a knowledge base.

    ``None`` selects the default corpus, a registered name selects that
    corpus, an existing file path is loaded as YAML, and anything else is
    treated as an inline list of items.
    """
    if source is None:
        return load_knowledge_base(DEFAULT_KNOWLEDGE_BASE)
    if isinstance(source, (str, Path)):
        _ensure_defaults_loaded()
        if str(source) in _registry:
            return load_knowledge_base(str(source))
        return KeywordKnowledgeBase(load_knowledge_items(source))
    return KeywordKnowledgeBase(items_from_records(source))


def list_knowledge_bases() -> list[str]:
    """Return sorted list of registered knowledge base names.

    Returns
    -------
    list[str]
    """
    _ensure_defaults_loaded()
    return sorted(_registry)


def clear_knowledge_registry() -> None:
    """Reset the registry and defaults flag.

    Intended for use in tests to ensure a clean state.
    """
    global _defaults_loaded
    _registry.clear()
    _defaults_loaded = False
