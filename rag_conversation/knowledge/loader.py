"""Load knowledge items from YAML files or raw mappings."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

import yaml

from rag_conversation.models import KnowledgeItem

logger = logging.getLogger(__name__)


def items_from_records(records: Iterable[Mapping[str, Any] | KnowledgeItem]) -> tuple[KnowledgeItem, ...]:
    """Convert dict records into :class:`KnowledgeItem` objects.

    Parameters
    ----------
    records : Iterable[Mapping | KnowledgeItem]
        Each record needs ``topic``, ``keywords`` and ``content``.
        Ready-made items pass through unchanged.

    Returns
    -------
    tuple[KnowledgeItem, ...]

    Raises
    ------
    ValueError
        If a record is missing a field or has no keywords.
    """
    items: list[KnowledgeItem] = []
    for index, record in enumerate(records):
        if isinstance(record, KnowledgeItem):
            items.append(record)
            continue
        missing = [key for key in ("topic", "keywords", "content") if key not in record]
        if missing:
            msg = f"Knowledge record #{index} is missing: {', '.join(missing)}"
            raise ValueError(msg)
        keywords = record["keywords"]
        if isinstance(keywords, str):
            keywords = [k.strip() for k in keywords.split(",") if k.strip()]
        items.append(
            KnowledgeItem(
                topic=str(record["topic"]),
                keywords=tuple(str(k) for k in keywords),
                content=str(record["content"]),
            )
        )
    return tuple(items)


def load_knowledge_items(path: str | Path) -> tuple[KnowledgeItem, ...]:
    """Load knowledge items from a YAML file.

    The file holds either a top-level list of records or a mapping with an
    ``items`` list.

    Parameters
    ----------
    path : str | Path
        YAML file path.

    Returns
    -------
    tuple[KnowledgeItem, ...]

    Raises
    ------
    FileNotFoundError
        If *path* does not exist.
    """
    path = Path(path)
    if not path.is_file():
        msg = f"Knowledge file not found: {path}"
        raise FileNotFoundError(msg)

    with open(path, encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or []
    if isinstance(data, dict):
        data = data.get("items", [])

    items = items_from_records(data)
    logger.debug("Loaded %d knowledge items from %s", len(items), path)
    return items
