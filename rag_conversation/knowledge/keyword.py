"""In-memory knowledge base with keyword substring scoring."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from rag_conversation.knowledge.base import KnowledgeBase
from rag_conversation.models import KnowledgeItem

logger = logging.getLogger(__name__)


class KeywordKnowledgeBase(KnowledgeBase):
    """Knowledge base that scores items by keyword hits.

    An item scores one point per keyword found as a substring of the
    lowercased query, plus one point when its lowercased content contains
    the whole lowercased query.  The earliest item with the highest
    nonzero score wins.

    Parameters
    ----------
    items : Iterable[KnowledgeItem]
        Items in declaration order.  Order decides ties.
    """

    name = "keyword"

    def __init__(self, items: Iterable[KnowledgeItem]) -> None:
        self._items: tuple[KnowledgeItem, ...] = tuple(items)
        logger.debug("Keyword knowledge base with %d items", len(self._items))

    @property
    def items(self) -> tuple[KnowledgeItem, ...]:
        return self._items

    def __len__(self) -> int:
        return len(self._items)

    def score(self, item: KnowledgeItem, query: str) -> int:
        """Return the match count of *item* for an already-lowercased query."""
        hits = sum(1 for keyword in item.keywords if keyword in query)
        if query in item.content.lower():
            hits += 1
        return hits

    def best_match(self, query: str) -> tuple[KnowledgeItem | None, int]:
        """Return the winning item and its score.

        Parameters
        ----------
        query : str
            Raw query text.

        Returns
        -------
        tuple[KnowledgeItem | None, int]
            ``(None, 0)`` when no item scores above zero.
        """
        lowered = query.lower()
        best: KnowledgeItem | None = None
        best_score = 0
        for item in self._items:
            current = self.score(item, lowered)
            # Strictly greater: ties keep the earlier item.
            if current > best_score:
                best, best_score = item, current
        return best, best_score

    def retrieve(self, query: str) -> str | None:
        """Return the content of the best-scoring item, or ``None``."""
        item, hits = self.best_match(query)
        if item is None:
            logger.debug("No knowledge match for query (%d chars)", len(query))
            return None
        logger.debug("Matched topic=%r with %d hits", item.topic, hits)
        return item.content
