"""Abstract knowledge base protocol."""

from __future__ import annotations

from abc import ABC, abstractmethod


class KnowledgeBase(ABC):
    """Retrieval interface for supporting passages."""

    name: str = ""

    @abstractmethod
    def retrieve(self, query: str) -> str | None:
        """Return the single best passage for the query.

        Parameters
        ----------
        query : str
            The user's question, as typed.

        Returns
        -------
        str | None
            The winning passage verbatim, or ``None`` when nothing matches.
        """
