"""Process-local conversation log."""

from __future__ import annotations

import asyncio
import logging
import uuid
from collections.abc import Callable
from datetime import datetime, timezone

from rag_conversation.errors import LogError
from rag_conversation.log.base import ConversationLog, ordered
from rag_conversation.models import ConversationEntry, NewEntry

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryConversationLog(ConversationLog):
    """Conversation log held in memory and shared by every reader in the process.

    Parameters
    ----------
    collection : str | None
        Collection path, used for logging only.
    clock : Callable[[], datetime] | None
        Source of commit timestamps.  Timestamps never go backwards even if
        the clock does.
    """

    name = "memory"

    def __init__(self, collection: str | None = None, clock: Callable[[], datetime] | None = None) -> None:
        super().__init__(collection)
        self._clock = clock or _utcnow
        self._entries: list[ConversationEntry] = []
        self._ready = True

    async def append(self, entry: NewEntry) -> str:
        if not self._ready:
            raise LogError("Conversation log is not open")
        # Yield like a real store round trip would.
        await asyncio.sleep(0)

        timestamp = self._clock()
        if self._entries and timestamp < self._entries[-1].timestamp:
            timestamp = self._entries[-1].timestamp
        committed = ConversationEntry(
            id=uuid.uuid4().hex,
            text=entry.text,
            sender=entry.sender,
            author_id=entry.author_id,
            timestamp=timestamp,
            sequence=len(self._entries) + 1,
        )
        self._entries.append(committed)
        logger.debug("Appended %s entry %s to %s", committed.sender.value, committed.id, self.collection)

        await self._publish()
        return committed.id

    def snapshot(self) -> list[ConversationEntry]:
        return ordered(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
