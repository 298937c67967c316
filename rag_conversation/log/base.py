"""Conversation log protocol with full-snapshot subscriptions."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence

from rag_conversation.errors import LogError
from rag_conversation.models import ConversationEntry, NewEntry

logger = logging.getLogger(__name__)

DEFAULT_APP_ID = "default-app-id"

SnapshotCallback = Callable[[list[ConversationEntry]], None]
ErrorCallback = Callable[[LogError], None]


def collection_path(app_id: str = DEFAULT_APP_ID) -> str:
    """Return the shared chat collection path for *app_id*."""
    return f"artifacts/{app_id}/public/data/chat_history"


def ordered(entries: Sequence[ConversationEntry]) -> list[ConversationEntry]:
    """Sort by timestamp ascending, breaking ties by append order."""
    return sorted(entries, key=lambda e: e.sort_key)


class Subscription:
    """Handle returned by :meth:`ConversationLog.subscribe`.

    Calling the handle (or :meth:`unsubscribe`) stops further deliveries.
    """

    def __init__(self, log: ConversationLog, on_change: SnapshotCallback, on_error: ErrorCallback | None) -> None:
        self._log = log
        self.on_change = on_change
        self.on_error = on_error
        self.active = True
        self.delivered = False

    def unsubscribe(self) -> None:
        if self.active:
            self.active = False
            self._log._detach(self)

    __call__ = unsubscribe


class ConversationLog(ABC):
    """Ordered, append-only, server-timestamped conversation store.

    Every commit is pushed to all active subscribers as the complete,
    re-sorted sequence of entries.  Subscribers never receive deltas.

    Parameters
    ----------
    collection : str
        Scoped collection path shared by all sessions.
    """

    name: str = ""

    def __init__(self, collection: str | None = None) -> None:
        self.collection = collection or collection_path()
        self._subscriptions: list[Subscription] = []
        self._ready = False

    @property
    def ready(self) -> bool:
        """Whether the store accepts appends."""
        return self._ready

    async def open(self) -> None:
        """Prepare the store for use."""
        self._ready = True

    async def aclose(self) -> None:
        """Stop background work and drop all subscriptions."""
        for sub in list(self._subscriptions):
            sub.unsubscribe()
        self._ready = False

    @abstractmethod
    async def append(self, entry: NewEntry) -> str:
        """Commit *entry*, assigning an id and a timestamp.

        Parameters
        ----------
        entry : NewEntry
            Text, sender and author of the new entry.

        Returns
        -------
        str
            The assigned entry id.

        Raises
        ------
        LogError
            If the store is unreachable or rejects the write.
        """

    @abstractmethod
    def snapshot(self) -> list[ConversationEntry]:
        """Return the full ordered sequence of committed entries.

        Raises
        ------
        LogError
            If the store cannot be read.
        """

    async def read(self) -> list[ConversationEntry]:
        """Return the snapshot without blocking the event loop.

        Stores doing blocking I/O override this to read off-thread.
        """
        return self.snapshot()

    def subscribe(self, on_change: SnapshotCallback, on_error: ErrorCallback | None = None) -> Subscription:
        """Register *on_change* for snapshot delivery.

        *on_change* is called once with the current snapshot, then after
        every subsequent commit.  In-process stores deliver the initial
        snapshot before returning; stores that read off-thread deliver it
        from a task on the running loop.

        Parameters
        ----------
        on_change : Callable[[list[ConversationEntry]], None]
            Receives the complete ordered entry list.
        on_error : Callable[[LogError], None] | None
            Receives store failures that happen during delivery.

        Returns
        -------
        Subscription
            Call it to unsubscribe.
        """
        sub = Subscription(self, on_change, on_error)
        self._subscriptions.append(sub)
        logger.debug("Subscriber attached to %s", self.collection)
        try:
            self._deliver_initial(sub)
        except LogError:
            sub.unsubscribe()
            raise
        return sub

    def _deliver_initial(self, sub: Subscription) -> None:
        self._deliver(sub, self.snapshot())

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def _detach(self, sub: Subscription) -> None:
        if sub in self._subscriptions:
            self._subscriptions.remove(sub)

    async def _publish(self) -> None:
        """Push the current snapshot to every active subscriber."""
        if not self._subscriptions:
            return
        try:
            entries = await self.read()
        except LogError as exc:
            self._publish_error(exc)
            return
        for sub in list(self._subscriptions):
            self._deliver(sub, entries)

    def _publish_error(self, error: LogError) -> None:
        logger.error("Snapshot delivery failed for %s: %s", self.collection, error)
        for sub in list(self._subscriptions):
            if sub.active and sub.on_error is not None:
                sub.on_error(error)

    def _deliver(self, sub: Subscription, entries: list[ConversationEntry]) -> None:
        if not sub.active:
            return
        sub.delivered = True
        try:
            sub.on_change(list(entries))
        except Exception:
            logger.warning("Subscriber callback raised; continuing delivery", exc_info=True)
