"""SQLite-backed conversation log shared across processes."""

from __future__ import annotations

import asyncio
import logging
import sqlite3
import uuid
from datetime import datetime, timezone
from pathlib import Path

from rag_conversation.errors import LogError
from rag_conversation.log.base import ConversationLog, Subscription
from rag_conversation.models import ConversationEntry, NewEntry, Sender

logger = logging.getLogger(__name__)

_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%f+00:00"

_SCHEMA = """
    CREATE TABLE IF NOT EXISTS chat_history (
        seq INTEGER PRIMARY KEY AUTOINCREMENT,
        id TEXT NOT NULL UNIQUE,
        collection TEXT NOT NULL,
        text TEXT NOT NULL,
        sender TEXT NOT NULL,
        author_id TEXT NOT NULL,
        timestamp TEXT NOT NULL
    )
"""

_INDEX = "CREATE INDEX IF NOT EXISTS idx_chat_history_order ON chat_history (collection, timestamp, seq)"


def _format_ts(value: datetime) -> str:
    return value.astimezone(timezone.utc).strftime(_TIMESTAMP_FORMAT)


def _parse_ts(value: str) -> datetime:
    return datetime.strptime(value, _TIMESTAMP_FORMAT).replace(tzinfo=timezone.utc)


class SQLiteConversationLog(ConversationLog):
    """Conversation log stored in a SQLite file.

    Timestamps are assigned inside the write transaction so they never
    decrease within a collection, whichever process writes.  Other
    processes' commits are picked up by polling the highest sequence number
    and re-published as full snapshots.

    Parameters
    ----------
    path : str | Path
        Database file.  Parent directories are created on :meth:`open`.
    collection : str | None
        Collection path scoping the entries.
    poll_interval_ms : int
        How often to check for commits from other processes.  ``0``
        disables polling.
    """

    name = "sqlite"

    def __init__(self, path: str | Path, collection: str | None = None, poll_interval_ms: int = 500) -> None:
        super().__init__(collection)
        self._path = Path(path)
        self._poll_interval_ms = poll_interval_ms
        self._last_seq = 0
        self._poll_task: asyncio.Task | None = None
        self._initial_tasks: set[asyncio.Task] = set()

    @property
    def path(self) -> Path:
        return self._path

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._path, timeout=5.0, isolation_level=None)
        conn.row_factory = sqlite3.Row
        return conn

    async def open(self) -> None:
        """Create the schema and start polling for external commits."""
        try:
            await asyncio.to_thread(self._init_db)
        except sqlite3.Error as exc:
            msg = f"Cannot open conversation log at {self._path}: {exc}"
            raise LogError(msg) from exc
        self._ready = True
        self._last_seq = await asyncio.to_thread(self._max_seq)
        if self._poll_interval_ms > 0 and self._poll_task is None:
            self._poll_task = asyncio.create_task(self._poll())
        logger.info("Opened SQLite conversation log %s collection=%s", self._path, self.collection)

    async def aclose(self) -> None:
        if self._poll_task is not None:
            self._poll_task.cancel()
            try:
                await self._poll_task
            except asyncio.CancelledError:
                pass
            self._poll_task = None
        for task in list(self._initial_tasks):
            task.cancel()
        await super().aclose()

    def _init_db(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        conn = self._connect()
        try:
            conn.execute(_SCHEMA)
            conn.execute(_INDEX)
        finally:
            conn.close()

    def _max_seq(self) -> int:
        conn = self._connect()
        try:
            row = conn.execute(
                "SELECT COALESCE(MAX(seq), 0) AS seq FROM chat_history WHERE collection = ?",
                (self.collection,),
            ).fetchone()
        finally:
            conn.close()
        return int(row["seq"])

    async def append(self, entry: NewEntry) -> str:
        if not self._ready:
            raise LogError("Conversation log is not open")
        try:
            entry_id, seq = await asyncio.to_thread(self._insert, entry)
        except sqlite3.Error as exc:
            msg = f"Append to {self.collection} failed: {exc}"
            raise LogError(msg) from exc
        self._last_seq = max(self._last_seq, seq)
        logger.debug("Appended %s entry %s to %s", entry.sender.value, entry_id, self.collection)
        await self._publish()
        return entry_id

    def _insert(self, entry: NewEntry) -> tuple[str, int]:
        conn = self._connect()
        try:
            conn.execute("BEGIN IMMEDIATE")
            row = conn.execute(
                "SELECT MAX(timestamp) AS ts FROM chat_history WHERE collection = ?",
                (self.collection,),
            ).fetchone()
            now = _format_ts(datetime.now(timezone.utc))
            timestamp = max(now, row["ts"]) if row["ts"] else now
            entry_id = uuid.uuid4().hex
            cur = conn.execute(
                """
                INSERT INTO chat_history (id, collection, text, sender, author_id, timestamp)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (entry_id, self.collection, entry.text, entry.sender.value, entry.author_id, timestamp),
            )
            conn.execute("COMMIT")
            return entry_id, int(cur.lastrowid)
        except sqlite3.Error:
            if conn.in_transaction:
                conn.execute("ROLLBACK")
            raise
        finally:
            conn.close()

    def snapshot(self) -> list[ConversationEntry]:
        try:
            conn = self._connect()
            try:
                rows = conn.execute(
                    """
                    SELECT seq, id, text, sender, author_id, timestamp FROM chat_history
                    WHERE collection = ? ORDER BY timestamp ASC, seq ASC
                    """,
                    (self.collection,),
                ).fetchall()
            finally:
                conn.close()
        except sqlite3.Error as exc:
            msg = f"Read of {self.collection} failed: {exc}"
            raise LogError(msg) from exc

        return [
            ConversationEntry(
                id=row["id"],
                text=row["text"],
                sender=Sender(row["sender"]),
                author_id=row["author_id"],
                timestamp=_parse_ts(row["timestamp"]),
                sequence=row["seq"],
            )
            for row in rows
        ]

    async def read(self) -> list[ConversationEntry]:
        return await asyncio.to_thread(self.snapshot)

    def _deliver_initial(self, sub: Subscription) -> None:
        task = asyncio.get_running_loop().create_task(self._send_initial(sub))
        self._initial_tasks.add(task)
        task.add_done_callback(self._initial_tasks.discard)

    async def _send_initial(self, sub: Subscription) -> None:
        try:
            entries = await self.read()
        except LogError as exc:
            logger.error("Initial snapshot failed for %s: %s", self.collection, exc)
            if sub.active and sub.on_error is not None:
                sub.on_error(exc)
            return
        # A commit published meanwhile already carried a newer snapshot.
        if not sub.delivered:
            self._deliver(sub, entries)

    async def _poll(self) -> None:
        interval = self._poll_interval_ms / 1000
        while True:
            await asyncio.sleep(interval)
            try:
                seq = await asyncio.to_thread(self._max_seq)
            except sqlite3.Error as exc:
                self._publish_error(LogError(f"Polling {self.collection} failed: {exc}"))
                continue
            if seq != self._last_seq:
                self._last_seq = seq
                await self._publish()
