"""Data models shared across the retrieval, generation, and log layers."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

ASSISTANT_AUTHOR_ID = "AI"


class Sender(str, Enum):
    """Who produced a conversation entry."""

    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class KnowledgeItem:
    """A single topic of the knowledge base.

    Parameters
    ----------
    topic : str
        Human-readable topic title.
    keywords : tuple[str, ...]
        Trigger phrases matched as substrings of the query.  Stored
        lowercased.
    content : str
        Passage returned verbatim when this item wins retrieval.
    """

    topic: str
    keywords: tuple[str, ...]
    content: str

    def __post_init__(self) -> None:
        if not self.keywords:
            msg = f"Knowledge item {self.topic!r} must declare at least one keyword"
            raise ValueError(msg)
        # Accept lists from YAML but keep the stored value immutable.
        object.__setattr__(self, "keywords", tuple(k.lower() for k in self.keywords))


@dataclass(frozen=True)
class Turn:
    """One role-tagged text turn sent to the generation endpoint."""

    role: str
    text: str


@dataclass(frozen=True)
class GenerationRequest:
    """Payload handed to a generation backend.

    Parameters
    ----------
    turns : tuple[Turn, ...]
        Ordered turns; the composer always produces exactly one user turn.
    """

    turns: tuple[Turn, ...]

    @property
    def prompt(self) -> str:
        """Text of the first turn (the composed instruction block)."""
        return self.turns[0].text if self.turns else ""

    def to_contents(self) -> list[dict]:
        """Render as a ``generateContent`` ``contents`` list."""
        return [{"role": t.role, "parts": [{"text": t.text}]} for t in self.turns]

    def to_messages(self) -> list[dict[str, str]]:
        """Render as chat-completion ``role`` / ``content`` messages."""
        return [{"role": t.role, "content": t.text} for t in self.turns]


@dataclass(frozen=True)
class NewEntry:
    """An entry as submitted to the log, before id and timestamp exist."""

    text: str
    sender: Sender
    author_id: str


@dataclass(frozen=True)
class ConversationEntry:
    """A committed, immutable conversation entry.

    Parameters
    ----------
    id : str
        Opaque identifier assigned by the log.
    text : str
        Message body.
    sender : Sender
        ``user`` or ``assistant``.
    author_id : str
        Session identity, or ``"AI"`` for generated entries.
    timestamp : datetime
        Commit time assigned by the log store.
    sequence : int
        Append order, used to break timestamp ties.
    """

    id: str
    text: str
    sender: Sender
    author_id: str
    timestamp: datetime
    sequence: int = 0

    @property
    def sort_key(self) -> tuple[datetime, int]:
        return (self.timestamp, self.sequence)


@dataclass(frozen=True)
class Session:
    """Opaque identity plus readiness, supplied by the session provider."""

    id: str
    ready: bool = True


class CycleStatus(str, Enum):
    """How a submit request ended."""

    REJECTED = "rejected"
    ANSWERED = "answered"
    GENERATION_FAILED = "generation_failed"


@dataclass
class CycleOutcome:
    """Result of :meth:`ConversationController.submit`.

    Parameters
    ----------
    status : CycleStatus
        Final status of the cycle.
    user_entry_id : str | None
        Id of the appended user entry, if any.
    assistant_entry_id : str | None
        Id of the appended assistant or error entry, if any.
    passage : str | None
        Retrieved passage used for the prompt.
    error : Exception | None
        Rejection reason or generation failure.
    clear_input : bool
        Whether the caller should clear its local input buffer.
    """

    status: CycleStatus
    user_entry_id: str | None = None
    assistant_entry_id: str | None = None
    passage: str | None = None
    error: Exception | None = None
    clear_input: bool = False

    @property
    def accepted(self) -> bool:
        return self.status is not CycleStatus.REJECTED


@dataclass(frozen=True)
class PromptSpec:
    """Template pieces for the retrieval-augmented instruction block.

    Parameters
    ----------
    name : str
        Unique prompt identifier.
    version : str
        Version string.
    preamble : str
        Jinja2 template for the persona and scope statement.
    context_template : str
        Jinja2 template used when a passage was retrieved (``passage``).
    fallback : str
        Jinja2 template used when nothing was retrieved.
    question_template : str
        Jinja2 template carrying the user's question (``query``).
    answer_cue : str
        Trailing cue that ends the instruction block.
    """

    name: str
    version: str
    preamble: str
    context_template: str
    fallback: str
    question_template: str
    answer_cue: str = "Answer:"
