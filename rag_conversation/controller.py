"""ConversationController: sequences one retrieval-augmented send cycle."""

from __future__ import annotations

import logging
from enum import Enum

from rag_conversation.errors import GenerationError, LogError, MalformedResponse, ValidationError
from rag_conversation.generation.base import GenerationBackend
from rag_conversation.knowledge.base import KnowledgeBase
from rag_conversation.log.base import ConversationLog
from rag_conversation.models import (
    ASSISTANT_AUTHOR_ID,
    CycleOutcome,
    CycleStatus,
    NewEntry,
    PromptSpec,
    Sender,
)
from rag_conversation.prompts.composer import compose
from rag_conversation.prompts.templates import DEFAULT_PROMPT
from rag_conversation.session import SessionProvider

logger = logging.getLogger(__name__)

TRANSPORT_ERROR_TEXT = "An error occurred while processing your request. Please try again."
MALFORMED_RESPONSE_TEXT = "Sorry, I couldn't get a response from the AI."


class ControllerState(str, Enum):
    IDLE = "idle"
    SENDING = "sending"


class ConversationController:
    """Run submit cycles against a shared conversation log.

    A cycle appends the user's entry, retrieves a passage, composes the
    prompt, calls the backend, and appends the answer (or an error entry
    when generation fails).  At most one cycle runs at a time; a submit
    that arrives while one is in flight is rejected without side effects.

    Parameters
    ----------
    log : ConversationLog
        Store the entries are appended to.
    sessions : SessionProvider
        Source of the author identity and readiness signal.
    backend : GenerationBackend
        Model endpoint.
    knowledge_base : KnowledgeBase
        Passage retrieval.
    prompt : PromptSpec
        Instruction template.
    """

    def __init__(
        self,
        log: ConversationLog,
        sessions: SessionProvider,
        backend: GenerationBackend,
        knowledge_base: KnowledgeBase,
        *,
        prompt: PromptSpec = DEFAULT_PROMPT,
    ) -> None:
        self._log = log
        self._sessions = sessions
        self._backend = backend
        self._knowledge_base = knowledge_base
        self._prompt = prompt
        self._state = ControllerState.IDLE

    @property
    def state(self) -> ControllerState:
        return self._state

    @property
    def in_flight(self) -> bool:
        return self._state is ControllerState.SENDING

    @property
    def log(self) -> ConversationLog:
        return self._log

    def validate(self, query: str) -> None:
        """Check the submit guard.

        Raises
        ------
        ValidationError
            If the query is blank, a cycle is in flight, or the session or
            log is not ready.
        """
        if not query or not query.strip():
            raise ValidationError("Query is empty")
        if self.in_flight:
            raise ValidationError("A request is already in flight")
        if not self._sessions.ready:
            raise ValidationError("Session is not ready")
        if not self._log.ready:
            raise ValidationError("Conversation log is not ready")

    async def submit(self, query: str) -> CycleOutcome:
        """Run one cycle for *query*.

        Parameters
        ----------
        query : str
            The user's message, stored verbatim.

        Returns
        -------
        CycleOutcome
            ``REJECTED`` when the guard fails (nothing was written),
            ``ANSWERED`` or ``GENERATION_FAILED`` otherwise.

        Raises
        ------
        LogError
            If an append fails.  Entries already committed stay committed.
        """
        try:
            self.validate(query)
        except ValidationError as exc:
            logger.debug("Submit rejected: %s", exc)
            return CycleOutcome(status=CycleStatus.REJECTED, error=exc)

        # Set before the first await so a concurrent submit sees it.
        self._state = ControllerState.SENDING
        try:
            return await self._run_cycle(query)
        finally:
            self._state = ControllerState.IDLE

    async def _run_cycle(self, query: str) -> CycleOutcome:
        session = self._sessions.session
        try:
            user_entry_id = await self._log.append(NewEntry(text=query, sender=Sender.USER, author_id=session.id))
        except LogError:
            logger.error("User entry append failed; cycle aborted")
            raise

        passage = self._knowledge_base.retrieve(query)
        request = compose(query, passage, self._prompt)

        try:
            text = await self._backend.generate(request)
        except GenerationError as exc:
            logger.warning("Generation failed (%s): %s", type(exc).__name__, exc)
            fallback = MALFORMED_RESPONSE_TEXT if isinstance(exc, MalformedResponse) else TRANSPORT_ERROR_TEXT
            error_entry_id = await self._append_assistant(fallback)
            return CycleOutcome(
                status=CycleStatus.GENERATION_FAILED,
                user_entry_id=user_entry_id,
                assistant_entry_id=error_entry_id,
                passage=passage,
                error=exc,
            )

        assistant_entry_id = await self._append_assistant(text)
        logger.info(
            "Answered query chars=%d with_context=%s backend=%s",
            len(query),
            passage is not None,
            self._backend.name,
        )
        return CycleOutcome(
            status=CycleStatus.ANSWERED,
            user_entry_id=user_entry_id,
            assistant_entry_id=assistant_entry_id,
            passage=passage,
            clear_input=True,
        )

    async def _append_assistant(self, text: str) -> str:
        return await self._log.append(NewEntry(text=text, sender=Sender.ASSISTANT, author_id=ASSISTANT_AUTHOR_ID))

    async def aclose(self) -> None:
        """Close the backend and the log."""
        await self._backend.aclose()
        await self._log.aclose()
