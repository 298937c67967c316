"""Tests for ConversationController cycles."""

import asyncio

import pytest

from rag_conversation.controller import (
    MALFORMED_RESPONSE_TEXT,
    TRANSPORT_ERROR_TEXT,
    ControllerState,
    ConversationController,
)
from rag_conversation.errors import LogError, MalformedResponse, TransportFailure, ValidationError
from rag_conversation.models import CycleStatus, Sender
from rag_conversation.prompts import RELEVANT_INFORMATION_HEADER
from rag_conversation.session import SessionProvider

from .conftest import FailingLog, FakeBackend, GatedBackend


@pytest.mark.asyncio
async def test_answered_cycle_appends_user_then_assistant(controller, log, backend):
    outcome = await controller.submit("What is RAG?")

    assert outcome.status is CycleStatus.ANSWERED
    assert outcome.clear_input is True
    entries = log.snapshot()
    assert [(e.sender, e.text) for e in entries] == [
        (Sender.USER, "What is RAG?"),
        (Sender.ASSISTANT, "model answer"),
    ]
    assert entries[0].author_id == "session-1234abcd"
    assert entries[1].author_id == "AI"
    assert outcome.user_entry_id == entries[0].id
    assert outcome.assistant_entry_id == entries[1].id
    assert "RAG combines the strengths" in backend.requests[0].prompt
    assert controller.state is ControllerState.IDLE


@pytest.mark.asyncio
async def test_unmatched_query_uses_fallback_prompt(controller, log, backend):
    outcome = await controller.submit("What's the weather today?")

    assert outcome.passage is None
    prompt = backend.requests[0].prompt
    assert RELEVANT_INFORMATION_HEADER not in prompt
    assert "general knowledge" in prompt
    assert len(log) == 2


@pytest.mark.parametrize("query", ["", "   ", "\n\t"])
@pytest.mark.asyncio
async def test_blank_query_rejected_without_side_effects(controller, log, backend, query):
    outcome = await controller.submit(query)

    assert outcome.status is CycleStatus.REJECTED
    assert isinstance(outcome.error, ValidationError)
    assert len(log) == 0
    assert backend.requests == []


@pytest.mark.asyncio
async def test_not_ready_session_rejected(log, backend, knowledge_base):
    sessions = SessionProvider()
    controller = ConversationController(log, sessions, backend, knowledge_base)

    outcome = await controller.submit("What is RAG?")
    assert outcome.status is CycleStatus.REJECTED
    assert len(log) == 0

    await sessions.sign_in()
    outcome = await controller.submit("What is RAG?")
    assert outcome.status is CycleStatus.ANSWERED


@pytest.mark.asyncio
async def test_not_ready_log_rejected(sessions, backend, knowledge_base, tmp_path):
    from rag_conversation.log import SQLiteConversationLog

    log = SQLiteConversationLog(tmp_path / "chat.db", poll_interval_ms=0)
    controller = ConversationController(log, sessions, backend, knowledge_base)
    outcome = await controller.submit("What is RAG?")
    assert outcome.status is CycleStatus.REJECTED
    assert backend.requests == []


@pytest.mark.asyncio
async def test_second_submit_while_sending_is_rejected(log, sessions, knowledge_base):
    backend = GatedBackend("first answer")
    controller = ConversationController(log, sessions, backend, knowledge_base)

    first = asyncio.create_task(controller.submit("What is RAG?"))
    await backend.started.wait()
    assert controller.state is ControllerState.SENDING

    second = await controller.submit("What is chunking?")
    assert second.status is CycleStatus.REJECTED
    assert len(log) == 1

    backend.release.set()
    outcome = await first
    assert outcome.status is CycleStatus.ANSWERED
    assert [e.text for e in log.snapshot()] == ["What is RAG?", "first answer"]
    assert len(backend.requests) == 1
    assert controller.state is ControllerState.IDLE


@pytest.mark.asyncio
async def test_concurrent_submits_before_first_await(controller, log):
    results = await asyncio.gather(controller.submit("What is RAG?"), controller.submit("What is RAG?"))

    statuses = sorted(r.status.value for r in results)
    assert statuses == ["answered", "rejected"]
    assert len(log) == 2


@pytest.mark.asyncio
async def test_transport_failure_appends_error_entry(log, sessions, knowledge_base):
    backend = FakeBackend(error=TransportFailure("connection reset"))
    controller = ConversationController(log, sessions, backend, knowledge_base)

    outcome = await controller.submit("What is RAG?")

    assert outcome.status is CycleStatus.GENERATION_FAILED
    assert isinstance(outcome.error, TransportFailure)
    assert outcome.clear_input is False
    entries = log.snapshot()
    assert len(entries) == 2
    assert entries[1].sender is Sender.ASSISTANT
    assert entries[1].author_id == "AI"
    assert entries[1].text == TRANSPORT_ERROR_TEXT
    assert controller.state is ControllerState.IDLE


@pytest.mark.asyncio
async def test_malformed_response_appends_apology(log, sessions, knowledge_base):
    backend = FakeBackend(error=MalformedResponse("no candidates"))
    controller = ConversationController(log, sessions, backend, knowledge_base)

    outcome = await controller.submit("What is RAG?")

    assert outcome.status is CycleStatus.GENERATION_FAILED
    assert log.snapshot()[-1].text == MALFORMED_RESPONSE_TEXT


@pytest.mark.asyncio
async def test_user_append_failure_aborts_cycle(sessions, knowledge_base):
    log = FailingLog(fail_after=0)
    backend = FakeBackend()
    controller = ConversationController(log, sessions, backend, knowledge_base)

    with pytest.raises(LogError):
        await controller.submit("What is RAG?")

    assert backend.requests == []
    assert len(log) == 0
    assert controller.state is ControllerState.IDLE


@pytest.mark.asyncio
async def test_assistant_append_failure_keeps_user_entry(sessions, knowledge_base):
    log = FailingLog(fail_after=1)
    controller = ConversationController(log, sessions, FakeBackend(), knowledge_base)

    with pytest.raises(LogError):
        await controller.submit("What is RAG?")

    assert [e.text for e in log.snapshot()] == ["What is RAG?"]
    assert controller.state is ControllerState.IDLE
    # not stuck in SENDING: the next submit is accepted and reaches the log
    with pytest.raises(LogError):
        await controller.submit("again")


@pytest.mark.asyncio
async def test_cycle_appends_reach_subscribers(controller, log):
    snapshots = []
    log.subscribe(lambda entries: snapshots.append(len(entries)))
    await controller.submit("What is RAG?")
    assert snapshots == [0, 1, 2]


@pytest.mark.asyncio
async def test_query_stored_verbatim(controller, log):
    await controller.submit("  What is RAG?  ")
    assert log.snapshot()[0].text == "  What is RAG?  "


@pytest.mark.asyncio
async def test_aclose_closes_backend(controller, backend):
    await controller.aclose()
    assert backend.closed
