"""Shared fixtures for conversation pipeline tests."""

import asyncio

import pytest

from rag_conversation.controller import ConversationController
from rag_conversation.errors import LogError
from rag_conversation.generation.base import GenerationBackend
from rag_conversation.knowledge import DEFAULT_ITEMS, KeywordKnowledgeBase
from rag_conversation.log.memory import InMemoryConversationLog
from rag_conversation.session import static_session


class FakeBackend(GenerationBackend):
    """In-memory backend that records requests and returns a canned answer."""

    name = "fake"

    def __init__(self, response="model answer", error=None, **kwargs):
        self._response = response
        self._error = error
        self.requests = []
        self.closed = False

    async def generate(self, request):
        self.requests.append(request)
        if self._error is not None:
            raise self._error
        return self._response

    async def aclose(self):
        self.closed = True


class GatedBackend(FakeBackend):
    """Backend that holds every call until ``release`` is set."""

    def __init__(self, response="model answer", **kwargs):
        super().__init__(response, **kwargs)
        self.started = asyncio.Event()
        self.release = asyncio.Event()

    async def generate(self, request):
        self.requests.append(request)
        self.started.set()
        await self.release.wait()
        return self._response


class FailingLog(InMemoryConversationLog):
    """Memory log whose appends fail once ``fail_after`` entries exist."""

    def __init__(self, fail_after=0, **kwargs):
        super().__init__(**kwargs)
        self.fail_after = fail_after

    async def append(self, entry):
        if len(self) >= self.fail_after:
            raise LogError("store unreachable")
        return await super().append(entry)


@pytest.fixture()
def knowledge_base():
    return KeywordKnowledgeBase(DEFAULT_ITEMS)


@pytest.fixture()
def log():
    return InMemoryConversationLog()


@pytest.fixture()
def sessions():
    return static_session("session-1234abcd")


@pytest.fixture()
def backend():
    return FakeBackend()


@pytest.fixture()
def controller(log, sessions, backend, knowledge_base):
    return ConversationController(log, sessions, backend, knowledge_base)
