"""Session identity and readiness signal."""

from __future__ import annotations

import asyncio
import logging
import uuid
from collections.abc import Callable

from rag_conversation.models import Session

logger = logging.getLogger(__name__)


class SessionProvider:
    """Supplies one opaque identity per process and signals readiness.

    Until :meth:`sign_in` completes, :attr:`session` reports ``ready=False``
    and the controller rejects submissions.
    """

    def __init__(self) -> None:
        self._session_id: str | None = None
        self._ready = asyncio.Event()
        self._listeners: list[Callable[[Session], None]] = []

    @property
    def session(self) -> Session:
        return Session(id=self._session_id or "", ready=self._ready.is_set())

    @property
    def ready(self) -> bool:
        return self._ready.is_set()

    async def sign_in(self, token: str | None = None) -> Session:
        """Establish the session identity.

        Parameters
        ----------
        token : str | None
            Identity issued by an outside provider.  Blank or missing tokens
            fall back to an anonymous identity.

        Returns
        -------
        Session
        """
        if self._ready.is_set():
            return self.session
        if token and token.strip():
            self._session_id = token.strip()
        else:
            self._session_id = uuid.uuid4().hex
            logger.debug("Signed in anonymously")
        self._ready.set()
        session = self.session
        logger.info("Session ready id=%s...", session.id[:8])
        for listener in list(self._listeners):
            try:
                listener(session)
            except Exception:
                logger.warning("Session listener raised; continuing", exc_info=True)
        return session

    async def wait_ready(self) -> Session:
        """Suspend until the session is ready."""
        await self._ready.wait()
        return self.session

    def on_ready(self, listener: Callable[[Session], None]) -> Callable[[], None]:
        """Call *listener* once the session is ready.

        Fires immediately when already ready.  Returns an unsubscribe handle.
        """
        if self._ready.is_set():
            listener(self.session)
            return lambda: None
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe


def static_session(session_id: str) -> SessionProvider:
    """Return a provider that is already signed in as *session_id*."""
    provider = SessionProvider()
    provider._session_id = session_id
    provider._ready.set()
    return provider
