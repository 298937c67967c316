"""Unified configuration for the conversation pipeline."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from rag_conversation.log.base import DEFAULT_APP_ID, collection_path

_LOG_TYPES = frozenset({"memory", "sqlite"})


@dataclass
class BackendConfig:
    """Generation backend configuration.

    Parameters
    ----------
    type : str
        Registered backend name (``"gemini"`` or ``"litellm"``).
    model : str
        Model identifier passed to the backend.
    api_key : str | None
        Endpoint credential.
    base_url : str | None
        Custom endpoint root.
    generation_timeout_ms : int | None
        Deadline after which the call fails with a transport failure.
    extra : dict
        Additional kwargs forwarded to the backend constructor.
    """

    type: str = "gemini"
    model: str = "gemini-2.0-flash"
    api_key: str | None = None
    base_url: str | None = None
    generation_timeout_ms: int | None = None
    extra: dict = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.type:
            msg = "type must be a non-empty string"
            raise ValueError(msg)
        if not self.model:
            msg = "model must be a non-empty string"
            raise ValueError(msg)
        if self.generation_timeout_ms is not None and self.generation_timeout_ms <= 0:
            msg = f"generation_timeout_ms must be > 0, got {self.generation_timeout_ms}"
            raise ValueError(msg)

    def backend_kwargs(self) -> dict[str, Any]:
        """Constructor kwargs for :meth:`BackendRegistry.create`."""
        return {
            "model": self.model,
            "api_key": self.api_key,
            "base_url": self.base_url,
            "timeout_ms": self.generation_timeout_ms,
            **self.extra,
        }


@dataclass
class LogConfig:
    """Conversation log configuration.

    Parameters
    ----------
    type : str
        ``"memory"`` or ``"sqlite"``.
    path : str
        Database file for the SQLite store.
    app_id : str
        Application id used to build the collection path.
    collection : str
        Explicit collection path; derived from ``app_id`` when empty.
    poll_interval_ms : int
        Polling period for commits made by other processes.
    """

    type: str = "memory"
    path: str = "data/chat_history.db"
    app_id: str = DEFAULT_APP_ID
    collection: str = ""
    poll_interval_ms: int = 500

    def __post_init__(self) -> None:
        if self.type not in _LOG_TYPES:
            msg = f"Unknown log type {self.type!r}. Available: {', '.join(sorted(_LOG_TYPES))}"
            raise ValueError(msg)
        if self.poll_interval_ms < 0:
            msg = f"poll_interval_ms must be >= 0, got {self.poll_interval_ms}"
            raise ValueError(msg)
        if not self.collection:
            self.collection = collection_path(self.app_id)


@dataclass
class ChatConfig:
    """Top-level configuration.

    Parameters
    ----------
    backend : BackendConfig
        Generation backend settings.
    log : LogConfig
        Conversation log settings.
    knowledge_base : str | list | None
        Registered corpus name, YAML path, or inline item list.
        ``None`` uses the built-in corpus.
    prompt : str
        Optional YAML prompt template path.
    """

    backend: BackendConfig = field(default_factory=BackendConfig)
    log: LogConfig = field(default_factory=LogConfig)
    knowledge_base: str | list | None = None
    prompt: str = ""


def load_config(source: str | Path | dict[str, Any] | None = None) -> ChatConfig:
    """Load a ChatConfig from a YAML file, dict, or environment variables.

    Environment variables take precedence over file or dict values.

    Parameters
    ----------
    source : str | Path | dict | None
        A path to a YAML file, a raw dict, or ``None`` to use only
        environment variable overrides on defaults.

    Returns
    -------
    ChatConfig
    """
    raw: dict[str, Any] = {}

    if isinstance(source, dict):
        raw = source
    elif source is not None:
        path = Path(source)
        if path.is_file():
            raw = _load_yaml(path)

    backend_raw = raw.get("backend") or {}
    # generation_timeout_ms is also accepted at the top level
    timeout = os.environ.get(
        "RAG_GENERATION_TIMEOUT_MS",
        backend_raw.get("generation_timeout_ms", raw.get("generation_timeout_ms")),
    )
    known_backend = {"type", "model", "api_key", "base_url", "generation_timeout_ms"}
    backend = BackendConfig(
        type=os.environ.get("RAG_BACKEND_TYPE", backend_raw.get("type", "gemini")),
        model=os.environ.get("RAG_BACKEND_MODEL", backend_raw.get("model", "gemini-2.0-flash")),
        api_key=os.environ.get("RAG_BACKEND_API_KEY")
        or backend_raw.get("api_key")
        or os.environ.get("GEMINI_API_KEY"),
        base_url=os.environ.get("RAG_BACKEND_BASE_URL", backend_raw.get("base_url")),
        generation_timeout_ms=int(timeout) if timeout not in (None, "") else None,
        extra={k: v for k, v in backend_raw.items() if k not in known_backend},
    )

    log_raw = raw.get("log") or {}
    log = LogConfig(
        type=os.environ.get("RAG_LOG_TYPE", log_raw.get("type", "memory")),
        path=os.environ.get("RAG_LOG_PATH", log_raw.get("path", "data/chat_history.db")),
        app_id=log_raw.get("app_id", DEFAULT_APP_ID),
        collection=os.environ.get("RAG_LOG_COLLECTION", log_raw.get("collection", "")),
        poll_interval_ms=int(log_raw.get("poll_interval_ms", 500)),
    )

    return ChatConfig(
        backend=backend,
        log=log,
        knowledge_base=os.environ.get("RAG_KNOWLEDGE_BASE", raw.get("knowledge_base")),
        prompt=raw.get("prompt", ""),
    )


def _load_yaml(path: Path) -> dict[str, Any]:
    """Load YAML file using PyYAML."""
    with open(path, encoding="utf-8") as fh:
        return yaml.safe_load(fh) or {}
