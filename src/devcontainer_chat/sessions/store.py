from __future__ import annotations

import threading
import time
from collections import OrderedDict

from loguru import logger

from devcontainer_chat.models import ChatSession, utc_now

DEFAULT_MAX_SESSIONS = 256


class SessionStore:
    """In-memory chat sessions, at most one per container.

    Sessions are kept in least-recently-used order. When ``max_sessions`` is
    positive, creating a session past the limit evicts the least recently
    used ones. When ``idle_ttl_seconds`` is set, sessions idle for longer are
    dropped on the next lookup. Busy sessions (a turn awaiting its reply) are
    never evicted, so the store may briefly hold more than ``max_sessions``.
    """

    def __init__(
        self,
        *,
        max_sessions: int = DEFAULT_MAX_SESSIONS,
        idle_ttl_seconds: float | None = None,
    ):
        self._max_sessions = max_sessions
        self._idle_ttl_seconds = idle_ttl_seconds
        self._by_container: OrderedDict[str, ChatSession] = OrderedDict()
        self._by_id: dict[str, ChatSession] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._by_id)

    def create_chat_session(self, container_id: str) -> ChatSession:
        with self._lock:
            return self._create_locked(container_id)

    def get_chat_session(self, session_id: str) -> ChatSession | None:
        return self._by_id.get(session_id)

    def get_session_for_container(self, container_id: str) -> ChatSession | None:
        return self._by_container.get(container_id)

    def get_or_create_chat_session(self, container_id: str) -> ChatSession:
        self.evict_expired()
        with self._lock:
            session = self._by_container.get(container_id)
            if session is not None:
                self._by_container.move_to_end(container_id)
                return session
            return self._create_locked(container_id)

    def touch(self, session: ChatSession) -> None:
        session.last_activity = time.monotonic()
        with self._lock:
            if self._by_container.get(session.container_id) is session:
                self._by_container.move_to_end(session.container_id)

    def mark_updated(self, session: ChatSession) -> None:
        session.updated_at = utc_now()
        self.touch(session)

    def delete_chat_session(self, session_id: str) -> bool:
        with self._lock:
            session = self._by_id.get(session_id)
            if session is None:
                return False
            self._drop_locked(session)
        logger.debug(f"Deleted chat session {session_id}")
        return True

    def list_sessions(self) -> list[ChatSession]:
        return list(self._by_container.values())

    def evict_expired(self) -> int:
        if self._idle_ttl_seconds is None:
            return 0
        cutoff = time.monotonic() - self._idle_ttl_seconds
        with self._lock:
            expired = [s for s in self._by_container.values() if s.last_activity < cutoff and not s.busy]
            for session in expired:
                self._drop_locked(session)
        for session in expired:
            logger.info(f"Evicted idle chat session {session.id} (container={session.container_id})")
        return len(expired)

    def _create_locked(self, container_id: str) -> ChatSession:
        previous = self._by_container.get(container_id)
        if previous is not None:
            self._drop_locked(previous)

        session = ChatSession.new(container_id)
        self._by_container[container_id] = session
        self._by_id[session.id] = session

        if self._max_sessions > 0:
            self._evict_lru_locked(keep=session)

        logger.info(f"Created chat session {session.id} for container {container_id} (total sessions: {len(self._by_id)})")
        return session

    def _evict_lru_locked(self, keep: ChatSession) -> None:
        overflow = len(self._by_container) - self._max_sessions
        if overflow <= 0:
            return
        candidates = [s for s in self._by_container.values() if s is not keep and not s.busy]
        for oldest in candidates[:overflow]:
            self._drop_locked(oldest)
            logger.info(f"Evicted least recently used chat session {oldest.id} (container={oldest.container_id})")

    def _drop_locked(self, session: ChatSession) -> None:
        self._by_id.pop(session.id, None)
        if self._by_container.get(session.container_id) is session:
            del self._by_container[session.container_id]


_store: SessionStore | None = None


def get_session_store() -> SessionStore:
    """Return the process-wide session store, creating it on first use."""
    global _store
    if _store is None:
        _store = SessionStore()
    return _store


def reset_session_store(store: SessionStore | None = None) -> SessionStore:
    global _store
    _store = store if store is not None else SessionStore()
    return _store
