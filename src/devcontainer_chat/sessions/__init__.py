from devcontainer_chat.sessions.store import (
    DEFAULT_MAX_SESSIONS,
    SessionStore,
    get_session_store,
    reset_session_store,
)

__all__ = [
    "DEFAULT_MAX_SESSIONS",
    "SessionStore",
    "get_session_store",
    "reset_session_store",
]
