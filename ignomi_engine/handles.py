"""
Session handles - Opaque integer handles for native bindings.

Bindings hold an integer instead of a Session reference. Unknown or freed
handles are rejected: execute() answers with an Error outcome, the other
operations raise InvalidHandleError. Handles are never reused.

Example:
    handle = session_new()
    search(handle, "fire", 10)
    execute(handle, 0)
    session_free(handle)
"""

import itertools
import threading
from typing import Optional

from loguru import logger

from .errors import InvalidHandleError
from .search.candidate import Candidate, Outcome
from .session import Session


class SessionRegistry:
    """Maps handles to live sessions."""

    def __init__(self):
        self._sessions: dict[int, Session] = {}
        self._counter = itertools.count(1)
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def create(self, session: Optional[Session] = None) -> int:
        """Register a session (default providers if None) and return its handle."""
        session = session or Session.create_default()
        with self._lock:
            handle = next(self._counter)
            self._sessions[handle] = session
        logger.debug(f"Created session handle {handle}")
        return handle

    def destroy(self, handle: int) -> None:
        """Close and forget a session. Freeing an unknown handle is an error."""
        if isinstance(handle, bool) or not isinstance(handle, int):
            raise InvalidHandleError(f"Invalid session handle: {handle!r}")
        with self._lock:
            session = self._sessions.pop(handle, None)
        if session is None:
            raise InvalidHandleError(f"Invalid session handle: {handle!r}")
        session.close()
        logger.debug(f"Released session handle {handle}")

    def get(self, handle: int) -> Session:
        if isinstance(handle, bool) or not isinstance(handle, int):
            raise InvalidHandleError(f"Invalid session handle: {handle!r}")
        with self._lock:
            session = self._sessions.get(handle)
        if session is None:
            raise InvalidHandleError(f"Invalid session handle: {handle!r}")
        return session


_default_registry = SessionRegistry()


def default_registry() -> SessionRegistry:
    return _default_registry


def session_new(session: Optional[Session] = None) -> int:
    return _default_registry.create(session)


def session_free(handle: int) -> None:
    _default_registry.destroy(handle)


def search(handle: int, query: str, max_results: int) -> tuple[Candidate, ...]:
    return _default_registry.get(handle).search(query, max_results)


def execute(handle: int, index: int) -> Outcome:
    try:
        session = _default_registry.get(handle)
    except InvalidHandleError:
        return Outcome.error("Invalid session handle")
    return session.execute(index)


def poll_clipboard(handle: int) -> None:
    _default_registry.get(handle).poll_clipboard()


def reload(handle: int) -> None:
    _default_registry.get(handle).reload()


def result_count(handle: int) -> int:
    return _default_registry.get(handle).result_count()
