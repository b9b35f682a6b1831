"""
Session Control
================

Process-lifetime record of the single logged-in identity.

Properties:
- At most one identity at a time (login replaces, never stacks)
- Logout is idempotent
- All access serialized by one lock; readers never see a torn value
- Nothing is persisted: a new process starts anonymous
"""

from __future__ import annotations

import logging
import threading
from enum import Enum
from typing import Optional

from deskauth.core.auth.models import Identity


logger = logging.getLogger(__name__)


class SessionState(Enum):
    """Session states."""
    ANONYMOUS = "anonymous"
    AUTHENTICATED = "authenticated"


class SessionStore:
    """
    Holds the currently authenticated identity, if any.

    Create one instance at process start and pass it to whatever needs it.

    Usage:
        store = SessionStore()
        store.login(Identity(id=1, username="alice"))
        store.get_current()   # Identity(id=1, username='alice')
        store.logout()
        store.get_current()   # None

    Transitions:
        ANONYMOUS      --login(a)--> AUTHENTICATED(a)
        AUTHENTICATED  --login(b)--> AUTHENTICATED(b)
        AUTHENTICATED  --logout-->   ANONYMOUS
        ANONYMOUS      --logout-->   ANONYMOUS
    """

    __slots__ = ("_lock", "_current")

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._current: Optional[Identity] = None

    def __repr__(self) -> str:
        return f"SessionStore(state={self.state.value})"

    def login(self, identity: Identity) -> None:
        """
        Make ``identity`` the current identity, replacing any previous one.

        Raises:
            TypeError: If identity is not an Identity
        """
        if not isinstance(identity, Identity):
            raise TypeError(f"Expected Identity, got {type(identity).__name__}")

        with self._lock:
            previous = self._current
            self._current = identity

        if previous is None:
            logger.info("Session started for user %d", identity.id)
        else:
            logger.info("Session switched from user %d to user %d", previous.id, identity.id)

    def logout(self) -> None:
        """Clear the current identity. Does nothing when already anonymous."""
        with self._lock:
            previous = self._current
            self._current = None

        if previous is not None:
            logger.info("Session ended for user %d", previous.id)

    def get_current(self) -> Optional[Identity]:
        """
        Get the current identity.

        Identity is frozen, so the returned object is a snapshot that
        cannot be used to change the session.
        """
        with self._lock:
            return self._current

    @property
    def state(self) -> SessionState:
        if self.get_current() is None:
            return SessionState.ANONYMOUS
        return SessionState.AUTHENTICATED

    @property
    def is_authenticated(self) -> bool:
        return self.state is SessionState.AUTHENTICATED
