"""Per-worker session ownership.

Each worker (thread; pytest-xdist workers are separate processes and get
their own registry) binds at most one session. Bindings are worker-local, so
there is no shared mutable state and no locking on the hot path.
"""
import logging
import os
import threading
from typing import Optional

from .exceptions import NoActiveSessionError, SessionAlreadyRegisteredError

logger = logging.getLogger(__name__)


def _worker_name() -> str:
    return f"{os.getpid()}/{threading.current_thread().name}"


class SessionRegistry:
    """Binds one session to the calling worker.

    Features:
    - open() refuses to overwrite a bound session
    - current() fails loudly when nothing is bound
    - close() always unbinds, even when the remote shutdown fails
    """

    def __init__(self):
        self._local = threading.local()

    def _get(self):
        return getattr(self._local, "session", None)

    def has_session(self) -> bool:
        """Check whether the calling worker has a bound session."""
        return self._get() is not None

    def open(self, session) -> None:
        """Register a session for the calling worker.

        Raises:
            SessionAlreadyRegisteredError: A session is already bound
        """
        if session is None:
            raise ValueError("session must not be None")
        if self._get() is not None:
            raise SessionAlreadyRegisteredError(_worker_name())
        self._local.session = session
        logger.debug(f"Registered session for worker {_worker_name()}")

    def current(self):
        """Return the calling worker's session.

        Raises:
            NoActiveSessionError: open() was not called for this worker
        """
        session = self._get()
        if session is None:
            raise NoActiveSessionError(_worker_name())
        return session

    def close(self) -> None:
        """Shut down and unbind the calling worker's session.

        Safe to call when no session is bound. Shutdown failures are logged,
        never raised.
        """
        session = self._get()
        if session is None:
            return
        try:
            logger.info(f"Closing session for worker {_worker_name()}")
            session.close()
        except Exception as e:
            logger.warning(f"Exception while closing session: {e}")
        finally:
            self._local.session = None


# Global singleton
_session_registry: Optional[SessionRegistry] = None
_registry_lock = threading.Lock()


def get_session_registry() -> SessionRegistry:
    """Get the global SessionRegistry instance."""
    global _session_registry
    with _registry_lock:
        if _session_registry is None:
            _session_registry = SessionRegistry()
        return _session_registry
