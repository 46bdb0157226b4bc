"""Native / embedded web surface switching.

Hybrid apps expose several Appium contexts when a screen renders a WebView:
    - NATIVE_APP: the native layer
    - WEBVIEW_<package> (Android) or WEBVIEW_<pid> (iOS): the embedded browser

The controller waits for the WebView context to appear before switching and
always reads the live context instead of caching it, so code that switches
behind its back cannot desynchronize it.
"""
import contextlib
import logging
from enum import Enum
from typing import Generator, List

from .exceptions import (
    ContextSwitchError,
    NativeContextRestoreError,
    NoEmbeddedSurfaceError,
    WaitTimeoutError,
)
from .wait import DEFAULT_TIMEOUT, POLL_INTERVAL, WaitSpec, fit_poll_interval, wait_for

logger = logging.getLogger(__name__)

NATIVE_CONTEXT = "NATIVE_APP"
WEBVIEW_PREFIX = "WEBVIEW"


class ContextState(Enum):
    """Which surface a session is driving."""

    NATIVE = "native"
    EMBEDDED = "embedded"


class ContextSwitchController:
    """Two-state context machine for one session.

    Callers must pair enter_embedded() with return_to_native() on every exit
    path; embedded() does that for them.
    """

    def __init__(
        self,
        session,
        native_context: str = NATIVE_CONTEXT,
        embedded_prefix: str = WEBVIEW_PREFIX,
    ):
        self.session = session
        self.native_context = native_context
        self.embedded_prefix = embedded_prefix

    def _is_embedded(self, identifier) -> bool:
        return bool(identifier) and identifier.startswith(self.embedded_prefix)

    def _embedded_surfaces(self, surfaces) -> List[str]:
        return [s for s in surfaces if self._is_embedded(s)]

    def available_surfaces(self) -> List[str]:
        """Return all surfaces the session reports (for diagnostics)."""
        return list(self.session.get_active_surfaces())

    def current_state(self) -> ContextState:
        """Read the live context and classify it."""
        if self._is_embedded(self.session.get_active_surface()):
            return ContextState.EMBEDDED
        return ContextState.NATIVE

    def enter_embedded(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        poll_interval: float = POLL_INTERVAL,
    ) -> str:
        """Switch to the first embedded surface, waiting for one to appear.

        Args:
            timeout: Maximum wait for an embedded surface, in seconds
            poll_interval: Time between surface listings

        Returns:
            The identifier switched to

        Raises:
            ContextSwitchError: Already in an embedded surface
            NoEmbeddedSurfaceError: None appeared within timeout
        """
        if self.current_state() is ContextState.EMBEDDED:
            raise ContextSwitchError(
                f"Already in embedded context {self.session.get_active_surface()}",
                {"active": self.session.get_active_surface()},
            )

        last_seen: List[str] = []

        def has_embedded_surface() -> bool:
            surfaces = self.available_surfaces()
            last_seen[:] = surfaces
            if self._embedded_surfaces(surfaces):
                return True
            logger.debug(f"Contexts available: {surfaces}; no WebView yet")
            return False

        logger.info(f"Waiting for WebView context (timeout={timeout}s)")
        spec = WaitSpec(
            has_embedded_surface,
            timeout,
            fit_poll_interval(timeout, poll_interval),
            "WebView context to appear",
        )
        try:
            wait_for(spec)
        except WaitTimeoutError as e:
            raise NoEmbeddedSurfaceError(last_seen, timeout) from e

        # Re-list: the set seen while polling may already be gone
        surfaces = self.available_surfaces()
        candidates = self._embedded_surfaces(surfaces)
        if not candidates:
            raise NoEmbeddedSurfaceError(surfaces, timeout)

        target = candidates[0]
        logger.info(f"Switching to context: {target}")
        self.session.switch_surface(target)
        return target

    def return_to_native(self) -> None:
        """Switch back to the native context.

        Raises:
            NativeContextRestoreError: The switch failed; the session is unusable
        """
        logger.info(f"Switching to {self.native_context} context")
        try:
            self.session.switch_surface(self.native_context)
        except Exception as e:
            logger.error(f"Failed to restore {self.native_context}: {e}")
            raise NativeContextRestoreError(self.native_context, str(e)) from e

    @contextlib.contextmanager
    def embedded(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        poll_interval: float = POLL_INTERVAL,
    ) -> Generator[str, None, None]:
        """Run a block inside the embedded surface.

        Yields:
            The embedded identifier

        Example:
            >>> with controller.embedded(timeout=30):
            ...     session.find_elements((By.CSS_SELECTOR, "input"))
        """
        identifier = self.enter_embedded(timeout, poll_interval)
        try:
            yield identifier
        finally:
            self.return_to_native()
