"""Core session and synchronization layer of the mobile UI harness."""
from .exceptions import (
    HarnessError,
    SessionError,
    NoActiveSessionError,
    SessionAlreadyRegisteredError,
    SessionConnectionError,
    WaitTimeoutError,
    ContextSwitchError,
    NoEmbeddedSurfaceError,
    NativeContextRestoreError,
    StaleReferenceError,
    ListItemNotFoundError,
    ConfigError,
)
from .session import AppiumSession, Platform, build_options, new_session
from .session_registry import SessionRegistry, get_session_registry
from .wait import (
    DEFAULT_TIMEOUT,
    LONG_TIMEOUT,
    POLL_INTERVAL,
    SHORT_TIMEOUT,
    ElementState,
    WaitSpec,
    is_visible_within,
    until,
    wait_for,
    wait_for_element_state,
)
from .context import ContextState, ContextSwitchController
from .list_search import IncrementalListSearch, ItemMatcher, ListAdvance, SearchOutcome

__all__ = [
    # Exceptions
    "HarnessError",
    "SessionError",
    "NoActiveSessionError",
    "SessionAlreadyRegisteredError",
    "SessionConnectionError",
    "WaitTimeoutError",
    "ContextSwitchError",
    "NoEmbeddedSurfaceError",
    "NativeContextRestoreError",
    "StaleReferenceError",
    "ListItemNotFoundError",
    "ConfigError",
    # Session
    "AppiumSession",
    "Platform",
    "build_options",
    "new_session",
    "SessionRegistry",
    "get_session_registry",
    # Waits
    "DEFAULT_TIMEOUT",
    "LONG_TIMEOUT",
    "POLL_INTERVAL",
    "SHORT_TIMEOUT",
    "ElementState",
    "WaitSpec",
    "is_visible_within",
    "until",
    "wait_for",
    "wait_for_element_state",
    # Context switching
    "ContextState",
    "ContextSwitchController",
    # List search
    "IncrementalListSearch",
    "ItemMatcher",
    "ListAdvance",
    "SearchOutcome",
]
