"""Custom exceptions for the mobile UI harness.

Exception Hierarchy:
    HarnessError (base)
    ├── SessionError
    │   ├── NoActiveSessionError
    │   ├── SessionAlreadyRegisteredError
    │   └── SessionConnectionError
    ├── WaitTimeoutError
    ├── ContextSwitchError
    │   ├── NoEmbeddedSurfaceError
    │   └── NativeContextRestoreError
    ├── StaleReferenceError
    ├── ListItemNotFoundError
    └── ConfigError
"""


class HarnessError(Exception):
    """Base exception for the harness."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert exception to dict for report attachments."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


# === Session Errors ===


class SessionError(HarnessError):
    """Base class for session registry and connection errors."""

    pass


class NoActiveSessionError(SessionError):
    """A session-dependent operation ran before a session was opened."""

    def __init__(self, worker: str):
        super().__init__(
            f"No active session for worker {worker}. "
            "Open a session before using session-dependent operations.",
            {"worker": worker},
        )
        self.worker = worker


class SessionAlreadyRegisteredError(SessionError):
    """A session is already bound to this worker."""

    def __init__(self, worker: str):
        super().__init__(
            f"A session is already registered for worker {worker}. Close it first.",
            {"worker": worker},
        )
        self.worker = worker


class SessionConnectionError(SessionError):
    """Failure at the remote session boundary."""

    def __init__(self, target: str, reason: str = None):
        message = f"Session failure: {target}"
        if reason:
            message += f" ({reason})"
        super().__init__(message, {"target": target, "reason": reason})
        self.target = target
        self.reason = reason


# === Wait Errors ===


class WaitTimeoutError(HarnessError):
    """A polled condition did not become true in time."""

    def __init__(self, description: str, timeout: float, polls: int = 0):
        super().__init__(
            f"Timed out after {timeout:.1f}s waiting for: {description}",
            {"description": description, "timeout": timeout, "polls": polls},
        )
        self.description = description
        self.timeout = timeout
        self.polls = polls


# === Context Errors ===


class ContextSwitchError(HarnessError):
    """Base class for context switching errors."""

    pass


class NoEmbeddedSurfaceError(ContextSwitchError):
    """No embedded web surface appeared within the timeout."""

    def __init__(self, known_surfaces: list = None, timeout: float = None):
        known = list(known_surfaces or [])
        message = f"No embedded surface found among: {known}"
        if timeout is not None:
            message += f" (waited {timeout:.1f}s)"
        super().__init__(message, {"known_surfaces": known, "timeout": timeout})
        self.known_surfaces = known
        self.timeout = timeout


class NativeContextRestoreError(ContextSwitchError):
    """Switching back to the native surface failed; the session is broken."""

    def __init__(self, native_context: str, reason: str = None):
        message = f"Failed to restore native context {native_context}"
        if reason:
            message += f": {reason}"
        super().__init__(message, {"native_context": native_context, "reason": reason})
        self.native_context = native_context


# === Element Errors ===


class StaleReferenceError(HarnessError):
    """Element reference no longer points at a live UI node."""

    def __init__(self, description: str = "element"):
        super().__init__(f"Stale reference: {description}", {"description": description})


class ListItemNotFoundError(HarnessError):
    """Incremental list search exhausted its bound without a match."""

    def __init__(self, description: str, scans: int, advances: int, end_of_list: bool = False):
        reason = "end of list reached" if end_of_list else "advance limit reached"
        super().__init__(
            f"List item not found: {description} after {scans} scans, "
            f"{advances} advances ({reason})",
            {
                "description": description,
                "scans": scans,
                "advances": advances,
                "end_of_list": end_of_list,
            },
        )
        self.description = description
        self.scans = scans
        self.advances = advances
        self.end_of_list = end_of_list


# === Config Errors ===


class ConfigError(HarnessError):
    """Device configuration could not be loaded."""

    def __init__(self, source: str, reason: str):
        super().__init__(f"Invalid configuration {source}: {reason}", {"source": source})
        self.source = source
