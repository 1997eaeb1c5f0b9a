"""Error types raised by jsonsmith and the tuple caught at best-effort seams."""

from __future__ import annotations

from typing import TypeAlias


class AppError(Exception):
    """Base class for failures the editor reports instead of crashing on."""


class AppRuntimeError(RuntimeError, AppError):
    """Runtime failure whose message is shown to the user as-is."""


class DocumentIOError(AppRuntimeError):
    """A document could not be read from or written to disk."""

    def __init__(self, message: str, path: str = ""):
        super().__init__(message)
        self.path = path


class WorkerTransportError(AppRuntimeError):
    """Raised when a request cannot be handed to the background worker."""


# Caught where a failure only costs a log line: settings, session and
# diagnostics-log writes, tk callbacks during shutdown.
EXPECTED_ERRORS: TypeAlias = (
    OSError,
    ValueError,
    TypeError,
    RuntimeError,
    AttributeError,
    KeyError,
    IndexError,
)
