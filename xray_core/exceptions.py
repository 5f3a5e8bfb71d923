"""Exception hierarchy for X-Ray Core.

All exceptions inherit from XRayError. Builder misuse (InvalidStateError) is a
programmer error and is raised immediately. Storage failures surface as
StorageError at the persistence boundary. A failing completion callback is
reported to the caller of ``TraceBuilder.end()`` as CallbackError.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from xray_core.records import Trace


class XRayError(Exception):
    """Base exception for all X-Ray Core errors."""


class InvalidStateError(XRayError):
    """Raised when a builder is used after it was finalized."""


class TraceNotFoundError(XRayError):
    """Raised when a trace id has no stored record."""

    def __init__(self, trace_id: str) -> None:
        super().__init__(f"Trace '{trace_id}' not found")
        self.trace_id = trace_id


class StorageError(XRayError):
    """Raised when a trace cannot be written, read, or enumerated."""


class CallbackError(XRayError):
    """Raised when the trace completion callback fails.

    The trace is finalized in memory regardless; it is available as ``trace``.
    """

    def __init__(self, message: str, trace: "Trace") -> None:
        super().__init__(message)
        self.trace = trace
