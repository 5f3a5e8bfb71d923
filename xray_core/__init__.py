"""X-Ray Core - structured decision tracing for multi-step pipelines.

@public

X-Ray records, for each step of a pipeline, what went in, what came out,
which candidates were considered, which filters were applied, and why the
step decided what it did. Finished traces are handed to a completion callback,
usually a trace store, for later inspection.

Quick Start:
    >>> from xray_core import configure, trace, StepType
    >>> from xray_core.trace_store import LocalTraceStore
    >>>
    >>> store = LocalTraceStore()
    >>> configure(store=store)
    >>>
    >>> t = trace("Competitor selection", "Pick the best competitor product")
    >>> (
    ...     t.step("Search", StepType.SEARCH)
    ...     .input({"q": "bottle"})
    ...     .output({"count": 5})
    ...     .reasoning("matched 5 items")
    ...     .end()
    ... )
    >>> finished = await t.end({"success": True, "summary": "selected 1 of 5"})
    >>> await store.get(finished.id)

Environment Variables:
    - XRAY_DIR: Root directory for the local trace store (default .xray)
    - XRAY_STORAGE: ``local`` or ``memory``
    - XRAY_LOG_LEVEL: Log level for xray_core loggers
"""

from .exceptions import CallbackError, InvalidStateError, StorageError, TraceNotFoundError, XRayError
from .logging import get_xray_logger, setup_logging
from .records import (
    Candidate,
    Evaluation,
    Filter,
    Step,
    StepIO,
    StepType,
    Trace,
    TraceListItem,
    TraceResult,
    TraceStatus,
)
from .settings import Settings, settings
from .trace_store import (
    LocalTraceStore,
    MemoryTraceStore,
    TraceStore,
    create_trace_store,
    get_trace_store,
    set_trace_store,
)
from .tracer import StepBuilder, TraceBuilder, XRay, configure, get_xray, reset, trace

__version__ = "0.1.0"

__all__ = [
    # Config/Settings
    "Settings",
    "settings",
    # Logging
    "get_xray_logger",
    "setup_logging",
    # Records
    "Candidate",
    "Evaluation",
    "Filter",
    "Step",
    "StepIO",
    "StepType",
    "Trace",
    "TraceListItem",
    "TraceResult",
    "TraceStatus",
    # Builders
    "StepBuilder",
    "TraceBuilder",
    "XRay",
    "configure",
    "get_xray",
    "reset",
    "trace",
    # Storage
    "LocalTraceStore",
    "MemoryTraceStore",
    "TraceStore",
    "create_trace_store",
    "get_trace_store",
    "set_trace_store",
    # Errors
    "XRayError",
    "InvalidStateError",
    "TraceNotFoundError",
    "StorageError",
    "CallbackError",
]
