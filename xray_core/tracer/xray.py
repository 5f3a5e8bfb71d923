"""Entry point binding trace completion to persistence.

``XRay`` is an explicit configuration object: it holds the completion
callback that every trace it creates will invoke on ``end()``. The
module-level ``configure()``/``trace()`` functions operate on one
process-wide instance for callers that do not want to pass an ``XRay``
around. That instance has single-writer semantics: the last ``configure()``
call wins, and it lives until the process exits or ``reset()`` is called.

Example:
    >>> from xray_core import configure, trace
    >>> from xray_core.trace_store import LocalTraceStore
    >>>
    >>> configure(store=LocalTraceStore())
    >>> t = trace("Competitor selection")
    >>> t.step("Search", "search").input({"q": "bottle"}).end()
    >>> await t.end({"success": True, "summary": "picked 1 of 5"})
"""

from xray_core.tracer.builders import OnTraceCallback, TraceBuilder
from xray_core.trace_store.protocol import TraceStore


class XRay:
    """Creates trace builders wired to a completion callback."""

    def __init__(self, on_trace: OnTraceCallback | None = None) -> None:
        self._on_trace = on_trace

    @property
    def on_trace(self) -> OnTraceCallback | None:
        return self._on_trace

    def configure(self, on_trace: OnTraceCallback | None = None, *, store: TraceStore | None = None) -> None:
        """Set or replace the completion callback.

        Args:
            on_trace: Called with each finalized trace; may be async.
            store: Shortcut for ``on_trace=store.save``.
        """
        if on_trace is not None and store is not None:
            raise ValueError("Pass either on_trace or store, not both")
        self._on_trace = store.save if store is not None else on_trace

    def trace(self, name: str, description: str | None = None) -> TraceBuilder:
        """Start a new trace that reports to the configured callback."""
        return TraceBuilder(name, description, on_end=self._on_trace)


_xray = XRay()


def get_xray() -> XRay:
    """Get the process-wide XRay instance."""
    return _xray


def configure(on_trace: OnTraceCallback | None = None, *, store: TraceStore | None = None) -> None:
    """Set the process-wide completion callback. Last call wins."""
    _xray.configure(on_trace, store=store)


def trace(name: str, description: str | None = None) -> TraceBuilder:
    """Start a new trace using the process-wide configuration."""
    return _xray.trace(name, description)


def reset() -> None:
    """Remove the process-wide completion callback."""
    _xray.configure(None)
