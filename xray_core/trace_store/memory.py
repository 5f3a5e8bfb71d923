"""In-memory trace store for testing.

Dict-based storage implementing the full TraceStore protocol. All data is
lost when the process exits.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from xray_core.records import Trace, TraceListItem
from xray_core.trace_store._helpers import apply_changes, sort_newest_first, validate_trace_id


class MemoryTraceStore:
    """Dict-based trace store. Stores and returns deep copies."""

    def __init__(self) -> None:
        self._traces: dict[str, Trace] = {}

    async def save(self, trace: Trace) -> None:
        """Store a copy of the trace, replacing any previous record."""
        self._traces[validate_trace_id(trace.id)] = trace.model_copy(deep=True)

    async def get(self, trace_id: str) -> Trace | None:
        """Return a copy of the stored trace, or None."""
        trace = self._traces.get(validate_trace_id(trace_id))
        return trace.model_copy(deep=True) if trace is not None else None

    async def list(self) -> list[TraceListItem]:
        """Summaries of all traces, newest first."""
        return sort_newest_first(trace.list_item() for trace in self._traces.values())

    async def update(self, trace_id: str, changes: Mapping[str, Any]) -> Trace | None:
        """Merge top-level fields into a stored trace."""
        trace = self._traces.get(validate_trace_id(trace_id))
        if trace is None:
            return None
        updated = apply_changes(trace, changes)
        self._traces[trace_id] = updated
        return updated.model_copy(deep=True)

    async def delete(self, trace_id: str) -> bool:
        """Remove a trace. Returns whether it existed."""
        return self._traces.pop(validate_trace_id(trace_id), None) is not None

    async def clear(self) -> int:
        """Remove all traces."""
        removed = len(self._traces)
        self._traces.clear()
        return removed
