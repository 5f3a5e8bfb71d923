"""Trace store protocol and singleton management.

Defines the TraceStore protocol that all storage backends implement, along
with get/set helpers for the process-global singleton.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from xray_core.records import Trace, TraceListItem


@runtime_checkable
class TraceStore(Protocol):
    """Protocol for trace storage backends.

    Implementations: LocalTraceStore (filesystem), MemoryTraceStore (testing).
    """

    async def save(self, trace: Trace) -> None:
        """Upsert a trace keyed by its id. Raises StorageError if the write fails."""
        ...

    async def get(self, trace_id: str) -> Trace | None:
        """Return the stored trace, or None if no record exists."""
        ...

    async def list(self) -> list[TraceListItem]:
        """Return summaries of all stored traces, newest first.

        Unreadable records are skipped with a logged warning.
        """
        ...

    async def update(self, trace_id: str, changes: Mapping[str, Any]) -> Trace | None:
        """Shallow-merge top-level fields into a stored trace. Returns None if absent."""
        ...

    async def delete(self, trace_id: str) -> bool:
        """Remove a trace. Returns whether a record existed."""
        ...

    async def clear(self) -> int:
        """Remove all traces, best-effort. Returns the number removed."""
        ...


_trace_store: TraceStore | None = None


def get_trace_store() -> TraceStore | None:
    """Get the process-global trace store singleton."""
    return _trace_store


def set_trace_store(store: TraceStore | None) -> None:
    """Set the process-global trace store singleton."""
    global _trace_store
    _trace_store = store
