"""Trace persistence backends.

@public
"""

from xray_core.trace_store.factory import create_trace_store
from xray_core.trace_store.local import LocalTraceStore
from xray_core.trace_store.memory import MemoryTraceStore
from xray_core.trace_store.protocol import TraceStore, get_trace_store, set_trace_store

__all__ = [
    "LocalTraceStore",
    "MemoryTraceStore",
    "TraceStore",
    "create_trace_store",
    "get_trace_store",
    "set_trace_store",
]
