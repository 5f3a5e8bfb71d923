"""Factory function for creating trace store instances based on settings."""

from xray_core.settings import Settings
from xray_core.trace_store.protocol import TraceStore


def create_trace_store(settings: Settings) -> TraceStore:
    """Create a TraceStore based on settings.

    Selects MemoryTraceStore when ``xray_storage`` is ``memory``, otherwise
    LocalTraceStore rooted at ``xray_dir``.
    """
    if settings.xray_storage == "memory":
        from xray_core.trace_store.memory import MemoryTraceStore

        return MemoryTraceStore()

    from xray_core.trace_store.local import LocalTraceStore

    return LocalTraceStore(settings.xray_dir)
