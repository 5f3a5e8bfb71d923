"""Helpers shared by trace store backends."""

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic.alias_generators import to_camel

from xray_core.records import Trace, TraceListItem

_TRACE_ALIASES: dict[str, str] = {name: to_camel(name) for name in Trace.model_fields}
_KNOWN_KEYS = frozenset(_TRACE_ALIASES) | frozenset(_TRACE_ALIASES.values())


def validate_trace_id(trace_id: str) -> str:
    """Reject ids that could escape the store directory or collide with temp files."""
    if not trace_id or trace_id.startswith(".") or any(c in trace_id for c in ("/", "\\", "\x00")):
        raise ValueError(f"Invalid trace id: {trace_id!r}")
    return trace_id


def apply_changes(trace: Trace, changes: Mapping[str, Any]) -> Trace:
    """Shallow-merge top-level fields onto a trace and re-validate.

    Keys may be given as snake_case field names or camelCase aliases.
    """
    record = trace.model_dump(mode="json", by_alias=True)
    for key, value in changes.items():
        if key not in _KNOWN_KEYS:
            raise ValueError(f"Unknown trace field: {key!r}")
        alias = _TRACE_ALIASES.get(key, key)
        if alias == "id" and value != trace.id:
            raise ValueError(f"Trace id cannot be changed ({trace.id!r} -> {value!r})")
        record[alias] = value
    return Trace.model_validate(record)


def sort_newest_first(items: Iterable[TraceListItem]) -> list[TraceListItem]:
    """Sort by start time descending; equal start times keep id order."""
    by_id = sorted(items, key=lambda item: item.id)
    return sorted(by_id, key=lambda item: item.start_time, reverse=True)
