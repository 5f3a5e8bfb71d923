"""Tests for MemoryTraceStore."""

from datetime import UTC, datetime, timedelta

import pytest

from xray_core.trace_store import MemoryTraceStore, TraceStore


def test_satisfies_trace_store_protocol():
    assert isinstance(MemoryTraceStore(), TraceStore)


@pytest.mark.asyncio
async def test_save_and_get(memory_store: MemoryTraceStore, trace_factory):
    trace = trace_factory(steps=2)
    await memory_store.save(trace)
    assert await memory_store.get(trace.id) == trace


@pytest.mark.asyncio
async def test_returns_copies(memory_store: MemoryTraceStore, trace_factory):
    trace = trace_factory()
    await memory_store.save(trace)

    first = await memory_store.get(trace.id)
    second = await memory_store.get(trace.id)
    assert first is not None and second is not None
    assert first is not second
    assert first.metadata is not second.metadata
    assert first.metadata is not None
    first.metadata["mutated"] = True
    assert await memory_store.get(trace.id) == trace


@pytest.mark.asyncio
async def test_get_missing(memory_store: MemoryTraceStore):
    assert await memory_store.get("nope") is None


@pytest.mark.asyncio
async def test_list_newest_first(memory_store: MemoryTraceStore, trace_factory):
    base = datetime(2025, 1, 1, tzinfo=UTC)
    await memory_store.save(trace_factory("Old", start_time=base))
    await memory_store.save(trace_factory("New", start_time=base + timedelta(hours=1)))
    await memory_store.save(trace_factory("Tie", trace_id="a-tie", start_time=base))

    assert [i.name for i in await memory_store.list()] == ["New", "Tie", "Old"]


@pytest.mark.asyncio
async def test_update(memory_store: MemoryTraceStore, trace_factory):
    trace = trace_factory()
    await memory_store.save(trace)

    updated = await memory_store.update(trace.id, {"description": "annotated"})
    assert updated is not None
    assert updated.description == "annotated"
    assert await memory_store.get(trace.id) == updated
    assert await memory_store.update("missing", {"description": "x"}) is None


@pytest.mark.asyncio
async def test_update_rejects_id_change(memory_store: MemoryTraceStore, trace_factory):
    trace = trace_factory()
    await memory_store.save(trace)
    with pytest.raises(ValueError):
        await memory_store.update(trace.id, {"id": "other"})


@pytest.mark.asyncio
async def test_delete_and_clear(memory_store: MemoryTraceStore, trace_factory):
    for i in range(3):
        await memory_store.save(trace_factory(trace_id=f"t{i}"))

    assert await memory_store.delete("t0") is True
    assert await memory_store.delete("t0") is False
    assert await memory_store.clear() == 2
    assert await memory_store.list() == []


@pytest.mark.asyncio
async def test_rejects_invalid_id(memory_store: MemoryTraceStore):
    with pytest.raises(ValueError):
        await memory_store.get("")


@pytest.mark.asyncio
async def test_rejects_nul_in_id(memory_store: MemoryTraceStore, trace_factory):
    with pytest.raises(ValueError):
        await memory_store.save(trace_factory(trace_id="a\x00b"))


@pytest.mark.asyncio
async def test_update_with_naive_start_time_keeps_listing_sortable(memory_store: MemoryTraceStore, trace_factory):
    await memory_store.save(trace_factory(trace_id="a"))
    await memory_store.save(trace_factory(trace_id="b"))

    updated = await memory_store.update("b", {"startTime": "2025-01-02T12:00:00"})

    assert updated is not None
    assert updated.start_time == datetime(2025, 1, 2, 12, 0, tzinfo=UTC)
    assert [i.id for i in await memory_store.list()] == ["b", "a"]
