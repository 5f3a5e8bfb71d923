"""Common test fixtures for X-Ray Core."""

from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from xray_core.records import Candidate, Evaluation, Filter, Step, StepIO, StepType, Trace, TraceResult, TraceStatus
from xray_core.trace_store import LocalTraceStore, MemoryTraceStore, set_trace_store
from xray_core.tracer import reset


@pytest.fixture(autouse=True)
def _reset_process_state():
    """Clear the process-wide callback and store singleton after each test."""
    yield
    reset()
    set_trace_store(None)


@pytest.fixture
def local_store(tmp_path: Path) -> LocalTraceStore:
    return LocalTraceStore(base_path=tmp_path)


@pytest.fixture
def memory_store() -> MemoryTraceStore:
    return MemoryTraceStore()


@pytest.fixture
def trace_factory():
    """Factory for finalized traces with fully populated steps."""
    return make_trace


def make_trace(
    name: str = "Demo",
    *,
    trace_id: str | None = None,
    start_time: datetime | None = None,
    steps: int = 1,
    status: TraceStatus = TraceStatus.COMPLETED,
) -> Trace:
    """Build a finalized trace with fully populated steps."""
    start = start_time or datetime(2025, 1, 1, 12, 0, tzinfo=UTC)
    built_steps = tuple(
        Step(
            id=f"step-{i}",
            name=f"Step {i}",
            type=StepType.RANK,
            timestamp=start + timedelta(milliseconds=i),
            duration=3,
            input=StepIO(description="candidates in", data={"count": 2, "tags": ["a", None]}),
            output=StepIO(data={"winner": "p1"}),
            reasoning="p1 scored highest",
            filters=(Filter(name="min_rating", rule="rating >= 3.8", value=3.8),),
            candidates=(
                Candidate(
                    id="p1",
                    label="Bottle A",
                    metrics={"rating": 4.5, "reviews": 1200},
                    evaluations=(Evaluation(id="rating", label="Rating", passed=True, detail="4.5 >= 3.8", value=4.5),),
                    qualified=True,
                    selected=True,
                ),
                Candidate(id="p2", label="Bottle B", qualified=False),
            ),
            metadata={"model": "ranker-v1"},
        )
        for i in range(steps)
    )
    return Trace(
        id=trace_id or f"trace-{name.lower()}",
        name=name,
        description="test trace",
        start_time=start,
        end_time=start + timedelta(seconds=1),
        duration=1000,
        status=status,
        steps=built_steps,
        metadata={"env": "test"},
        result=TraceResult(success=status != TraceStatus.FAILED, summary="done", data={"selected": "p1"}),
    )
