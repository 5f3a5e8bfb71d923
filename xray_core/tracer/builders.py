"""Fluent builders that assemble a trace step by step.

A TraceBuilder accumulates finalized steps in the order their ``end()`` was
called. Each StepBuilder is mutable until ``end()``, which freezes it into a
Step record and appends it to the owning trace exactly once.

Builders do no internal locking. A single builder instance must be driven by
one caller; share it across threads or tasks only with external
synchronization.
"""

import inspect
import time
import uuid
from collections.abc import Awaitable, Callable, Iterable, Mapping
from datetime import UTC, datetime
from typing import Any, Self, TypeAlias, TypeVar

from pydantic import BaseModel, TypeAdapter

from xray_core.exceptions import CallbackError, InvalidStateError
from xray_core.logging import get_xray_logger
from xray_core.records import (
    Candidate,
    Filter,
    JsonMap,
    Step,
    StepIO,
    StepType,
    Trace,
    TraceResult,
    TraceStatus,
)

logger = get_xray_logger(__name__)

OnTraceCallback: TypeAlias = Callable[[Trace], Awaitable[None] | None]

_M = TypeVar("_M", bound=BaseModel)

_json_map: TypeAdapter[JsonMap] = TypeAdapter(JsonMap)


def _elapsed_ms(started: float) -> int:
    return max(0, round((time.monotonic() - started) * 1000))


def _coerce_all(model: type[_M], items: Iterable[_M | Mapping[str, Any]]) -> tuple[_M, ...]:
    """Validate mappings into records and deep-copy record instances."""
    return tuple(item.model_copy(deep=True) if isinstance(item, model) else model.model_validate(item) for item in items)


class StepBuilder:
    """Accumulates the fields of one step until ``end()`` is called.

    Setters replace their field wholesale, except ``metadata()`` which
    shallow-merges. Every setter returns the builder for chaining.

    Example:
        >>> await (
        ...     trace.step("Search", StepType.SEARCH)
        ...     .input({"q": "bottle"})
        ...     .output({"count": 5})
        ...     .reasoning("matched 5 items")
        ...     .end()
        ...     .end()
        ... )
    """

    def __init__(self, trace: "TraceBuilder", name: str, type: StepType | str = StepType.CUSTOM) -> None:
        self._trace = trace
        self._started = time.monotonic()
        self._id = str(uuid.uuid4())
        self._name = name
        self._type = StepType(type)
        self._timestamp = datetime.now(UTC)
        self._input = StepIO()
        self._output = StepIO()
        self._reasoning = ""
        self._filters: tuple[Filter, ...] | None = None
        self._candidates: tuple[Candidate, ...] | None = None
        self._metadata: JsonMap | None = None
        self._ended = False

    @property
    def id(self) -> str:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_ended(self) -> bool:
        return self._ended

    def _check_open(self) -> None:
        if self._ended:
            raise InvalidStateError(f"Step '{self._name}' ({self._id}) has already ended")

    def input(self, data: Mapping[str, Any], description: str | None = None) -> Self:
        self._check_open()
        self._input = StepIO(data=dict(data), description=description)
        return self

    def output(self, data: Mapping[str, Any], description: str | None = None) -> Self:
        self._check_open()
        self._output = StepIO(data=dict(data), description=description)
        return self

    def reasoning(self, text: str) -> Self:
        self._check_open()
        self._reasoning = text
        return self

    def filters(self, filters: Iterable[Filter | Mapping[str, Any]]) -> Self:
        self._check_open()
        self._filters = _coerce_all(Filter, filters)
        return self

    def candidates(self, candidates: Iterable[Candidate | Mapping[str, Any]]) -> Self:
        """Replace the evaluated candidates.

        At most one candidate per step is expected to be ``selected``. More
        than one is allowed but logged.
        """
        self._check_open()
        coerced = _coerce_all(Candidate, candidates)
        selected = [c.id for c in coerced if c.selected]
        if len(selected) > 1:
            logger.warning(f"Step '{self._name}' marks {len(selected)} candidates as selected: {selected}")
        self._candidates = coerced
        return self

    def metadata(self, data: Mapping[str, Any]) -> Self:
        self._check_open()
        self._metadata = {**(self._metadata or {}), **_json_map.validate_python(dict(data))}
        return self

    def end(self) -> "TraceBuilder":
        """Freeze the step, append it to the owning trace, and return that trace builder."""
        self._check_open()
        step = Step(
            id=self._id,
            name=self._name,
            type=self._type,
            timestamp=self._timestamp,
            duration=_elapsed_ms(self._started),
            input=self._input,
            output=self._output,
            reasoning=self._reasoning,
            filters=self._filters,
            candidates=self._candidates,
            metadata=self._metadata,
        )
        self._trace._append_step(step)  # pyright: ignore[reportPrivateUsage]
        self._ended = True
        return self._trace


class TraceBuilder:
    """Accumulates ordered steps and finalizes them into a Trace.

    ``end()`` is async because it awaits the completion callback (typically a
    durable write). When it returns, the callback has finished.
    """

    def __init__(
        self,
        name: str,
        description: str | None = None,
        *,
        on_end: OnTraceCallback | None = None,
    ) -> None:
        self._id = str(uuid.uuid4())
        self._name = name
        self._description = description
        self._start_time = datetime.now(UTC)
        self._started = time.monotonic()
        self._steps: list[Step] = []
        self._metadata: JsonMap | None = None
        self._on_end = on_end
        self._trace: Trace | None = None

    @property
    def id(self) -> str:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @property
    def status(self) -> TraceStatus:
        return self._trace.status if self._trace else TraceStatus.RUNNING

    @property
    def is_finished(self) -> bool:
        return self._trace is not None

    @property
    def trace(self) -> Trace | None:
        """The finalized trace, or None while running."""
        return self._trace

    def _check_open(self, action: str) -> None:
        if self._trace is not None:
            raise InvalidStateError(f"Cannot {action}: trace '{self._name}' ({self._id}) has already ended")

    def _append_step(self, step: Step) -> None:
        self._check_open(f"end step '{step.name}'")
        self._steps.append(step)

    def step(self, name: str, type: StepType | str = StepType.CUSTOM) -> StepBuilder:
        """Open a new step. Nothing is appended until the step's ``end()``."""
        self._check_open(f"open step '{name}'")
        return StepBuilder(self, name, type)

    def metadata(self, data: Mapping[str, Any]) -> Self:
        self._check_open("set metadata")
        self._metadata = {**(self._metadata or {}), **_json_map.validate_python(dict(data))}
        return self

    def on_end(self, callback: OnTraceCallback | None) -> Self:
        """Register the completion callback, replacing any previous one."""
        self._check_open("register a completion callback")
        self._on_end = callback
        return self

    def snapshot(self) -> Trace:
        """Return the trace as it stands, finalized or not."""
        if self._trace is not None:
            return self._trace
        return Trace(
            id=self._id,
            name=self._name,
            description=self._description,
            start_time=self._start_time,
            steps=tuple(self._steps),
            metadata=dict(self._metadata) if self._metadata is not None else None,
        )

    async def end(self, result: TraceResult | Mapping[str, Any] | None = None) -> Trace:
        """Finalize the trace and run the completion callback.

        Status is ``failed`` when ``result.success`` is False, otherwise
        ``completed``.

        Raises:
            InvalidStateError: The trace was already finalized.
            CallbackError: The completion callback raised. The trace remains
                finalized and is attached to the error.
        """
        self._check_open("end trace")
        trace_result = TraceResult.model_validate(result) if result is not None else None
        failed = trace_result is not None and not trace_result.success
        trace = Trace(
            id=self._id,
            name=self._name,
            description=self._description,
            start_time=self._start_time,
            end_time=datetime.now(UTC),
            duration=_elapsed_ms(self._started),
            status=TraceStatus.FAILED if failed else TraceStatus.COMPLETED,
            steps=tuple(self._steps),
            metadata=self._metadata,
            result=trace_result,
        )
        self._trace = trace
        logger.debug(f"Trace '{self._name}' ({self._id}) {trace.status} with {len(trace.steps)} steps in {trace.duration}ms")

        if self._on_end is not None:
            try:
                outcome = self._on_end(trace)
                if inspect.isawaitable(outcome):
                    await outcome
            except Exception as e:
                logger.error(f"Completion callback failed for trace '{self._name}' ({self._id}): {e}")
                raise CallbackError(f"Completion callback failed for trace {self._id}: {e}", trace) from e

        return trace

    async def fail(self, error: str) -> Trace:
        """Finalize the trace as a failed pipeline run with ``error`` as the summary."""
        return await self.end(TraceResult(success=False, summary=error))
