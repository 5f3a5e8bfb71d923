"""Frozen record models for traces and their steps.

Field names are snake_case in Python and camelCase in the persisted JSON form.
Optional fields that are absent are omitted from serialized output, so a
stored trace carries ``endTime``/``duration``/``result`` only once finalized.

Open payloads (metadata, step input/output data, candidate metrics) accept any
JSON value: null, bool, number, string, list, or a nested string-keyed mapping.
Freezing is shallow: fields cannot be reassigned, but payload mappings are
plain dicts. Stores hand out deep copies, so mutating a returned payload never
changes a persisted record.

Timestamps without an offset are taken to be UTC.
"""

from datetime import UTC, datetime
from enum import StrEnum
from typing import Annotated, Any

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    JsonValue,
    SerializerFunctionWrapHandler,
    model_serializer,
)
from pydantic.alias_generators import to_camel

JsonMap = dict[str, JsonValue]


def _as_utc(value: datetime) -> datetime:
    return value.replace(tzinfo=UTC) if value.tzinfo is None else value


UtcDatetime = Annotated[datetime, AfterValidator(_as_utc)]


class StepType(StrEnum):
    """Step classification, used for presentation only."""

    TRANSFORM = "transform"
    FILTER = "filter"
    LLM = "llm"
    SEARCH = "search"
    RANK = "rank"
    CUSTOM = "custom"


class TraceStatus(StrEnum):
    """Trace lifecycle status."""

    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    @model_serializer(mode="wrap")
    def _omit_absent(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        data = handler(self)
        return {key: value for key, value in data.items() if value is not None}


class Evaluation(_Record):
    """One pass/fail test applied to a candidate."""

    id: str
    label: str
    passed: bool
    detail: str
    value: JsonValue = None


class Candidate(_Record):
    """An item evaluated within a step."""

    id: str
    label: str
    metrics: JsonMap = Field(default_factory=dict)
    evaluations: tuple[Evaluation, ...] | None = None
    qualified: bool
    selected: bool | None = None


class Filter(_Record):
    """A selection rule applied during a step, independent of any candidate."""

    name: str
    rule: str
    value: JsonValue = None


class StepIO(_Record):
    """Input or output payload of a step."""

    description: str | None = None
    data: JsonMap = Field(default_factory=dict)


class Step(_Record):
    """One finalized unit of work inside a trace."""

    id: str
    name: str
    type: StepType = StepType.CUSTOM
    timestamp: UtcDatetime
    duration: int = Field(ge=0)
    input: StepIO = Field(default_factory=StepIO)
    output: StepIO = Field(default_factory=StepIO)
    reasoning: str = ""
    filters: tuple[Filter, ...] | None = None
    candidates: tuple[Candidate, ...] | None = None
    metadata: JsonMap | None = None

    @property
    def selected_candidates(self) -> list[Candidate]:
        """Candidates flagged as the chosen output of the process."""
        return [c for c in self.candidates or () if c.selected]


class TraceResult(_Record):
    """Outcome attached to a trace when it is finalized."""

    success: bool
    summary: str
    data: JsonMap | None = None


class TraceListItem(_Record):
    """Lightweight summary of a stored trace, without step bodies."""

    id: str
    name: str
    status: TraceStatus
    start_time: UtcDatetime
    duration: int | None = None
    steps_count: int


class Trace(_Record):
    """Complete record of one instrumented pipeline run."""

    id: str
    name: str
    description: str | None = None
    start_time: UtcDatetime
    end_time: UtcDatetime | None = None
    duration: int | None = None
    status: TraceStatus = TraceStatus.RUNNING
    steps: tuple[Step, ...] = ()
    metadata: JsonMap | None = None
    result: TraceResult | None = None

    def list_item(self) -> TraceListItem:
        """Build the storage summary for this trace."""
        return TraceListItem(
            id=self.id,
            name=self.name,
            status=self.status,
            start_time=self.start_time,
            duration=self.duration,
            steps_count=len(self.steps),
        )

    def to_json(self) -> str:
        """Serialize to the persisted JSON form (camelCase, absent fields omitted)."""
        return self.model_dump_json(by_alias=True, indent=2)

    @classmethod
    def from_json(cls, data: str | bytes) -> "Trace":
        """Parse a trace from its persisted JSON form."""
        return cls.model_validate_json(data)
