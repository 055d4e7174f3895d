"""
Domain models for caregiving records and the unified timeline.

These models represent the core business concepts and are framework-agnostic.
They use Pydantic for validation. Everything a persistence collaborator stores
is serialized by alias (camelCase); those names are part of the storage
contract and must not change without a migration.
"""

from datetime import UTC, datetime
from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class Category(str, Enum):
    """Subject a record kind is about."""

    BABY = "baby"
    MOTHER = "mother"


class FieldKind(str, Enum):
    """Editable control types a record kind can declare."""

    SHORT_TEXT = "short-text"
    LONG_TEXT = "long-text"
    NUMBER = "number"
    SINGLE_SELECT = "single-select"
    RADIO_GROUP = "radio-group"
    DURATION = "duration"
    CHECKBOX = "checkbox"
    TIME_OF_DAY = "time-of-day"


CHOICE_KINDS = frozenset({FieldKind.SINGLE_SELECT, FieldKind.RADIO_GROUP})
NUMERIC_KINDS = frozenset({FieldKind.NUMBER, FieldKind.DURATION})
TEXT_KINDS = frozenset({FieldKind.SHORT_TEXT, FieldKind.LONG_TEXT})


class FieldOption(BaseModel):
    """One (value, label) pair of a choice field."""

    model_config = ConfigDict(frozen=True)

    value: str
    label: str


class FieldDescriptor(BaseModel):
    """Metadata describing one editable attribute of a record kind."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    kind: FieldKind
    label: str
    required: bool = False
    placeholder: str | None = None
    min: float | None = None
    max: float | None = None
    step: float | None = Field(default=None, gt=0.0)
    unit: str | None = None
    options: tuple[FieldOption, ...] | None = None

    @model_validator(mode="after")
    def constraints_match_kind(self) -> "FieldDescriptor":
        """Fail fast on descriptors whose constraints do not fit their kind."""
        if self.kind in CHOICE_KINDS:
            if not self.options:
                raise ValueError(f"choice field '{self.id}' must declare options")
            values = [option.value for option in self.options]
            if len(set(values)) != len(values):
                raise ValueError(f"choice field '{self.id}' has duplicate option values")
        elif self.options is not None:
            raise ValueError(f"field '{self.id}' of kind {self.kind.value} cannot declare options")

        if self.kind not in NUMERIC_KINDS and any(
            bound is not None for bound in (self.min, self.max, self.step)
        ):
            raise ValueError(
                f"field '{self.id}' of kind {self.kind.value} cannot declare min/max/step"
            )
        if self.min is not None and self.max is not None and self.min > self.max:
            raise ValueError(f"field '{self.id}' has min above max")
        return self

    @property
    def option_values(self) -> tuple[str, ...]:
        return tuple(option.value for option in self.options or ())

    def option_label(self, value: str) -> str | None:
        for option in self.options or ():
            if option.value == value:
                return option.label
        return None


class RecordKindSchema(BaseModel):
    """An ordered set of field descriptors registered under one record kind."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    label: str
    icon: str
    category: Category
    fields: tuple[FieldDescriptor, ...] = Field(min_length=1)
    record_type: str = Field(
        default="", description="Type tag written on records; defaults to the kind id"
    )

    @model_validator(mode="before")
    @classmethod
    def default_record_type(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("record_type"):
            data = {**data, "record_type": data.get("id", "")}
        return data

    @model_validator(mode="after")
    def unique_field_ids(self) -> "RecordKindSchema":
        ids = [field.id for field in self.fields]
        if len(set(ids)) != len(ids):
            raise ValueError(f"record kind '{self.id}' has duplicate field ids")
        return self

    def field(self, field_id: str) -> FieldDescriptor | None:
        for descriptor in self.fields:
            if descriptor.id == field_id:
                return descriptor
        return None


class ErrorKind(str, Enum):
    """User-recoverable validation failures."""

    FIELD_REQUIRED = "field-required"
    RANGE = "range"
    INVALID_CHOICE = "invalid-choice"
    TIME_FORMAT = "time-format"
    INVALID_NUMBER = "invalid-number"
    TEXT_TOO_LONG = "text-too-long"
    INVALID_TIMESTAMP = "invalid-timestamp"


class FieldError(BaseModel):
    """A validation problem scoped to one field, shown inline on the form."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    field_id: str = Field(alias="fieldId")
    kind: ErrorKind
    message: str


def _utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        raise ValueError("timestamp must include timezone info")
    return value.astimezone(UTC)


class _Stored(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(min_length=1)
    timestamp: datetime

    @field_validator("timestamp")
    def timestamp_in_utc(cls, v: datetime) -> datetime:
        return _utc(v)


class BloodPressure(BaseModel):
    model_config = ConfigDict(frozen=True)

    systolic: int | float
    diastolic: int | float


class BabyRecord(_Stored):
    """A validated observation about the baby."""

    subject: Literal["baby"] = "baby"
    type: str
    value: float | None = None
    notes: str | None = None
    duration_minutes: int | None = Field(default=None, ge=0, alias="durationMinutes")
    amount: int | float | None = None
    weight: int | float | None = None
    diaper_type: Literal["wet", "dirty", "both"] | None = Field(default=None, alias="diaperType")
    diaper_amount: Literal["little", "medium", "much"] | None = Field(
        default=None, alias="diaperAmount"
    )
    jaundice_level: int | None = Field(default=None, ge=1, le=5, alias="jaundiceLevel")
    feeding_type: Literal["bottle", "breast_left", "breast_right", "breast_both"] | None = Field(
        default=None, alias="feedingType"
    )
    breast_side: Literal["left", "right", "both"] | None = Field(default=None, alias="breastSide")
    note_category: Literal["general", "question", "todo"] | None = Field(
        default=None, alias="noteCategory"
    )


class MotherRecord(_Stored):
    """A validated observation about the mother."""

    subject: Literal["mother"] = "mother"
    type: str
    value: float | None = None
    notes: str | None = None
    blood_pressure: BloodPressure | None = Field(default=None, alias="bloodPressure")
    pain_level: int | None = Field(default=None, ge=1, le=10, alias="painLevel")
    mood: Literal["excellent", "good", "okay", "low", "very_low"] | None = None
    duration_minutes: int | None = Field(default=None, ge=0, alias="durationMinutes")


ValidatedRecord = Annotated[BabyRecord | MotherRecord, Field(discriminator="subject")]


class AlertLevel(str, Enum):
    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"


class Alert(BaseModel):
    """A caregiver-facing warning, usually raised by a vital sign rule."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(min_length=1)
    timestamp: datetime
    type: AlertLevel
    category: Literal["baby", "mother", "general"]
    message: str
    related_record_id: str | None = Field(default=None, alias="relatedRecordId")
    acknowledged: bool = False
    acknowledged_by: str | None = Field(default=None, alias="acknowledgedBy")
    acknowledged_at: datetime | None = Field(default=None, alias="acknowledgedAt")
    resolution_comment: str | None = Field(default=None, alias="resolutionComment")

    @field_validator("timestamp", "acknowledged_at")
    def timestamps_in_utc(cls, v: datetime | None) -> datetime | None:
        return None if v is None else _utc(v)


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class Task(BaseModel):
    """A to-do item shared between parents and the maternity nurse."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(min_length=1)
    title: str = Field(min_length=1)
    description: str | None = None
    category: Literal["household", "baby_care", "mother_care", "administrative", "other"]
    priority: Literal["low", "medium", "high"] = "medium"
    status: TaskStatus = TaskStatus.PENDING
    assigned_to: Literal["parents", "kraamhulp", "family", "other"] | None = Field(
        default=None, alias="assignedTo"
    )
    created_by: Literal["parents", "kraamhulp"] = Field(alias="createdBy")
    created_at: datetime = Field(alias="createdAt")
    completed_at: datetime | None = Field(default=None, alias="completedAt")
    suggested_by: str | None = Field(default=None, alias="suggestedBy")

    @field_validator("created_at", "completed_at")
    def timestamps_in_utc(cls, v: datetime | None) -> datetime | None:
        return None if v is None else _utc(v)


class EventCategory(str, Enum):
    """Timeline filter categories."""

    BABY = "baby"
    MOTHER = "mother"
    ALERTS = "alerts"
    TASKS = "tasks"


class EventItem(BaseModel):
    """Display-ready projection of a record, alert or task on the timeline."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    timestamp_ms: int = Field(alias="timestampMs")
    category: EventCategory
    icon: str
    title: str
    subtitle: str | None = None
    details: str
    # Back reference for drill-down only.
    source_ref: BabyRecord | MotherRecord | Alert | Task = Field(
        alias="sourceRef", exclude=True, repr=False
    )

    @property
    def timestamp(self) -> datetime:
        return datetime.fromtimestamp(self.timestamp_ms / 1000, tz=UTC)
