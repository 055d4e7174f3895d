"""
Record validation: raw form input in, validated record or field errors out.

Key patterns:
- Explicit Result type instead of exceptions for user-recoverable failures
- All fields are checked in declared order and every problem is reported,
  so a form can show all inline errors after a single submit
- All-or-nothing: any error means no record is built
- Exceptions only for defects (unknown record kind, broken catalog)
"""

import re
from collections.abc import Mapping, Sequence
from datetime import UTC, date, datetime, time, tzinfo
from typing import Any, Generic, TypeVar
from uuid import uuid4

import structlog

from carelog.config import AppConfig, ValidationConfig, get_config
from carelog.domain.models import (
    CHOICE_KINDS,
    NUMERIC_KINDS,
    TEXT_KINDS,
    BabyRecord,
    Category,
    ErrorKind,
    FieldDescriptor,
    FieldError,
    FieldKind,
    MotherRecord,
    RecordKindSchema,
)
from carelog.domain.time_format import is_strict_24_hour, normalize_to_24_hour, resolve_timezone
from carelog.services.coercion import CoercionError, RawValue, format_number, to_canonical
from carelog.services.schema_registry import require

logger = structlog.get_logger(__name__)

ValueT = TypeVar("ValueT")
ErrorT = TypeVar("ErrorT")

_ISO_DATE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")

# Field ids whose canonical value is stored under a different record attribute.
_ATTRIBUTE_NAMES = {"duration": "durationMinutes"}

# Choice fields whose option values are stored as integers.
_INTEGER_CHOICES = frozenset({"jaundiceLevel", "painLevel"})

_COERCION_ERROR_KINDS = {
    FieldKind.NUMBER: ErrorKind.INVALID_NUMBER,
    FieldKind.DURATION: ErrorKind.INVALID_NUMBER,
    FieldKind.TIME_OF_DAY: ErrorKind.TIME_FORMAT,
    FieldKind.SINGLE_SELECT: ErrorKind.INVALID_CHOICE,
    FieldKind.RADIO_GROUP: ErrorKind.INVALID_CHOICE,
    FieldKind.CHECKBOX: ErrorKind.INVALID_CHOICE,
}


class RecordValidationError(ValueError):
    """Raised when a failed validation result is unwrapped."""

    def __init__(self, errors: Sequence[FieldError]) -> None:
        self.errors = list(errors)
        super().__init__("; ".join(error.message for error in self.errors))


class Result(Generic[ValueT, ErrorT]):
    """
    Explicit error handling without exceptions for expected failures.

    Holds either a value or an error. Validation returns one of these so
    callers branch on ``is_ok()`` instead of catching.
    """

    def __init__(self, value: ValueT | None = None, error: ErrorT | None = None) -> None:
        if value is not None and error is not None:
            raise ValueError("Result cannot have both value and error")
        if value is None and error is None:
            raise ValueError("Result must have either value or error")
        self._value: ValueT | None = value
        self._error: ErrorT | None = error

    @classmethod
    def ok(cls, value: ValueT) -> "Result[ValueT, ErrorT]":
        return cls(value=value)

    @classmethod
    def err(cls, error: ErrorT) -> "Result[ValueT, ErrorT]":
        return cls(error=error)

    def is_ok(self) -> bool:
        return self._error is None

    def is_err(self) -> bool:
        return self._error is not None

    def unwrap(self) -> ValueT:
        if self._error is not None:
            if isinstance(self._error, BaseException):
                raise self._error
            raise RecordValidationError(self._error)  # type: ignore[arg-type]
        return self._value  # type: ignore

    def unwrap_or(self, default: ValueT) -> ValueT:
        return self._value if self._error is None else default  # type: ignore

    def unwrap_err(self) -> ErrorT:
        if self._error is None:
            raise ValueError("Called unwrap_err() on an Ok value")
        return self._error


def _error(field_id: str, kind: ErrorKind, message: str) -> FieldError:
    return FieldError(field_id=field_id, kind=kind, message=message)


def _on_step(value: int | float, base: int | float, step: float) -> bool:
    # 36.8 - 30 is 6.799999999999997 in binary floats.
    steps = (value - base) / step
    return abs(steps - round(steps)) < 1e-6


def check_field(
    field: FieldDescriptor, raw: RawValue, limits: ValidationConfig
) -> tuple[Any, list[FieldError]]:
    """
    Coerce and check one field.

    Returns the canonical value (``None`` when absent or unusable) and the
    errors found for this field.
    """
    try:
        value = to_canonical(field, raw)
    except CoercionError as e:
        kind = _COERCION_ERROR_KINDS.get(field.kind, ErrorKind.INVALID_CHOICE)
        return None, [_error(field.id, kind, str(e))]

    if field.kind in TEXT_KINDS and value is not None:
        value = value.strip() or None
        if value is not None and len(value) > limits.notes_max_length:
            return None, [
                _error(
                    field.id,
                    ErrorKind.TEXT_TOO_LONG,
                    f"{field.label} mag maximaal {limits.notes_max_length} karakters bevatten",
                )
            ]

    if value is None:
        if field.required:
            message = f"{field.label} is verplicht"
            return None, [_error(field.id, ErrorKind.FIELD_REQUIRED, message)]
        return None, []

    if field.kind in NUMERIC_KINDS:
        lower = field.min
        if lower is None and field.kind is FieldKind.DURATION:
            lower = 0
        if lower is not None and value < lower:
            message = f"{field.label} moet minimaal {format_number(lower)} zijn"
            return None, [_error(field.id, ErrorKind.RANGE, message)]
        if field.max is not None and value > field.max:
            message = f"{field.label} mag maximaal {format_number(field.max)} zijn"
            return None, [_error(field.id, ErrorKind.RANGE, message)]
        if field.step is not None and not _on_step(value, lower or 0, field.step):
            step = format_number(field.step)
            message = f"{field.label} moet in stappen van {step} worden ingevoerd"
            return None, [_error(field.id, ErrorKind.RANGE, message)]

    if field.kind in CHOICE_KINDS and value not in field.option_values:
        message = f"Ongeldige keuze voor {field.label}"
        return None, [_error(field.id, ErrorKind.INVALID_CHOICE, message)]

    if field.kind is FieldKind.TIME_OF_DAY and not is_strict_24_hour(normalize_to_24_hour(value)):
        return None, [
            _error(
                field.id,
                ErrorKind.TIME_FORMAT,
                f"{field.label} moet in 24-uurs notatie (HH:MM) worden ingevoerd",
            )
        ]

    return value, []


def parse_timestamp(value: datetime | str, tz: tzinfo) -> datetime | None:
    """Read a timestamp as UTC; naive values are local wall time in ``tz``."""
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.strip())
        except ValueError:
            return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=tz)
    return value.astimezone(UTC)


def _shift_years(moment: datetime, years: int) -> datetime:
    try:
        return moment.replace(year=moment.year + years)
    except ValueError:
        # 29 February in a non-leap target year.
        return moment.replace(year=moment.year + years, day=28)


def check_timestamp_window(moment: datetime, now: datetime) -> FieldError | None:
    """Reject timestamps more than a year ahead of or two years before ``now``."""
    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    if moment > _shift_years(now, 1):
        message = "Tijdstip mag niet meer dan een jaar in de toekomst liggen"
        return _error("timestamp", ErrorKind.INVALID_TIMESTAMP, message)
    if moment < _shift_years(now, -2):
        message = "Tijdstip mag niet meer dan twee jaar in het verleden liggen"
        return _error("timestamp", ErrorKind.INVALID_TIMESTAMP, message)
    return None


def compose_timestamp(
    date_text: str, time_text: str, tz: tzinfo | None = None
) -> Result[datetime, list[FieldError]]:
    """Combine the date and 24-hour time inputs of a logging form into a UTC timestamp."""
    tz = tz or resolve_timezone(get_config().locale.timezone)
    errors: list[FieldError] = []

    day: date | None = None
    if _ISO_DATE.fullmatch(date_text.strip()):
        try:
            day = date.fromisoformat(date_text.strip())
        except ValueError:
            day = None
    if day is None:
        errors.append(_error("date", ErrorKind.INVALID_TIMESTAMP, "Datum is geen geldige datum"))

    clock = normalize_to_24_hour(time_text)
    if not is_strict_24_hour(clock):
        message = "Tijd moet in 24-uurs notatie (HH:MM) worden ingevoerd"
        errors.append(_error("time", ErrorKind.TIME_FORMAT, message))

    if errors:
        return Result.err(errors)

    hours, minutes = (int(part) for part in clock.split(":"))
    local = datetime.combine(day, time(hours, minutes), tzinfo=tz)  # type: ignore[arg-type]
    return Result.ok(local.astimezone(UTC))


def _record_attributes(schema: RecordKindSchema, values: Mapping[str, Any]) -> dict[str, Any]:
    attributes: dict[str, Any] = {}
    for field_id, value in values.items():
        if field_id in _INTEGER_CHOICES:
            value = int(value)
        attributes[_ATTRIBUTE_NAMES.get(field_id, field_id)] = value

    if schema.id == "blood_pressure":
        attributes["bloodPressure"] = {
            "systolic": attributes.pop("systolic"),
            "diastolic": attributes.pop("diastolic"),
        }
    return attributes


def validate(
    kind_id: str,
    raw_input: Mapping[str, RawValue],
    timestamp: datetime | str,
    *,
    record_id: str | None = None,
    config: AppConfig | None = None,
    now: datetime | None = None,
) -> Result[BabyRecord | MotherRecord, list[FieldError]]:
    """
    Validate raw form input for one record kind.

    When ``now`` is given the timestamp must also fall between two years
    before and one year after it.

    Returns:
        Result with the validated record, or with every field error found.

    Raises:
        UnknownRecordKindError: ``kind_id`` is not in the catalog.
    """
    config = config or get_config()
    schema = require(kind_id)
    log = logger.bind(kind=kind_id)

    errors: list[FieldError] = []
    values: dict[str, Any] = {}
    for field in schema.fields:
        value, field_errors = check_field(field, raw_input.get(field.id), config.validation)
        errors.extend(field_errors)
        if value is not None:
            values[field.id] = value

    moment = parse_timestamp(timestamp, resolve_timezone(config.locale.timezone))
    if moment is None:
        errors.append(
            _error("timestamp", ErrorKind.INVALID_TIMESTAMP, "Tijdstip is geen geldige datum")
        )
    elif now is not None:
        window_error = check_timestamp_window(moment, now)
        if window_error is not None:
            errors.append(window_error)

    if errors:
        log.info(
            "record_validation_failed",
            error_count=len(errors),
            fields=[error.field_id for error in errors],
        )
        return Result.err(errors)

    model = BabyRecord if schema.category is Category.BABY else MotherRecord
    record = model.model_validate(
        {
            "id": record_id or uuid4().hex,
            "timestamp": moment,
            "type": schema.record_type,
            **_record_attributes(schema, values),
        }
    )
    log.debug("record_validated", record_id=record.id)
    return Result.ok(record)
