"""
Field value coercion between form controls and canonical values.

Each field kind maps raw form input to its canonical value and back. The
mapping is a lookup table keyed by ``FieldKind``; adding a kind means adding
one pair of functions, not a subclass.

Canonical values:
- number: int or float, ``None`` when empty (never an implicit 0)
- duration: total minutes as an int
- time-of-day: ``HH:MM`` text once complete, raw text otherwise
- single-select / radio-group: the option value as text
- checkbox: bool
- short-text / long-text: the string as typed

Coercion never clamps or rejects out-of-range input; range, choice and
format checks belong to the validator. Input that cannot be read as the
field's type at all raises ``CoercionError``.
"""

import math
import re
from collections.abc import Callable, Mapping
from typing import Any, NamedTuple

from carelog.domain.models import FieldDescriptor, FieldKind
from carelog.domain.time_format import is_strict_24_hour, normalize_to_24_hour

_INTEGER_TEXT = re.compile(r"[+-]?[0-9]+")
_DECIMAL_TEXT = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?")
_PARTIAL_TIME = re.compile(r"([01]?[0-9]|2[0-3])(:([0-5][0-9]?)?)?")


class CoercionError(ValueError):
    """Raw input cannot be read as the field's value type."""

    def __init__(self, field_id: str, message: str) -> None:
        super().__init__(message)
        self.field_id = field_id


class DurationParts(NamedTuple):
    """Hours/minutes split of a duration as edited in the form."""

    hours: int | str
    minutes: int | str


RawValue = str | int | float | bool | DurationParts | Mapping[str, Any] | None

# Duration helpers


def compose_duration(hours: int, minutes: int) -> int:
    return hours * 60 + minutes


def split_duration(total_minutes: int) -> DurationParts:
    """Decompose total minutes into whole hours and the remaining minutes."""
    return DurationParts(*divmod(total_minutes, 60))


def _sub_field(raw: Any) -> int:
    # Empty or unreadable sub-field text counts as zero, like the form controls.
    if raw is None or isinstance(raw, bool):
        return 0
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return int(raw) if math.isfinite(raw) else 0
    text = str(raw).strip()
    if _INTEGER_TEXT.fullmatch(text):
        return int(text)
    if _DECIMAL_TEXT.fullmatch(text):
        value = float(text)
        return int(value) if math.isfinite(value) else 0
    return 0


def set_duration_hours(total_minutes: int | None, hours: Any) -> int:
    """Replace the hours part of a duration, keeping its minutes."""
    current = split_duration(total_minutes or 0)
    return compose_duration(_sub_field(hours), current.minutes)


def set_duration_minutes(total_minutes: int | None, minutes: Any) -> int:
    """Replace the minutes part of a duration, keeping its hours."""
    current = split_duration(total_minutes or 0)
    return compose_duration(current.hours, _sub_field(minutes))


# Time-of-day helpers


def is_partial_time(text: str) -> bool:
    """True for text that can still grow into a valid 24-hour time."""
    return text == "" or _PARTIAL_TIME.fullmatch(text) is not None


def accept_time_keystroke(current: str, typed: str) -> str:
    """Return the text the time input should show after an edit."""
    return typed if is_partial_time(typed) else current


def commit_time(text: str) -> str:
    """Zero-pad a complete 24-hour time to ``HH:MM``; leave anything else as typed."""
    if not is_strict_24_hour(text):
        return text
    hours, minutes = text.split(":")
    return f"{hours.zfill(2)}:{minutes}"


# Raw -> canonical


def _is_blank(raw: Any) -> bool:
    return raw is None or (isinstance(raw, str) and not raw.strip())


def _number_to_canonical(field: FieldDescriptor, raw: RawValue) -> int | float | None:
    if _is_blank(raw):
        return None
    if isinstance(raw, bool) or isinstance(raw, Mapping):
        raise CoercionError(field.id, f"{field.label} moet een geldig getal zijn")
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        if not math.isfinite(raw):
            raise CoercionError(field.id, f"{field.label} moet een geldig getal zijn")
        return raw

    text = str(raw).strip()
    if _INTEGER_TEXT.fullmatch(text):
        return int(text)
    if _DECIMAL_TEXT.fullmatch(text):
        value = float(text)
        if math.isfinite(value):
            return value
    raise CoercionError(field.id, f"{field.label} moet een geldig getal zijn")


def _duration_to_canonical(field: FieldDescriptor, raw: RawValue) -> int | None:
    if _is_blank(raw):
        return None
    if isinstance(raw, DurationParts):
        return compose_duration(_sub_field(raw.hours), _sub_field(raw.minutes))
    if isinstance(raw, Mapping):
        return compose_duration(_sub_field(raw.get("hours")), _sub_field(raw.get("minutes")))

    total = _number_to_canonical(field, raw)
    if total is None:
        return None
    if isinstance(total, float):
        if not total.is_integer():
            raise CoercionError(field.id, f"{field.label} moet een heel aantal minuten zijn")
        return int(total)
    return total


def _time_to_canonical(field: FieldDescriptor, raw: RawValue) -> str | None:
    if _is_blank(raw):
        return None
    if not isinstance(raw, str):
        raise CoercionError(field.id, f"{field.label} moet een tijd (HH:MM) zijn")
    return commit_time(normalize_to_24_hour(raw))


def _choice_to_canonical(field: FieldDescriptor, raw: RawValue) -> str | None:
    if _is_blank(raw):
        return None
    if isinstance(raw, bool) or isinstance(raw, Mapping):
        raise CoercionError(field.id, f"Ongeldige keuze voor {field.label}")
    return str(raw)


def _checkbox_to_canonical(field: FieldDescriptor, raw: RawValue) -> bool | None:
    if raw is None:
        return None
    if not isinstance(raw, bool):
        raise CoercionError(field.id, f"{field.label} moet aan of uit zijn")
    return raw


def _text_to_canonical(field: FieldDescriptor, raw: RawValue) -> str | None:
    if raw is None:
        return None
    return raw if isinstance(raw, str) else str(raw)


# Canonical -> raw


def format_number(value: int | float) -> str:
    """Render a number without a trailing ``.0`` for whole values."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _number_to_raw(field: FieldDescriptor, value: Any) -> str:
    return "" if value is None else format_number(value)


def _duration_to_raw(field: FieldDescriptor, value: Any) -> DurationParts:
    return split_duration(value or 0)


def _text_to_raw(field: FieldDescriptor, value: Any) -> str:
    return "" if value is None else str(value)


def _checkbox_to_raw(field: FieldDescriptor, value: Any) -> bool:
    return bool(value)


_TO_CANONICAL: dict[FieldKind, Callable[[FieldDescriptor, RawValue], Any]] = {
    FieldKind.SHORT_TEXT: _text_to_canonical,
    FieldKind.LONG_TEXT: _text_to_canonical,
    FieldKind.NUMBER: _number_to_canonical,
    FieldKind.SINGLE_SELECT: _choice_to_canonical,
    FieldKind.RADIO_GROUP: _choice_to_canonical,
    FieldKind.DURATION: _duration_to_canonical,
    FieldKind.CHECKBOX: _checkbox_to_canonical,
    FieldKind.TIME_OF_DAY: _time_to_canonical,
}

_TO_RAW: dict[FieldKind, Callable[[FieldDescriptor, Any], Any]] = {
    FieldKind.SHORT_TEXT: _text_to_raw,
    FieldKind.LONG_TEXT: _text_to_raw,
    FieldKind.NUMBER: _number_to_raw,
    FieldKind.SINGLE_SELECT: _text_to_raw,
    FieldKind.RADIO_GROUP: _text_to_raw,
    FieldKind.DURATION: _duration_to_raw,
    FieldKind.CHECKBOX: _checkbox_to_raw,
    FieldKind.TIME_OF_DAY: _text_to_raw,
}


def to_canonical(field: FieldDescriptor, raw: RawValue) -> Any:
    """
    Convert raw form input to the field's canonical value.

    Returns ``None`` when the input holds no value.

    Raises:
        CoercionError: the input cannot be read as the field's type.
    """
    return _TO_CANONICAL[field.kind](field, raw)


def to_raw(field: FieldDescriptor, value: Any) -> Any:
    """Convert a canonical value back to what the field's form control displays."""
    return _TO_RAW[field.kind](field, value)
