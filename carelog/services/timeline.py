"""
Unified timeline of baby records, mother records, alerts and tasks.

Each source collection goes through its own projector, which builds the
display fields from fixed lookup tables keyed by the record's type tag.
The projected events are merged and sorted newest first. Record types the
tables do not know still get an event with a generic icon and title, so a
new record kind never disappears from the timeline.
"""

from collections.abc import Callable, Iterable, Sequence
from datetime import UTC, datetime, time, timedelta
from typing import Literal, TypeVar

import structlog
from pydantic import BaseModel, ConfigDict

from carelog.domain.models import (
    Alert,
    AlertLevel,
    BabyRecord,
    EventCategory,
    EventItem,
    MotherRecord,
    Task,
    TaskStatus,
)
from carelog.domain.time_format import extract_twelve_hour_markers
from carelog.services.coercion import format_number

logger = structlog.get_logger(__name__)

FilterType = EventCategory | Literal["all"]

FILTER_OPTIONS: tuple[tuple[str, str, str], ...] = (
    ("all", "Alles", "📋"),
    ("baby", "Baby", "👶"),
    ("mother", "Moeder", "👩"),
    ("alerts", "Alerts", "⚠️"),
    ("tasks", "Taken", "✅"),
)

_BABY_ICONS = {
    "sleep": "😴",
    "feeding": "🍼",
    "temperature": "🌡️",
    "diaper": "👶",
    "jaundice": "💛",
    "note": "📝",
    "pumping": "🤱",
    "weight": "⚖️",
}

_BABY_TITLES = {
    "sleep": "Slaap",
    "feeding": "Voeding",
    "temperature": "Temperatuur",
    "diaper": "Luier",
    "jaundice": "Geelzucht",
    "note": "Notitie",
    "pumping": "Kolven",
    "weight": "Gewicht",
}

_MOTHER_ICONS = {
    "temperature": "🌡️",
    "blood_pressure": "💗",
    "mood": "😊",
    "pain": "😣",
    "feeding_session": "🤱",
    "note": "📝",
}

_MOTHER_TITLES = {
    "temperature": "Temperatuur",
    "blood_pressure": "Bloeddruk",
    "mood": "Stemming",
    "pain": "Pijn",
    "feeding_session": "Voedingssessie",
    "note": "Notitie",
}

_FEEDING_TEXT = {
    "breast_left": "Linker borst",
    "breast_right": "Rechter borst",
    "breast_both": "Beide borsten",
}
_DIAPER_TEXT = {"wet": "Nat", "dirty": "Vies", "both": "Nat en vies"}
_BREAST_TEXT = {"left": "Linker", "right": "Rechter", "both": "Beide"}
_MOOD_TEXT = {
    "excellent": "Uitstekend",
    "good": "Goed",
    "okay": "Oké",
    "low": "Laag",
    "very_low": "Zeer laag",
}

_TASK_ICONS = {
    TaskStatus.PENDING: "⏳",
    TaskStatus.IN_PROGRESS: "🔄",
    TaskStatus.COMPLETED: "✅",
}

_ALERT_ICONS = {
    AlertLevel.CRITICAL: "🚨",
    AlertLevel.WARNING: "⚠️",
    AlertLevel.INFO: "ℹ️",
}


def _with_notes(text: str, notes: str | None) -> str:
    return f"{text} - {notes}" if notes else text


def _number(value: int | float | None) -> str:
    return format_number(value or 0)


def _feeding_details(record: BabyRecord) -> str:
    if record.feeding_type == "bottle":
        return _with_notes(f"{_number(record.amount)} ml (fles)", record.notes)
    if record.feeding_type in _FEEDING_TEXT:
        return _with_notes(_FEEDING_TEXT[record.feeding_type], record.notes)
    return record.notes or "Voeding"


def _diaper_details(record: BabyRecord) -> str:
    kind = _DIAPER_TEXT.get(record.diaper_type or "both", "Nat en vies")
    amount = record.diaper_amount or "onbekend"
    return _with_notes(f"{kind} ({amount})", record.notes)


def _pumping_details(record: BabyRecord) -> str:
    side = _BREAST_TEXT.get(record.breast_side or "both", "Beide")
    return _with_notes(f"{side} borst, {_number(record.amount)} ml", record.notes)


def _blood_pressure_details(record: MotherRecord) -> str:
    pressure = record.blood_pressure
    systolic = _number(pressure.systolic if pressure else 0)
    diastolic = _number(pressure.diastolic if pressure else 0)
    return _with_notes(f"{systolic}/{diastolic} mmHg", record.notes)


_BABY_DETAILS: dict[str, Callable[[BabyRecord], str]] = {
    "sleep": lambda r: _with_notes(f"{r.duration_minutes or 0} minuten", r.notes),
    "feeding": _feeding_details,
    "temperature": lambda r: _with_notes(f"{_number(r.value)}°C", r.notes),
    "diaper": _diaper_details,
    "jaundice": lambda r: _with_notes(f"Niveau {r.jaundice_level or 0}", r.notes),
    "pumping": _pumping_details,
    "weight": lambda r: _with_notes(f"{_number(r.weight)} gram", r.notes),
    "note": lambda r: r.notes or "Notitie",
}

_MOTHER_DETAILS: dict[str, Callable[[MotherRecord], str]] = {
    "temperature": lambda r: _with_notes(f"{_number(r.value)}°C", r.notes),
    "blood_pressure": _blood_pressure_details,
    "mood": lambda r: _with_notes(_MOOD_TEXT.get(r.mood or "okay", "Oké"), r.notes),
    "pain": lambda r: _with_notes(f"Niveau {r.pain_level or 0}/10", r.notes),
    "feeding_session": lambda r: _with_notes(f"{r.duration_minutes or 0} minuten", r.notes),
    "note": lambda r: r.notes or "Notitie",
}


def _baby_details(record: BabyRecord) -> str:
    builder = _BABY_DETAILS.get(record.type)
    return builder(record) if builder else record.notes or "Geen details"


def _mother_details(record: MotherRecord) -> str:
    builder = _MOTHER_DETAILS.get(record.type)
    return builder(record) if builder else record.notes or "Geen details"


def _millis(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


def project_baby_record(record: BabyRecord) -> EventItem:
    return EventItem(
        id=record.id,
        timestamp_ms=_millis(record.timestamp),
        category=EventCategory.BABY,
        icon=_BABY_ICONS.get(record.type, "📋"),
        title=_BABY_TITLES.get(record.type, "Onbekend"),
        details=_baby_details(record),
        source_ref=record,
    )


def project_mother_record(record: MotherRecord) -> EventItem:
    return EventItem(
        id=record.id,
        timestamp_ms=_millis(record.timestamp),
        category=EventCategory.MOTHER,
        icon=_MOTHER_ICONS.get(record.type, "👩"),
        title=_MOTHER_TITLES.get(record.type, "Onbekend"),
        details=_mother_details(record),
        source_ref=record,
    )


def project_alert(alert: Alert) -> EventItem:
    return EventItem(
        id=alert.id,
        timestamp_ms=_millis(alert.timestamp),
        category=EventCategory.ALERTS,
        icon=_ALERT_ICONS.get(alert.type, "ℹ️"),
        title="Alert",
        subtitle=alert.type.value,
        details=alert.message,
        source_ref=alert,
    )


def project_task(task: Task) -> EventItem:
    """Tasks have no observation time; they sort by creation time."""
    return EventItem(
        id=task.id,
        timestamp_ms=_millis(task.created_at),
        category=EventCategory.TASKS,
        icon=_TASK_ICONS.get(task.status, "📋"),
        title=task.title,
        subtitle=task.status.value,
        details=task.description or "",
        source_ref=task,
    )


def aggregate(
    baby_records: Iterable[BabyRecord],
    mother_records: Iterable[MotherRecord],
    alerts: Iterable[Alert],
    tasks: Iterable[Task],
) -> list[EventItem]:
    """
    Merge all sources into one timeline, most recent first.

    Events with equal timestamps keep the order baby, mother, alerts, tasks,
    and within a source their input order.
    """
    events = [
        *(project_baby_record(record) for record in baby_records),
        *(project_mother_record(record) for record in mother_records),
        *(project_alert(alert) for alert in alerts),
        *(project_task(task) for task in tasks),
    ]
    events.sort(key=lambda event: event.timestamp_ms, reverse=True)
    logger.debug("timeline_aggregated", event_count=len(events))
    return events


def filter_events(events: Sequence[EventItem], category: FilterType | str) -> list[EventItem]:
    """Return the events of one category in their current order; ``"all"`` keeps everything."""
    if category == "all":
        return list(events)
    wanted = EventCategory(category)
    return [event for event in events if event.category is wanted]


class TwelveHourViolation(BaseModel):
    """An AM/PM marker found in text that is about to be rendered."""

    model_config = ConfigDict(frozen=True)

    event_id: str
    attribute: str
    content: str
    markers: tuple[str, ...]


def find_twelve_hour_violations(events: Iterable[EventItem]) -> list[TwelveHourViolation]:
    """Scan the display text of every event for AM/PM markers."""
    violations: list[TwelveHourViolation] = []
    for event in events:
        for attribute in ("title", "subtitle", "details"):
            content = getattr(event, attribute)
            if not content:
                continue
            markers = extract_twelve_hour_markers(content)
            if markers:
                violations.append(
                    TwelveHourViolation(
                        event_id=event.id,
                        attribute=attribute,
                        content=content.strip(),
                        markers=tuple(markers),
                    )
                )

    if violations:
        logger.warning(
            "twelve_hour_markers_found",
            count=len(violations),
            event_ids=sorted({violation.event_id for violation in violations}),
        )
    return violations


# Record-level filters

RecordT = TypeVar("RecordT", BabyRecord, MotherRecord, Alert)


def _moment(item: BabyRecord | MotherRecord | Alert | Task) -> datetime:
    return item.created_at if isinstance(item, Task) else item.timestamp


def filter_by_date_range(
    records: Iterable[RecordT], start: datetime, end: datetime
) -> list[RecordT]:
    """Keep records from ``start`` through the whole calendar day of ``end``."""
    end_of_day = datetime.combine(end.date(), time.max, tzinfo=end.tzinfo or UTC)
    start = start if start.tzinfo else start.replace(tzinfo=UTC)
    return [record for record in records if start <= record.timestamp <= end_of_day]


def filter_by_record_type(
    records: Iterable[BabyRecord | MotherRecord], record_type: str
) -> list[BabyRecord | MotherRecord]:
    return [record for record in records if record.type == record_type]


def filter_alerts_by_status(alerts: Iterable[Alert], acknowledged: bool) -> list[Alert]:
    return [alert for alert in alerts if alert.acknowledged is acknowledged]


def filter_tasks_by_status(tasks: Iterable[Task], status: TaskStatus | str) -> list[Task]:
    wanted = TaskStatus(status)
    return [task for task in tasks if task.status is wanted]


ItemT = TypeVar("ItemT", BabyRecord, MotherRecord, Alert, Task)


def sort_by_timestamp(items: Iterable[ItemT], ascending: bool = False) -> list[ItemT]:
    return sorted(items, key=_moment, reverse=not ascending)


def recent(items: Iterable[ItemT], days: int, now: datetime) -> list[ItemT]:
    """Keep items from the last ``days`` days before ``now``."""
    cutoff = now - timedelta(days=days)
    return [item for item in items if _moment(item) >= cutoff]
