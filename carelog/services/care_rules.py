"""
Care rules applied to freshly validated records.

Vital sign checks raise alerts, parent questions and requests become tasks
for the maternity nurse. All functions are pure: they take the current
time explicitly and return new alerts/tasks for the caller to persist.
"""

import math
from collections.abc import Iterable
from datetime import datetime
from uuid import uuid4

import structlog

from carelog.config import AlertThresholds, get_config
from carelog.domain.models import Alert, AlertLevel, BabyRecord, MotherRecord, Task, TaskStatus
from carelog.services.coercion import format_number

logger = structlog.get_logger(__name__)

_TITLE_LIMIT = 50


def _new_id() -> str:
    return uuid4().hex


def _alert(
    level: AlertLevel, category: str, message: str, record_id: str, now: datetime
) -> Alert:
    return Alert(
        id=_new_id(),
        timestamp=now,
        type=level,
        category=category,
        message=message,
        related_record_id=record_id,
    )


def _temperature_alert(
    record: BabyRecord, thresholds: AlertThresholds, now: datetime
) -> Alert | None:
    value = record.value
    if value is None:
        return None
    if thresholds.baby_temperature_low <= value <= thresholds.baby_temperature_high:
        return None

    critical = (
        value < thresholds.baby_temperature_critical_low
        or value > thresholds.baby_temperature_critical_high
    )
    direction = "te laag" if value < thresholds.baby_temperature_low else "te hoog"
    return _alert(
        AlertLevel.CRITICAL if critical else AlertLevel.WARNING,
        "baby",
        f"Baby temperatuur is {format_number(value)}°C - {direction}",
        record.id,
        now,
    )


def _jaundice_alert(
    record: BabyRecord, thresholds: AlertThresholds, now: datetime
) -> Alert | None:
    level = record.jaundice_level
    if level is None or level < thresholds.jaundice_warning_level:
        return None
    critical = level >= thresholds.jaundice_critical_level
    return _alert(
        AlertLevel.CRITICAL if critical else AlertLevel.WARNING,
        "baby",
        f"Geelzien niveau {level} - overleg met kraamhulp/arts",
        record.id,
        now,
    )


def _feeding_gap_alert(
    record: BabyRecord,
    history: Iterable[BabyRecord],
    thresholds: AlertThresholds,
    now: datetime,
) -> Alert | None:
    earlier = [
        previous.timestamp
        for previous in history
        if previous.type == "feeding" and previous.timestamp < record.timestamp
    ]
    if not earlier:
        return None

    gap_hours = (record.timestamp - max(earlier)).total_seconds() / 3600
    if gap_hours <= thresholds.feeding_gap_hours:
        return None
    return _alert(
        AlertLevel.WARNING,
        "baby",
        f"Meer dan {format_number(thresholds.feeding_gap_hours)} uur tussen voedingen "
        f"({format_number(math.floor(gap_hours * 10 + 0.5) / 10)} uur)",
        record.id,
        now,
    )


def alerts_for_baby_record(
    record: BabyRecord,
    history: Iterable[BabyRecord],
    now: datetime,
    thresholds: AlertThresholds | None = None,
) -> list[Alert]:
    """Return the alerts a new baby record triggers given the earlier records."""
    thresholds = thresholds or get_config().thresholds

    candidates: list[Alert | None] = []
    if record.type == "temperature":
        candidates.append(_temperature_alert(record, thresholds, now))
    elif record.type == "jaundice":
        candidates.append(_jaundice_alert(record, thresholds, now))
    elif record.type == "feeding":
        candidates.append(_feeding_gap_alert(record, history, thresholds, now))

    alerts = [alert for alert in candidates if alert is not None]
    if alerts:
        logger.info("alerts_raised", record_id=record.id, subject="baby", count=len(alerts))
    return alerts


def alerts_for_mother_record(
    record: MotherRecord, now: datetime, thresholds: AlertThresholds | None = None
) -> list[Alert]:
    """Return the alerts a new mother record triggers."""
    thresholds = thresholds or get_config().thresholds
    alerts: list[Alert] = []

    if record.type == "temperature" and record.value is not None:
        if record.value > thresholds.mother_fever:
            level = (
                AlertLevel.CRITICAL
                if record.value > thresholds.mother_fever_critical
                else AlertLevel.WARNING
            )
            message = f"Moeder heeft koorts: {format_number(record.value)}°C"
            alerts.append(_alert(level, "mother", message, record.id, now))

    if record.type == "blood_pressure" and record.blood_pressure is not None:
        systolic = record.blood_pressure.systolic
        diastolic = record.blood_pressure.diastolic
        abnormal = (
            systolic > thresholds.systolic_high
            or diastolic > thresholds.diastolic_high
            or systolic < thresholds.systolic_low
            or diastolic < thresholds.diastolic_low
        )
        if abnormal:
            critical = (
                systolic > thresholds.systolic_critical_high
                or diastolic > thresholds.diastolic_critical_high
                or systolic < thresholds.systolic_critical_low
            )
            message = (
                "Bloeddruk buiten normale waarden: "
                f"{format_number(systolic)}/{format_number(diastolic)}"
            )
            level = AlertLevel.CRITICAL if critical else AlertLevel.WARNING
            alerts.append(_alert(level, "mother", message, record.id, now))

    if record.type == "pain" and record.pain_level is not None:
        if record.pain_level >= thresholds.pain_warning_level:
            message = f"Hoge pijnklacht: niveau {record.pain_level}/10"
            alerts.append(_alert(AlertLevel.WARNING, "mother", message, record.id, now))

    if alerts:
        logger.info("alerts_raised", record_id=record.id, subject="mother", count=len(alerts))
    return alerts


def _truncate(text: str) -> str:
    return text[:_TITLE_LIMIT] + ("..." if len(text) > _TITLE_LIMIT else "")


def tasks_from_note(record: BabyRecord, now: datetime) -> list[Task]:
    """Turn a parent's question or request note into a task for the maternity nurse."""
    if record.type != "note" or record.note_category not in ("question", "todo"):
        return []

    notes = record.notes or ""
    is_question = record.note_category == "question"
    prefix = "Vraag beantwoorden" if is_question else "Verzoek uitvoeren"
    return [
        Task(
            id=_new_id(),
            title=f"{prefix}: {_truncate(notes)}",
            description=notes,
            category="other" if is_question else "household",
            priority="medium" if is_question else "low",
            status=TaskStatus.PENDING,
            assigned_to="kraamhulp",
            created_by="parents",
            created_at=now,
        )
    ]


def acknowledge_alert(
    alert: Alert, acknowledged_by: str, now: datetime, comment: str | None = None
) -> Alert:
    """Return a copy of ``alert`` marked as handled."""
    update: dict[str, object] = {
        "acknowledged": True,
        "acknowledged_by": acknowledged_by,
        "acknowledged_at": now,
    }
    if comment:
        update["resolution_comment"] = comment.strip()
    return Alert.model_validate({**alert.model_dump(), **update})


def update_task_status(task: Task, status: TaskStatus | str, now: datetime) -> Task:
    """Return a copy of ``task`` in ``status``; completing it stamps ``completed_at``."""
    status = TaskStatus(status)
    completed_at = now if status is TaskStatus.COMPLETED else None
    return Task.model_validate(
        {**task.model_dump(), "status": status, "completed_at": completed_at}
    )
