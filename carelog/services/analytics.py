"""
Per-day series for the analytics charts.

Each function groups validated records by local calendar day within an
inclusive date range. Counts include every day of the range (0 when
nothing was logged); averages and totals only include days with data.
Days are ordered oldest first and labeled ``DD/MM`` for the chart axis.
"""

import statistics
from collections import defaultdict
from collections.abc import Callable, Iterable
from datetime import date, datetime, time, timedelta, tzinfo

import structlog
from pydantic import BaseModel, ConfigDict

from carelog.config import get_config
from carelog.domain.models import BabyRecord, MotherRecord
from carelog.domain.time_format import format_date_short, resolve_timezone

logger = structlog.get_logger(__name__)


class DailyValue(BaseModel):
    """One point of a daily chart series."""

    model_config = ConfigDict(frozen=True)

    day: date
    label: str
    value: int | float


Record = BabyRecord | MotherRecord


def _zone(tz: tzinfo | None) -> tzinfo:
    return tz or resolve_timezone(get_config().locale.timezone)


def _point(day: date, value: int | float, tz: tzinfo) -> DailyValue:
    label = format_date_short(datetime.combine(day, time(12), tzinfo=tz), tz)
    return DailyValue(day=day, label=label, value=value)


def _group_by_day(
    records: Iterable[Record],
    start: date,
    end: date,
    tz: tzinfo,
    read: Callable[[Record], int | float | None],
) -> dict[date, list[int | float]]:
    grouped: dict[date, list[int | float]] = defaultdict(list)
    for record in records:
        day = record.timestamp.astimezone(tz).date()
        if not start <= day <= end:
            continue
        value = read(record)
        if value is not None:
            grouped[day].append(value)
    return grouped


def _averages(grouped: dict[date, list[int | float]], tz: tzinfo) -> list[DailyValue]:
    return [_point(day, statistics.fmean(values), tz) for day, values in sorted(grouped.items())]


def daily_feeding_count(
    records: Iterable[BabyRecord], start: date, end: date, tz: tzinfo | None = None
) -> list[DailyValue]:
    """Number of feedings per day, with every day of the range present."""
    zone = _zone(tz)
    grouped = _group_by_day(
        records, start, end, zone, lambda r: 1 if r.type == "feeding" else None
    )

    series: list[DailyValue] = []
    day = start
    while day <= end:
        series.append(_point(day, len(grouped.get(day, [])), zone))
        day += timedelta(days=1)
    logger.debug("daily_series_built", series="feeding_count", days=len(series))
    return series


def daily_weights(
    records: Iterable[BabyRecord], start: date, end: date, tz: tzinfo | None = None
) -> list[DailyValue]:
    """Average weight in grams on days a weight was logged."""
    zone = _zone(tz)
    grouped = _group_by_day(
        records, start, end, zone, lambda r: r.weight if r.type == "weight" else None
    )
    return _averages(grouped, zone)


def daily_temperatures(
    records: Iterable[Record], start: date, end: date, tz: tzinfo | None = None
) -> list[DailyValue]:
    """
    Average temperature per day.

    Pass baby records for the baby chart and mother records for the mother
    chart; both store temperatures under the ``temperature`` type.
    """
    zone = _zone(tz)
    grouped = _group_by_day(
        records, start, end, zone, lambda r: r.value if r.type == "temperature" else None
    )
    return _averages(grouped, zone)


def daily_pain_levels(
    records: Iterable[MotherRecord], start: date, end: date, tz: tzinfo | None = None
) -> list[DailyValue]:
    """Average pain level (1-10) on days pain was logged."""
    zone = _zone(tz)
    grouped = _group_by_day(
        records, start, end, zone, lambda r: r.pain_level if r.type == "pain" else None
    )
    return _averages(grouped, zone)


def daily_sleep_duration(
    records: Iterable[BabyRecord], start: date, end: date, tz: tzinfo | None = None
) -> list[DailyValue]:
    """Total minutes of sleep per day."""
    zone = _zone(tz)
    grouped = _group_by_day(
        records, start, end, zone, lambda r: r.duration_minutes if r.type == "sleep" else None
    )
    return [_point(day, sum(minutes), zone) for day, minutes in sorted(grouped.items())]
