"""
End-to-end walkthrough of the care logging pipeline.

This script checks:
1. Configuration loading and validation
2. The record-kind catalog
3. Validation of form input, including every error path
4. Care rules raising alerts and tasks
5. Timeline aggregation, filtering and the 24-hour display check

Run with: uv run python system_check.py
"""

from datetime import UTC, datetime, timedelta

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from carelog.config import get_config
from carelog.domain.models import BabyRecord, Category, MotherRecord
from carelog.domain.time_format import format_datetime_24, resolve_timezone
from carelog.services import aggregate, filter_events, list_by_category, validate
from carelog.services.care_rules import (
    alerts_for_baby_record,
    alerts_for_mother_record,
    tasks_from_note,
)
from carelog.services.coercion import DurationParts
from carelog.services.timeline import find_twelve_hour_violations

console = Console()

NOW = datetime.now(UTC).replace(second=0, microsecond=0)

# Form submissions a family might enter during one morning.
SUBMISSIONS = [
    ("feeding", {"feedingType": "bottle", "amount": "90"}, NOW - timedelta(hours=6)),
    ("temperature", {"value": "37.9"}, NOW - timedelta(hours=5)),
    ("sleep", {"duration": DurationParts(1, 45), "notes": "Onrustig"}, NOW - timedelta(hours=4)),
    ("feeding", {"feedingType": "breast_left"}, NOW - timedelta(minutes=30)),
    ("note", {"noteCategory": "question", "notes": "Mag ze al in bad?"}, NOW),
    ("blood_pressure", {"systolic": "145", "diastolic": "92"}, NOW - timedelta(hours=2)),
    ("mood", {"mood": "good"}, NOW - timedelta(hours=1)),
]


def check_configuration() -> bool:
    """Load and display the active configuration."""

    console.print(Panel("🔧 Checking Configuration", style="blue"))

    try:
        config = get_config()
        table = Table(title="Configuration")
        table.add_column("Setting", style="cyan")
        table.add_column("Value", style="white")
        table.add_row("Environment", config.environment)
        table.add_row("Log level", config.logging.level)
        table.add_row("Log format", config.logging.format)
        table.add_row("Timezone", config.locale.timezone)
        table.add_row("Notes max length", str(config.validation.notes_max_length))
        table.add_row("Feeding gap (hours)", str(config.thresholds.feeding_gap_hours))
        console.print(table)
        console.print("✅ Configuration loaded successfully", style="green")
        return True

    except Exception as e:
        console.print(f"❌ Configuration check failed: {e}", style="red")
        return False


def check_catalog() -> bool:
    """List the record kinds per category."""

    console.print(Panel("📋 Checking Record Kinds", style="blue"))

    table = Table(title="Record Kinds")
    table.add_column("Category", style="cyan")
    table.add_column("Kind", style="white")
    table.add_column("Fields", style="white")

    for category in Category:
        for schema in list_by_category(category):
            fields = ", ".join(
                f"{field.id}{'*' if field.required else ''}" for field in schema.fields
            )
            table.add_row(category.value, f"{schema.icon} {schema.label}", fields)

    console.print(table)
    return True


def check_validation() -> tuple[bool, list[BabyRecord], list[MotherRecord]]:
    """Validate the morning's submissions and show rejected input."""

    console.print(Panel("🧾 Checking Validation", style="blue"))

    baby_records: list[BabyRecord] = []
    mother_records: list[MotherRecord] = []
    for kind_id, raw, moment in SUBMISSIONS:
        record = validate(kind_id, raw, moment).unwrap()
        if isinstance(record, BabyRecord):
            baby_records.append(record)
        else:
            mother_records.append(record)
    console.print(f"Accepted {len(baby_records) + len(mother_records)} records", style="green")

    rejected = validate(
        "blood_pressure", {"systolic": "300", "diastolic": ""}, "not a date"
    )
    table = Table(title="Rejected Submission")
    table.add_column("Field", style="cyan")
    table.add_column("Kind", style="yellow")
    table.add_column("Message", style="white")
    for error in rejected.unwrap_err():
        table.add_row(error.field_id, error.kind.value, error.message)
    console.print(table)

    ok = rejected.is_err() and len(rejected.unwrap_err()) == 3
    return ok, baby_records, mother_records


def check_care_rules(baby_records: list[BabyRecord], mother_records: list[MotherRecord]):
    """Run the care rules over the accepted records."""

    console.print(Panel("🚨 Checking Care Rules", style="blue"))

    alerts = []
    tasks = []
    history: list[BabyRecord] = []
    for record in sorted(baby_records, key=lambda r: r.timestamp):
        alerts.extend(alerts_for_baby_record(record, history, NOW))
        tasks.extend(tasks_from_note(record, NOW))
        history.append(record)
    for record in mother_records:
        alerts.extend(alerts_for_mother_record(record, NOW))

    for alert in alerts:
        console.print(f"  [{alert.type.value}] {alert.message}", style="yellow")
    for task in tasks:
        console.print(f"  📝 {task.title}", style="cyan")

    return alerts, tasks


def check_timeline(baby_records, mother_records, alerts, tasks) -> bool:
    """Aggregate everything into the timeline and scan it for 12-hour text."""

    console.print(Panel("🕒 Checking Timeline", style="blue"))

    tz = resolve_timezone(get_config().locale.timezone)
    events = aggregate(baby_records, mother_records, alerts, tasks)

    table = Table(title="Timeline")
    table.add_column("When", style="cyan")
    table.add_column("", style="white")
    table.add_column("Title", style="white")
    table.add_column("Details", style="white")
    for event in events:
        table.add_row(
            format_datetime_24(event.timestamp, tz), event.icon, event.title, event.details
        )
    console.print(table)

    for category in ("baby", "mother", "alerts", "tasks"):
        console.print(f"  {category}: {len(filter_events(events, category))} events")

    violations = find_twelve_hour_violations(events)
    if violations:
        console.print(f"❌ {len(violations)} AM/PM markers on the timeline", style="red")
        return False

    console.print("✅ All times rendered in 24-hour notation", style="green")
    return True


def run_all_checks() -> None:
    """Run all checks."""

    console.print(Panel("👶 Carelog - System Check", style="bold blue"))

    results = [
        ("Configuration", check_configuration()),
        ("Record Kinds", check_catalog()),
    ]

    console.print(f"\n{'=' * 60}")
    valid, baby_records, mother_records = check_validation()
    results.append(("Validation", valid))

    console.print(f"\n{'=' * 60}")
    alerts, tasks = check_care_rules(baby_records, mother_records)
    results.append(("Care Rules", bool(alerts) and bool(tasks)))

    console.print(f"\n{'=' * 60}")
    results.append(("Timeline", check_timeline(baby_records, mother_records, alerts, tasks)))

    # Summary
    console.print(f"\n{'=' * 60}")
    console.print(Panel("📋 Check Results Summary", style="bold"))

    summary_table = Table()
    summary_table.add_column("Check", style="cyan")
    summary_table.add_column("Result", style="white")

    passed = 0
    for name, result in results:
        if result:
            summary_table.add_row(name, "✅ PASSED")
            passed += 1
        else:
            summary_table.add_row(name, "❌ FAILED")

    console.print(summary_table)
    console.print(f"\n🎯 Results: {passed}/{len(results)} checks passed")


if __name__ == "__main__":
    try:
        run_all_checks()
    except KeyboardInterrupt:
        console.print("\n👋 Checks stopped by user", style="yellow")
    except Exception as e:
        console.print(f"\n💥 System check failed: {e}", style="red")
