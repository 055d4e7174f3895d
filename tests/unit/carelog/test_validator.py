"""
Tests for record validation.

Covers:
- Required, range, choice and time-format errors returned as data
- Error accumulation across fields (all problems at once)
- Record shape per kind (camelCase contract, duration, blood pressure)
- Timestamp parsing and the date/time form composition
"""

from datetime import UTC, datetime, timedelta, timezone

import pytest

from carelog.config import AppConfig, LocaleConfig, ValidationConfig
from carelog.domain.models import (
    BabyRecord,
    ErrorKind,
    FieldDescriptor,
    FieldKind,
    MotherRecord,
)
from carelog.services.coercion import DurationParts
from carelog.services.schema_registry import UnknownRecordKindError, require
from carelog.services.validator import (
    RecordValidationError,
    Result,
    check_field,
    check_timestamp_window,
    compose_timestamp,
    parse_timestamp,
    validate,
)

T0 = datetime(2024, 1, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def config() -> AppConfig:
    return AppConfig()


def _kinds(result: Result) -> dict[str, ErrorKind]:
    return {error.field_id: error.kind for error in result.unwrap_err()}


class TestResult:
    def test_ok_result(self) -> None:
        result: Result[str, list] = Result.ok("record")
        assert result.is_ok()
        assert not result.is_err()
        assert result.unwrap() == "record"

    def test_err_result(self) -> None:
        result: Result[str, list] = Result.err(["problem"])
        assert result.is_err()
        assert result.unwrap_or("default") == "default"
        assert result.unwrap_err() == ["problem"]

    def test_unwrap_err_on_ok_raises(self) -> None:
        with pytest.raises(ValueError, match="unwrap_err"):
            Result.ok("record").unwrap_err()

    def test_result_needs_exactly_one_side(self) -> None:
        with pytest.raises(ValueError):
            Result()
        with pytest.raises(ValueError):
            Result(value="a", error=["b"])


class TestRequiredFields:
    def test_feeding_without_type_is_rejected(self, config: AppConfig) -> None:
        result = validate("feeding", {"amount": "120"}, T0, config=config)

        assert result.is_err()
        errors = result.unwrap_err()
        assert [(e.field_id, e.kind) for e in errors] == [("feedingType", ErrorKind.FIELD_REQUIRED)]
        assert errors[0].message == "Type voeding is verplicht"

    def test_unwrap_of_failed_validation_raises_with_errors(self, config: AppConfig) -> None:
        result = validate("feeding", {}, T0, config=config)
        with pytest.raises(RecordValidationError) as exc_info:
            result.unwrap()
        assert [e.field_id for e in exc_info.value.errors] == ["feedingType"]

    def test_blank_required_text_counts_as_missing(self, config: AppConfig) -> None:
        result = validate("mother_note", {"notes": "   "}, T0, config=config)
        assert _kinds(result) == {"notes": ErrorKind.FIELD_REQUIRED}

    def test_optional_fields_may_be_empty(self, config: AppConfig) -> None:
        raw = {"feedingType": "breast_left", "amount": ""}
        record = validate("feeding", raw, T0, config=config).unwrap()
        assert isinstance(record, BabyRecord)
        assert record.amount is None
        assert record.notes is None


class TestRangeAndChoice:
    def test_temperature_above_max(self, config: AppConfig) -> None:
        result = validate("temperature", {"value": 46}, T0, config=config)
        assert _kinds(result) == {"value": ErrorKind.RANGE}
        assert result.unwrap_err()[0].message == "Temperatuur mag maximaal 45 zijn"

    def test_temperature_below_min(self, config: AppConfig) -> None:
        result = validate("temperature", {"value": "29.9"}, T0, config=config)
        assert result.unwrap_err()[0].message == "Temperatuur moet minimaal 30 zijn"

    def test_bounds_are_inclusive(self, config: AppConfig) -> None:
        assert validate("temperature", {"value": 30}, T0, config=config).is_ok()
        assert validate("temperature", {"value": "45"}, T0, config=config).is_ok()

    def test_non_numeric_text(self, config: AppConfig) -> None:
        result = validate("weight", {"weight": "veel"}, T0, config=config)
        assert _kinds(result) == {"weight": ErrorKind.INVALID_NUMBER}

    def test_unknown_option(self, config: AppConfig) -> None:
        result = validate("mood", {"mood": "ecstatic"}, T0, config=config)
        assert _kinds(result) == {"mood": ErrorKind.INVALID_CHOICE}

    def test_negative_duration(self, config: AppConfig) -> None:
        result = validate("sleep", {"duration": -5}, T0, config=config)
        assert _kinds(result) == {"duration": ErrorKind.RANGE}

    def test_errors_accumulate_over_all_fields(self, config: AppConfig) -> None:
        result = validate(
            "blood_pressure", {"systolic": "300", "diastolic": ""}, "not a date", config=config
        )
        assert [(e.field_id, e.kind) for e in result.unwrap_err()] == [
            ("systolic", ErrorKind.RANGE),
            ("diastolic", ErrorKind.FIELD_REQUIRED),
            ("timestamp", ErrorKind.INVALID_TIMESTAMP),
        ]


class TestTextLimits:
    def test_text_is_trimmed(self, config: AppConfig) -> None:
        raw = {"noteCategory": "general", "notes": "  rustige nacht "}
        record = validate("note", raw, T0, config=config).unwrap()
        assert record.notes == "rustige nacht"

    def test_text_longer_than_limit(self) -> None:
        config = AppConfig(validation=ValidationConfig(notes_max_length=10))
        result = validate("mother_note", {"notes": "x" * 11}, T0, config=config)
        assert _kinds(result) == {"notes": ErrorKind.TEXT_TOO_LONG}


class TestTimeOfDayField:
    field = FieldDescriptor(
        id="start", kind=FieldKind.TIME_OF_DAY, label="Begintijd", required=True
    )

    def test_marker_is_stripped_and_padded(self) -> None:
        value, errors = check_field(self.field, "7:15 AM", ValidationConfig())
        assert (value, errors) == ("07:15", [])

    def test_invalid_time_is_a_format_error(self) -> None:
        value, errors = check_field(self.field, "25:00", ValidationConfig())
        assert value is None
        assert [e.kind for e in errors] == [ErrorKind.TIME_FORMAT]

    def test_partial_time_is_a_format_error(self) -> None:
        _, errors = check_field(self.field, "14:", ValidationConfig())
        assert [e.kind for e in errors] == [ErrorKind.TIME_FORMAT]


class TestRecordShape:
    def test_sleep_stores_total_minutes(self, config: AppConfig) -> None:
        record = validate(
            "sleep", {"duration": DurationParts(1, 35), "notes": "onrustig"}, T0, config=config
        ).unwrap()
        assert record.type == "sleep"
        assert record.duration_minutes == 95
        assert record.model_dump(by_alias=True, exclude_none=True)["durationMinutes"] == 95

    def test_blood_pressure_is_nested(self, config: AppConfig) -> None:
        record = validate(
            "blood_pressure", {"systolic": "120", "diastolic": 80}, T0, config=config
        ).unwrap()
        assert isinstance(record, MotherRecord)
        assert record.blood_pressure is not None
        assert (record.blood_pressure.systolic, record.blood_pressure.diastolic) == (120, 80)
        dumped = record.model_dump(by_alias=True, exclude_none=True)
        assert dumped["bloodPressure"] == {"systolic": 120, "diastolic": 80}
        assert "systolic" not in dumped

    def test_level_choices_become_integers(self, config: AppConfig) -> None:
        jaundice = validate("jaundice", {"jaundiceLevel": "4"}, T0, config=config).unwrap()
        pain = validate("pain", {"painLevel": "8"}, T0, config=config).unwrap()
        assert jaundice.jaundice_level == 4
        assert pain.pain_level == 8

    def test_mother_temperature_is_tagged_temperature(self, config: AppConfig) -> None:
        record = validate("mother_temperature", {"value": "38.2"}, T0, config=config).unwrap()
        assert isinstance(record, MotherRecord)
        assert record.type == "temperature"
        assert record.value == 38.2

    def test_record_id_and_timestamp(self, config: AppConfig) -> None:
        record = validate(
            "diaper",
            {"diaperType": "wet", "diaperAmount": "medium"},
            "2024-01-01T13:00:00+01:00",
            record_id="r-1",
            config=config,
        ).unwrap()
        assert record.id == "r-1"
        assert record.timestamp == T0
        assert record.timestamp.tzinfo == UTC

    def test_generated_ids_are_unique(self, config: AppConfig) -> None:
        first = validate("temperature", {"value": 36.8}, T0, config=config).unwrap()
        second = validate("temperature", {"value": 36.8}, T0, config=config).unwrap()
        assert first.id != second.id

    def test_unknown_kind_raises(self, config: AppConfig) -> None:
        with pytest.raises(UnknownRecordKindError):
            validate("bath", {}, T0, config=config)


class TestStepGranularity:
    def test_value_off_step_is_a_range_error(self, config: AppConfig) -> None:
        result = validate("temperature", {"value": "36.55"}, T0, config=config)
        assert _kinds(result) == {"value": ErrorKind.RANGE}
        assert result.unwrap_err()[0].message == (
            "Temperatuur moet in stappen van 0.1 worden ingevoerd"
        )

    @pytest.mark.parametrize("value", ["36.8", "38.2", "30", 37])
    def test_values_on_step_pass(self, config: AppConfig, value: str | int) -> None:
        assert validate("temperature", {"value": value}, T0, config=config).is_ok()

    def test_whole_grams_only(self, config: AppConfig) -> None:
        assert validate("weight", {"weight": "3450"}, T0, config=config).is_ok()
        result = validate("weight", {"weight": "3450.5"}, T0, config=config)
        assert _kinds(result) == {"weight": ErrorKind.RANGE}


class TestDurationParts:
    field = require("sleep").field("duration")

    def test_text_parts_are_parsed(self) -> None:
        assert self.field is not None
        value, errors = check_field(self.field, DurationParts("1", "30"), ValidationConfig())
        assert (value, errors) == (90, [])

    def test_blank_parts_count_as_zero(self, config: AppConfig) -> None:
        raw = {"duration": DurationParts("", "45")}
        assert validate("sleep", raw, T0, config=config).unwrap().duration_minutes == 45


class TestTimestamps:
    def test_naive_timestamp_uses_configured_zone(self) -> None:
        plus_one = timezone(timedelta(hours=1))
        assert parse_timestamp(datetime(2024, 1, 1, 13, 0), plus_one) == T0

    def test_iso_text_with_z_suffix(self) -> None:
        assert parse_timestamp("2024-01-01T12:00:00Z", UTC) == T0

    def test_unparsable_text(self) -> None:
        assert parse_timestamp("gisteren", UTC) is None

    def test_naive_timestamp_in_validate_uses_locale(self) -> None:
        config = AppConfig(locale=LocaleConfig(timezone="UTC"))
        naive = datetime(2024, 1, 1, 12, 0)
        record = validate("temperature", {"value": 37}, naive, config=config).unwrap()
        assert record.timestamp == T0


class TestComposeTimestamp:
    def test_date_and_time(self) -> None:
        result = compose_timestamp("2024-01-01", "9:30", UTC)
        assert result.unwrap() == datetime(2024, 1, 1, 9, 30, tzinfo=UTC)

    def test_marker_is_stripped_not_reinterpreted(self) -> None:
        assert compose_timestamp("2024-01-01", "2:30 PM", UTC).unwrap().hour == 2

    def test_local_time_is_converted_to_utc(self) -> None:
        plus_two = timezone(timedelta(hours=2))
        assert compose_timestamp("2024-06-01", "01:00", plus_two).unwrap() == datetime(
            2024, 5, 31, 23, 0, tzinfo=UTC
        )

    def test_both_inputs_invalid(self) -> None:
        result = compose_timestamp("01-02-2024", "24:00", UTC)
        assert _kinds(result) == {
            "date": ErrorKind.INVALID_TIMESTAMP,
            "time": ErrorKind.TIME_FORMAT,
        }

    def test_impossible_calendar_date(self) -> None:
        assert _kinds(compose_timestamp("2024-02-30", "10:00", UTC)) == {
            "date": ErrorKind.INVALID_TIMESTAMP
        }


class TestTimestampWindow:
    def test_far_future_is_rejected(self, config: AppConfig) -> None:
        moment = T0 + timedelta(days=400)
        result = validate("temperature", {"value": 37}, moment, config=config, now=T0)
        assert _kinds(result) == {"timestamp": ErrorKind.INVALID_TIMESTAMP}
        assert "toekomst" in result.unwrap_err()[0].message

    def test_far_past_is_rejected(self, config: AppConfig) -> None:
        moment = T0 - timedelta(days=2 * 366)
        result = validate("temperature", {"value": 37}, moment, config=config, now=T0)
        assert "verleden" in result.unwrap_err()[0].message

    def test_recent_timestamp_passes(self, config: AppConfig) -> None:
        moment = T0 - timedelta(days=300)
        assert validate("temperature", {"value": 37}, moment, config=config, now=T0).is_ok()

    def test_without_now_no_window_applies(self, config: AppConfig) -> None:
        moment = T0 - timedelta(days=3650)
        assert validate("temperature", {"value": 37}, moment, config=config).is_ok()

    def test_leap_day_now(self) -> None:
        now = datetime(2024, 2, 29, 12, 0, tzinfo=UTC)
        assert check_timestamp_window(datetime(2025, 2, 28, 12, 0, tzinfo=UTC), now) is None
        assert check_timestamp_window(datetime(2025, 3, 1, 12, 0, tzinfo=UTC), now) is not None
