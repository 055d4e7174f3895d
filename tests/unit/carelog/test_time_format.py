"""
Tests for the 24-hour time invariant.

Testing philosophy:
- Exact examples for the documented edge cases
- Property-based tests for idempotence and detection
- The dotted-marker gap is asserted, not papered over
"""

from datetime import UTC, datetime, timedelta, timezone

import pytest
from hypothesis import given
from hypothesis import strategies as st

from carelog.domain.time_format import (
    contains_twelve_hour_marker,
    extract_twelve_hour_markers,
    format_date,
    format_date_short,
    format_datetime_24,
    format_time_24,
    is_strict_24_hour,
    normalize_to_24_hour,
)


class TestContainsTwelveHourMarker:
    @pytest.mark.parametrize(
        "text",
        [
            "Time is 2:30 PM",
            "Meeting at 9:00 AM",
            "Deadline: 11:59 pm",
            "Start at 8:00 am",
            "Begin at 10:00 AM sharp",
            "Open 9:00 am sharp",
            "Time is 2:30 Pm",
            "Time is 2:30 pM",
        ],
    )
    def test_detects_word_delimited_markers(self, text: str) -> None:
        assert contains_twelve_hour_marker(text)

    @pytest.mark.parametrize(
        "text",
        ["Campus", "Lamp", "14:30", "Start at 8:00am", "", "24:00", "Deadline: 23:59"],
    )
    def test_ignores_markers_inside_words_and_24_hour_times(self, text: str) -> None:
        assert not contains_twelve_hour_marker(text)

    def test_dotted_markers_followed_by_text_are_not_detected(self) -> None:
        assert not contains_twelve_hour_marker("Meeting at 10:00 a.m. and 3:00 p.m.")
        assert contains_twelve_hour_marker("Meeting at 10:00 am and 3:00 pm")

    @given(
        before=st.sampled_from(["", "at ", "9:00 ", "Meeting "]),
        marker=st.sampled_from(["AM", "PM", "am", "pm", "Am", "pM"]),
        after=st.sampled_from(["", " sharp", ", later", "!"]),
    )
    def test_any_delimited_marker_is_detected(self, before: str, marker: str, after: str) -> None:
        assert contains_twelve_hour_marker(f"{before}{marker}{after}")


class TestExtractTwelveHourMarkers:
    def test_returns_markers_in_order(self) -> None:
        assert extract_twelve_hour_markers("Starts 9:00 AM, ends 5:00 PM") == ["AM", "PM"]

    def test_returns_empty_list_for_24_hour_text(self) -> None:
        assert extract_twelve_hour_markers("Starts 09:00, ends 17:00") == []

    def test_keeps_original_case_and_skips_glued_dotted_marker(self) -> None:
        assert extract_twelve_hour_markers("Times: 9:00 am, 2:30 PM, 5:45 p.m.") == ["am", "PM"]

    def test_repeated_markers(self) -> None:
        assert extract_twelve_hour_markers("9:00 AM, 10:00 AM, 11:00 AM") == ["AM", "AM", "AM"]


class TestIsStrict24Hour:
    @pytest.mark.parametrize("text", ["00:00", "09:30", "9:30", "12:00", "23:59", "0:05"])
    def test_accepts_valid_times(self, text: str) -> None:
        assert is_strict_24_hour(text)

    @pytest.mark.parametrize(
        "text",
        [
            "24:00",
            "25:30",
            "12:60",
            "9:5",
            "2:30 PM",
            "12",
            "12:",
            ":30",
            "abc:def",
            "",
            "12:30:45",
            " 12:30",
            "12:30\n",
        ],
    )
    def test_rejects_everything_else(self, text: str) -> None:
        assert not is_strict_24_hour(text)


class TestNormalizeTo24Hour:
    def test_strips_marker_without_reinterpreting_hour(self) -> None:
        assert normalize_to_24_hour("2:30 PM") == "2:30"
        assert normalize_to_24_hour("11:15 am") == "11:15"

    def test_keeps_valid_time(self) -> None:
        assert normalize_to_24_hour("14:30") == "14:30"

    def test_strips_surrounding_whitespace(self) -> None:
        assert normalize_to_24_hour("  08:45 ") == "08:45"

    def test_returns_original_when_result_is_invalid(self) -> None:
        assert normalize_to_24_hour("25:00 PM") == "25:00 PM"
        assert normalize_to_24_hour("2:30PM") == "2:30PM"
        assert normalize_to_24_hour("later") == "later"

    @given(st.text(max_size=20))
    def test_is_idempotent(self, text: str) -> None:
        once = normalize_to_24_hour(text)
        assert normalize_to_24_hour(once) == once

    @given(
        hour=st.integers(min_value=0, max_value=23),
        minute=st.integers(min_value=0, max_value=59),
        marker=st.sampled_from(["AM", "PM", "am", "pm"]),
    )
    def test_result_of_marked_time_is_strict(self, hour: int, minute: int, marker: str) -> None:
        result = normalize_to_24_hour(f"{hour}:{minute:02d} {marker}")
        assert result == f"{hour}:{minute:02d}"
        assert is_strict_24_hour(result)
        assert not contains_twelve_hour_marker(result)


class TestFormatting:
    moment = datetime(2024, 1, 15, 14, 5, tzinfo=UTC)

    def test_formats_never_use_twelve_hour_clock(self) -> None:
        for text in (
            format_time_24(self.moment),
            format_datetime_24(self.moment),
            format_time_24(self.moment.replace(hour=0)),
        ):
            assert not contains_twelve_hour_marker(text)

    def test_time_and_date_layouts(self) -> None:
        assert format_time_24(self.moment) == "14:05"
        assert format_date(self.moment) == "15-01-2024"
        assert format_datetime_24(self.moment) == "15-01-2024 14:05"
        assert format_date_short(self.moment) == "15/01"

    def test_converts_to_requested_timezone(self) -> None:
        plus_two = timezone(timedelta(hours=2))
        assert format_time_24(self.moment, plus_two) == "16:05"
        assert format_time_24(self.moment.replace(hour=23), plus_two) == "01:05"

    def test_midnight_is_zero_hour(self) -> None:
        assert format_time_24(self.moment.replace(hour=0, minute=0)) == "00:00"
