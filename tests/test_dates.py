"""Tests for dates.py - relative due-date grammar."""

from datetime import date

import pytest

from helpers import TODAY
from zvault.dates import (
    format_due,
    format_for_edit,
    format_relative,
    is_overdue,
    parse_relative,
)
from zvault.errors import DateFormatError


class TestParseRelative:
    """Tests for parse_relative."""

    def test_tomorrow(self) -> None:
        assert parse_relative("tomorrow", TODAY) == date(2026, 2, 19)

    def test_empty_is_no_date(self) -> None:
        assert parse_relative("", TODAY) is None
        assert parse_relative("   ", TODAY) is None

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("today", date(2026, 2, 18)),
            ("TODAY", date(2026, 2, 18)),
            ("Tomorrow", date(2026, 2, 19)),
            ("next week", date(2026, 2, 25)),
            ("Next Week", date(2026, 2, 25)),
            ("+3d", date(2026, 2, 21)),
            ("+0d", date(2026, 2, 18)),
            ("+2w", date(2026, 3, 4)),
            ("2026-12-31", date(2026, 12, 31)),
        ],
    )
    def test_accepted_forms(self, text: str, expected: date) -> None:
        assert parse_relative(text, TODAY) == expected

    def test_day_offset_crosses_month(self) -> None:
        assert parse_relative("+11d", TODAY) == date(2026, 3, 1)

    @pytest.mark.parametrize("text", ["+d", "+xd", "+1.5w"])
    def test_bad_offset(self, text: str) -> None:
        with pytest.raises(DateFormatError, match="offset"):
            parse_relative(text, TODAY)

    @pytest.mark.parametrize("text", ["+3000000d", "+9999999999d", "+500000w"])
    def test_offset_past_calendar_end(self, text: str) -> None:
        with pytest.raises(DateFormatError, match="offset"):
            parse_relative(text, TODAY)

    @pytest.mark.parametrize("text", ["yesterday", "3d", "2026-13-01", "2026/02/18", "soon"])
    def test_unknown_form_names_accepted_forms(self, text: str) -> None:
        with pytest.raises(DateFormatError) as exc:
            parse_relative(text, TODAY)
        assert "YYYY-MM-DD" in str(exc.value)
        assert "tomorrow" in str(exc.value)


class TestFormatRelative:
    """Tests for format_relative."""

    def test_round_trip_tomorrow(self) -> None:
        due = parse_relative("tomorrow", TODAY)
        assert format_relative(due, TODAY) == "tomorrow"

    @pytest.mark.parametrize(
        "days,expected",
        [
            (0, "today"),
            (1, "tomorrow"),
            (-1, "yesterday"),
            (2, "in 2 days"),
            (7, "in 7 days"),
            (8, "next week"),
            (14, "next week"),
            (-2, "overdue by 2 days"),
            (-30, "overdue by 30 days"),
        ],
    )
    def test_distance_labels(self, days: int, expected: str) -> None:
        d = date.fromordinal(TODAY.toordinal() + days)
        assert format_relative(d, TODAY) == expected

    def test_far_future_uses_month_day(self) -> None:
        assert format_relative(date(2026, 3, 5), TODAY) == "Mar 5"


class TestHelpers:
    """Tests for the small due-date helpers."""

    def test_format_due_none(self) -> None:
        assert format_due(None, TODAY) == ""

    def test_is_overdue(self) -> None:
        assert is_overdue(date(2026, 2, 17), TODAY)
        assert not is_overdue(TODAY, TODAY)
        assert not is_overdue(None, TODAY)

    def test_format_for_edit(self) -> None:
        assert format_for_edit(date(2026, 2, 1)) == "2026-02-01"
        assert format_for_edit(None) == ""
