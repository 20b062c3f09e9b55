"""Tests for raw value coercion (quiethours/normalizers/coerce.py)."""

from datetime import date, datetime, timedelta, timezone

import pytest

from quiethours.errors import NormalizationError
from quiethours.normalizers.coerce import (
    LINE_DELIMITERS,
    maybe_string,
    normalize_date,
    require_string,
    to_boolean,
    to_boolean_or_sentinel,
    to_optional_number,
    to_override_list,
    to_string_list,
)


class TestStrings:
    def test_maybe_string_trims(self):
        assert maybe_string("  Toronto ") == "Toronto"

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_maybe_string_empty(self, value):
        assert maybe_string(value) is None

    def test_require_string_names_field(self):
        with pytest.raises(NormalizationError, match="fine_range is required") as excinfo:
            require_string(" ", "fine_range")
        assert excinfo.value.field == "fine_range"


class TestBooleans:
    @pytest.mark.parametrize("value", ["true", "TRUE", "1", "yes", "on", " Y ", True, 1])
    def test_truthy(self, value):
        assert to_boolean(value, "winter_ban") is True

    @pytest.mark.parametrize("value", ["false", "0", "no", "off", "N", False, 0])
    def test_falsy(self, value):
        assert to_boolean(value, "winter_ban") is False

    @pytest.mark.parametrize("value", ["maybe", "", None, "varies"])
    def test_unrecognized_raises_with_field(self, value):
        with pytest.raises(NormalizationError, match="winter_ban"):
            to_boolean(value, "winter_ban")

    def test_sentinel_passes_through(self):
        assert to_boolean_or_sentinel("Varies", "overnight_parking_allowed", "varies") == "varies"
        assert to_boolean_or_sentinel("no", "overnight_parking_allowed", "varies") is False

    def test_other_sentinel_rejected(self):
        with pytest.raises(NormalizationError):
            to_boolean_or_sentinel("restricted", "overnight_parking_allowed", "varies")


class TestNumbers:
    @pytest.mark.parametrize(
        "value,expected",
        [("55", 55), ("1,000", 1000), ("62.5", 62.5), (" 40 ", 40), (70, 70), (0, 0)],
    )
    def test_parses(self, value, expected):
        assert to_optional_number(value) == expected

    @pytest.mark.parametrize("value", [None, "", "n/a", "abc", float("nan"), float("inf")])
    def test_missing_or_invalid_is_none(self, value):
        assert to_optional_number(value) is None


class TestLists:
    def test_pipe_delimited(self):
        assert to_string_list("Couches|Mattresses") == ["Couches", "Mattresses"]

    def test_mixed_delimiters_and_blanks(self):
        assert to_string_list("Couches, Mattresses\n\n| Appliances |") == [
            "Couches",
            "Mattresses",
            "Appliances",
        ]

    def test_list_input_trimmed(self):
        assert to_string_list([" Tires ", "", None, "Paint"]) == ["Tires", "Paint"]

    def test_line_delimiters_keep_commas(self):
        assert to_string_list("Be polite, but firm.|Keep notes", LINE_DELIMITERS) == [
            "Be polite, but firm.",
            "Keep notes",
        ]

    def test_non_string_is_empty(self):
        assert to_string_list(None) == []


class TestOverrides:
    def test_mini_grammar(self):
        assert to_override_list("Arapahoe County: Only fountains permitted", "county") == [
            {"county": "Arapahoe County", "rules": "Only fountains permitted"}
        ]

    def test_multiple_segments(self):
        result = to_override_list("Boulder: Banned|Aurora: Allowed July 4 only", "city")
        assert [entry["city"] for entry in result] == ["Boulder", "Aurora"]

    def test_rule_text_may_contain_colons(self):
        result = to_override_list("Jefferson County: Banned 9:00 PM - 7:00 AM: no exceptions", "county")
        assert result == [{"county": "Jefferson County", "rules": "Banned 9:00 PM - 7:00 AM: no exceptions"}]

    def test_malformed_segments_dropped(self):
        result = to_override_list("No colon here|: missing name|Douglas County:  |Adams County: Sparklers only", "county")
        assert result == [{"county": "Adams County", "rules": "Sparklers only"}]

    def test_structured_entries(self):
        value = [{"county": "Arapahoe County", "rules": "Fountains only"}, {"name": "Weld County", "rules": "Allowed"}]
        assert to_override_list(value, "county") == [
            {"county": "Arapahoe County", "rules": "Fountains only"},
            {"county": "Weld County", "rules": "Allowed"},
        ]

    @pytest.mark.parametrize("value", [None, "", [], "nothing useful", [{"rules": "no name"}]])
    def test_empty_result_is_none(self, value):
        assert to_override_list(value, "county") is None


class TestDates:
    @pytest.mark.parametrize(
        "value",
        [
            "2025-01-05",
            "2025-01-05T14:30:00Z",
            "2025/01/05",
            "01/05/2025",
            "5 Jan 2025",
            "January 5, 2025",
            date(2025, 1, 5),
            datetime(2025, 1, 5, 9, 0),
        ],
    )
    def test_reserialized_zero_padded(self, value):
        assert normalize_date(value) == "2025-01-05"

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("2025-06-01T23:30:00-05:00", "2025-06-02"),
            ("2025-06-02T01:30:00+02:00", "2025-06-01"),
            (datetime(2025, 6, 1, 23, 30, tzinfo=timezone(timedelta(hours=-5))), "2025-06-02"),
            ("2025-06-01T23:30:00", "2025-06-01"),
        ],
    )
    def test_offset_timestamps_dated_in_utc(self, value, expected):
        assert normalize_date(value) == expected

    @pytest.mark.parametrize("value", ["", "not a date", "2025-13-45", None, 20250105])
    def test_invalid_raises(self, value):
        with pytest.raises(NormalizationError, match="last_verified"):
            normalize_date(value)
