"""
Tests for endpoint parameter helpers.
"""
from datetime import date, datetime

import pytest

from zoom_dispatch.endpoints.helpers import (
    double_encode_if_needed,
    format_date,
    months_ago,
    sanitize_int,
    to_bool,
)
from zoom_dispatch.exceptions import ErrorCode, ParameterError


@pytest.mark.unit
class TestToBool:

    @pytest.mark.parametrize("value", [True, "true", "TRUE", "yes", "1", 1, 2.5, "on"])
    def test_truthy(self, value):
        assert to_bool(value) is True

    @pytest.mark.parametrize("value", [False, None, "false", "no", "0", 0, ""])
    def test_falsy(self, value):
        assert to_bool(value) is False

    def test_unrecognised(self):
        with pytest.raises(ParameterError) as exc_info:
            to_bool("maybe", "notify_hosts")

        assert "notify_hosts" in str(exc_info.value)
        assert exc_info.value.code == ErrorCode.INVALID_PARAM_TYPE


@pytest.mark.unit
class TestSanitizeInt:

    @pytest.mark.parametrize("value,expected", [(39, 39), ("39", 39), (" 7 ", 7), (10.0, 10)])
    def test_valid(self, value, expected):
        assert sanitize_int(value) == expected

    @pytest.mark.parametrize("value", ["invalid", "3.5", 3.5, True, None])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            sanitize_int(value)


@pytest.mark.unit
class TestFormatDate:

    @pytest.mark.parametrize("value,expected", [
        (date(2020, 8, 20), "2020-08-20"),
        (datetime(2020, 8, 20, 15, 30), "2020-08-20"),
        ("2020/08/20", "2020-08-20"),
        ("2020-10/5", "2020-10-05"),
        ("2020-10-05T10:00:00", "2020-10-05"),
    ])
    def test_valid(self, value, expected):
        assert format_date(value) == expected

    def test_invalid_uses_label(self):
        with pytest.raises(ParameterError) as exc_info:
            format_date("invalid", "End")

        assert str(exc_info.value).startswith("endDate needs to be")
        assert exc_info.value.code == ErrorCode.INVALID_DATE


@pytest.mark.unit
class TestDoubleEncode:

    @pytest.mark.parametrize("identifier,expected", [
        ("/12345", "%252F12345"),
        ("123//45", "123%252F%252F45"),
        ("abc/def", "abc/def"),
        (12345, "12345"),
    ])
    def test_encoding(self, identifier, expected):
        assert double_encode_if_needed(identifier) == expected


@pytest.mark.unit
class TestMonthsAgo:

    @pytest.mark.parametrize("today,expected", [
        (date(2021, 8, 31), date(2021, 2, 28)),
        (date(2021, 3, 15), date(2020, 9, 15)),
        (date(2020, 1, 1), date(2019, 7, 1)),
    ])
    def test_clamps_to_month_end(self, today, expected):
        assert months_ago(6, today=today) == expected
