"""
Pure parameter helpers used by endpoint methods before building a request.
"""
import calendar
from datetime import date, datetime
from typing import Any, Union
from urllib.parse import quote

from zoom_dispatch.exceptions import ErrorCode, ParameterError

_TRUE_STRINGS = frozenset({"true", "yes", "y", "1", "on"})
_FALSE_STRINGS = frozenset({"false", "no", "n", "0", "off", ""})

_DATE_FORMATS = ("%Y-%m-%d", "%Y/%m/%d", "%Y-%m/%d", "%Y/%m-%d", "%m/%d/%Y")


def to_bool(value: Any, name: str = "value") -> bool:
    """
    Normalise a caller-supplied flag.

    Accepts booleans, numbers and common strings ("true", "yes", "0", ...).
    None is False.

    Raises:
        ParameterError: If a string is not a recognised boolean word
    """
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    raise ParameterError(f"{name} must be a boolean, got {value!r}", code=ErrorCode.INVALID_PARAM_TYPE)


def sanitize_int(value: Any) -> int:
    """
    Turn an int or an integral string into an int.

    Raises:
        ValueError: If the value is not a whole number
    """
    if isinstance(value, bool):
        raise ValueError(f"{value!r} is not a valid number")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        stripped = value.strip()
        if stripped.lstrip("-").isdigit():
            return int(stripped)
    raise ValueError(f"{value!r} is not a valid number")


def format_date(value: Union[date, datetime, str], label: str = "") -> str:
    """
    Format a date for Zoom as YYYY-MM-DD.

    Args:
        value: date, datetime, or a string such as "2020/08/20" or "2020-10-5"
        label: Prefix for the error message ("Start" gives "startDate ...")

    Raises:
        ParameterError: If the value cannot be read as a date
    """
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, str):
        text = value.strip()
        for fmt in _DATE_FORMATS:
            try:
                return datetime.strptime(text, fmt).date().isoformat()
            except ValueError:
                continue
        try:
            return datetime.fromisoformat(text).date().isoformat()
        except ValueError:
            pass

    name = f"{label[:1].lower()}{label[1:]}Date" if label else "date"
    raise ParameterError(
        f"{name} needs to be a date instance or a string in a recognised date format",
        code=ErrorCode.INVALID_DATE,
    )


def double_encode_if_needed(identifier: Any) -> str:
    """
    Double URL-encode an identifier when Zoom requires it.

    Meeting UUIDs that start with "/" or contain "//" must be encoded twice,
    e.g. "/12345" becomes "%252F12345". Other identifiers are returned as
    strings unchanged.
    """
    text = str(identifier)
    if text.startswith("/") or "//" in text:
        return quote(quote(text, safe=""), safe="")
    return text


def months_ago(months: int, today: date = None) -> date:
    """Same day of the month `months` months back, clamped to the month's end."""
    today = today or date.today()
    year, month = divmod(today.year * 12 + (today.month - 1) - months, 12)
    month += 1
    day = min(today.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)
