"""
Date rules: date, before, after, future, past.

Values may be date or datetime objects or strings. Strings are parsed as
ISO 8601 first (python-dateutil), then with each of the configured
date_formats (strptime syntax). Aware datetimes are converted to UTC;
naive datetimes are taken to already be UTC, and "today" is the current
UTC date. Comparing a plain date with a datetime compares dates.
"""

from datetime import date, datetime, timedelta, timezone
from typing import Any, Optional, Sequence, Union

from dateutil import parser as dateutil_parser

from .base import ValidationRule, settings_list

DEFAULT_DATE_FORMATS = ["%Y-%m-%d", "%Y-%m-%d %H:%M:%S", "%Y-%m-%dT%H:%M:%S"]
_ISO_PARSER = dateutil_parser.isoparser()

DateLike = Union[date, datetime]


def parse_date(value: Any, formats: Sequence[str] = DEFAULT_DATE_FORMATS) -> Optional[DateLike]:
    """Return a date/datetime for value, or None if it is not a date."""
    if isinstance(value, (date, datetime)):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    # Date-only ISO strings stay plain dates so they compare by day.
    try:
        return _ISO_PARSER.parse_isodate(text)
    except (ValueError, OverflowError):
        pass
    try:
        return dateutil_parser.isoparse(text)
    except (ValueError, OverflowError):
        pass

    for fmt in formats:
        try:
            parsed = datetime.strptime(text, fmt)
        except ValueError:
            continue
        if "%H" not in fmt and "%I" not in fmt:
            return parsed.date()
        return parsed
    return None


def _utc_naive(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment
    return moment.astimezone(timezone.utc).replace(tzinfo=None)


def comparable(left: DateLike, right: DateLike):
    """Bring two date/datetime values to a common, orderable form."""
    if not isinstance(left, datetime) or not isinstance(right, datetime):
        left_date = _utc_naive(left).date() if isinstance(left, datetime) else left
        right_date = _utc_naive(right).date() if isinstance(right, datetime) else right
        return left_date, right_date
    return _utc_naive(left), _utc_naive(right)


def utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class _DateRule(ValidationRule):

    @property
    def formats(self):
        return settings_list(self.settings, "date_formats", DEFAULT_DATE_FORMATS)

    def parse_value(self, value):
        return parse_date(value, self.formats)


class DateRule(_DateRule):
    """
    Usage:
        date              any ISO 8601 or configured format
        date:%d/%m/%Y     the string must match this strptime format
    """

    name = "date"

    def validate(self, field_name, value, parameter, context=None):
        if value is None:
            return None
        if parameter is not None and parameter.strip():
            return self._validate_format(field_name, value, parameter)
        if self.parse_value(value) is None:
            return self.message("date", field_name)
        return None

    def _validate_format(self, field_name, value, fmt):
        if "%" not in fmt:
            raise self.config_error(f"format must use strptime directives (e.g., 'date:%Y-%m-%d'): {fmt!r}")
        if isinstance(value, (date, datetime)):
            return None
        if not isinstance(value, str):
            return self.message("date", field_name)
        try:
            datetime.strptime(value, fmt)
        except ValueError:
            return self.message("date.format", field_name, format=fmt)
        return None


class _BoundRule(_DateRule):
    """before/after: compare against a keyword or a parsed date bound."""

    usage = ""

    def bound(self, parameter) -> DateLike:
        raw = self.require_parameter(parameter, self.usage)
        keyword = raw.lower()
        if keyword == "now":
            return utc_now()
        if keyword == "today":
            return utc_now().date()
        if keyword == "tomorrow":
            return utc_now().date() + timedelta(days=1)
        if keyword == "yesterday":
            return utc_now().date() - timedelta(days=1)
        parsed = parse_date(raw, self.formats)
        if parsed is None:
            raise self.config_error(f"parameter is not a valid date: {raw!r}")
        return parsed

    def validate(self, field_name, value, parameter, context=None):
        if value is None:
            return None
        limit = self.bound(parameter)
        moment = self.parse_value(value)
        if moment is None:
            return self.message("date", field_name)
        left, right = comparable(moment, limit)
        if self.passes(left, right):
            return None
        return self.message(self.name, field_name, date=parameter.strip())

    def passes(self, value, limit) -> bool:
        raise NotImplementedError


class BeforeRule(_BoundRule):
    """Usage: before:2030-01-01, before:today"""

    name = "before"
    usage = "before:2030-01-01"

    def passes(self, value, limit):
        return value < limit


class AfterRule(_BoundRule):
    """Usage: after:2000-01-01, after:now"""

    name = "after"
    usage = "after:2000-01-01"

    def passes(self, value, limit):
        return value > limit


class FutureRule(_DateRule):
    """Strictly later than now (or than today, for plain dates)."""

    name = "future"

    def validate(self, field_name, value, parameter, context=None):
        if value is None:
            return None
        moment = self.parse_value(value)
        if moment is None:
            return self.message("date", field_name)
        left, right = comparable(moment, utc_now())
        if left > right:
            return None
        return self.message("future", field_name)


class PastRule(_DateRule):
    """Strictly earlier than now (or than today, for plain dates)."""

    name = "past"

    def validate(self, field_name, value, parameter, context=None):
        if value is None:
            return None
        moment = self.parse_value(value)
        if moment is None:
            return self.message("date", field_name)
        left, right = comparable(moment, utc_now())
        if left < right:
            return None
        return self.message("past", field_name)
