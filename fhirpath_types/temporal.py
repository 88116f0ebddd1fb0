"""FHIRPath Date and Time values with partial precision."""

from __future__ import annotations

import datetime as _dt
import re
from dataclasses import dataclass
from enum import IntEnum

from fhirpath_types.values import Value

_DATE_DAY_PATTERN = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$", re.ASCII)
_DATE_MONTH_PATTERN = re.compile(r"^(\d{4})-(\d{2})$", re.ASCII)
_DATE_YEAR_PATTERN = re.compile(r"^(\d{4})$", re.ASCII)
_TIME_PATTERN = re.compile(
    r"^T?(\d{2})(?::(\d{2})(?::(\d{2})(?:\.(\d+))?)?)?$", re.ASCII
)

_YEAR_UNITS = frozenset({"year", "years", "'year'", "'years'"})
_MONTH_UNITS = frozenset({"month", "months", "'month'", "'months'"})
_WEEK_UNITS = frozenset({"week", "weeks", "'week'", "'weeks'"})
_DAY_UNITS = frozenset({"day", "days", "'day'", "'days'"})


def _sign(n: int) -> int:
    return (n > 0) - (n < 0)


def _ambiguous(kind: str) -> ValueError:
    return ValueError(
        f"ambiguous comparison between {kind} with different precisions"
    )


def _add_calendar(
    year: int, month: int, day: int, years: int, months: int, days: int
) -> _dt.date:
    """Add calendar offsets, letting overflowing days roll into the next month."""
    total_months = (year + years) * 12 + (month - 1) + months
    new_year, new_month = divmod(total_months, 12)
    base = _dt.date(new_year, new_month + 1, 1)
    return base + _dt.timedelta(days=day - 1 + days)


def _millis_from_fraction(fraction: str) -> int:
    """Pad or truncate a fractional-seconds string to three digits."""
    return int(fraction[:3].ljust(3, "0"))


class DatePrecision(IntEnum):
    """How much of a date is specified."""

    YEAR = 0
    MONTH = 1
    DAY = 2


class TimePrecision(IntEnum):
    """How much of a time is specified."""

    HOUR = 0
    MINUTE = 1
    SECOND = 2
    MILLIS = 3


@dataclass(frozen=True)
class Date(Value):
    """A FHIRPath date: year, year-month or year-month-day."""

    year: int
    month: int = 0
    day: int = 0
    precision: DatePrecision = DatePrecision.DAY

    def type_name(self) -> str:
        return "Date"

    def equal(self, other: Value) -> bool:
        if not isinstance(other, Date):
            return False
        if self.precision != other.precision or self.year != other.year:
            return False
        if self.precision >= DatePrecision.MONTH and self.month != other.month:
            return False
        if self.precision >= DatePrecision.DAY and self.day != other.day:
            return False
        return True

    def compare(self, other: Value) -> int:
        """Return -1, 0 or 1; raise ValueError when precisions make it ambiguous."""
        if not isinstance(other, Date):
            raise TypeError(f"cannot compare Date with {other.type_name()}")

        if self.precision != other.precision:
            if self.year != other.year:
                return _sign(self.year - other.year)
            if min(self.precision, other.precision) == DatePrecision.YEAR:
                raise _ambiguous("dates")
            if self.month != other.month:
                return _sign(self.month - other.month)
            raise _ambiguous("dates")

        if self.year != other.year:
            return _sign(self.year - other.year)
        if self.precision >= DatePrecision.MONTH and self.month != other.month:
            return _sign(self.month - other.month)
        if self.precision >= DatePrecision.DAY and self.day != other.day:
            return _sign(self.day - other.day)
        return 0

    def to_datetime(self) -> _dt.datetime:
        """Midnight UTC of the date, missing components taken as 1."""
        return _dt.datetime(
            self.year, self.month or 1, self.day or 1, tzinfo=_dt.timezone.utc
        )

    def add_duration(self, value: int, unit: str) -> Date:
        """Add a calendar duration; unsupported units leave the date unchanged."""
        if unit in _YEAR_UNITS:
            offsets = (value, 0, 0)
        elif unit in _MONTH_UNITS:
            offsets = (0, value, 0)
        elif unit in _WEEK_UNITS:
            offsets = (0, 0, value * 7)
        elif unit in _DAY_UNITS:
            offsets = (0, 0, value)
        else:
            return self

        moved = _add_calendar(self.year, self.month or 1, self.day or 1, *offsets)
        return Date(
            year=moved.year,
            month=moved.month if self.precision >= DatePrecision.MONTH else 0,
            day=moved.day if self.precision >= DatePrecision.DAY else 0,
            precision=self.precision,
        )

    def subtract_duration(self, value: int, unit: str) -> Date:
        """Subtract a calendar duration."""
        return self.add_duration(-value, unit)

    def __str__(self) -> str:
        if self.precision == DatePrecision.YEAR:
            return f"{self.year:04d}"
        if self.precision == DatePrecision.MONTH:
            return f"{self.year:04d}-{self.month:02d}"
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"


def parse_date(text: str) -> Date:
    """Parse ``YYYY``, ``YYYY-MM`` or ``YYYY-MM-DD``."""
    match = _DATE_DAY_PATTERN.match(text)
    if match:
        year, month, day = (int(group) for group in match.groups())
        return Date(year, month, day, DatePrecision.DAY)
    match = _DATE_MONTH_PATTERN.match(text)
    if match:
        year, month = (int(group) for group in match.groups())
        return Date(year, month, 0, DatePrecision.MONTH)
    match = _DATE_YEAR_PATTERN.match(text)
    if match:
        return Date(int(match.group(1)), 0, 0, DatePrecision.YEAR)
    raise ValueError(f"invalid date format: {text}")


def date_from_python(value: _dt.date) -> Date:
    """A day-precision Date from a ``datetime.date`` or ``datetime.datetime``."""
    return Date(value.year, value.month, value.day, DatePrecision.DAY)


@dataclass(frozen=True)
class Time(Value):
    """A FHIRPath time of day with partial precision."""

    hour: int
    minute: int = 0
    second: int = 0
    millisecond: int = 0
    precision: TimePrecision = TimePrecision.MILLIS

    def type_name(self) -> str:
        return "Time"

    def equal(self, other: Value) -> bool:
        if not isinstance(other, Time):
            return False
        if self.precision != other.precision or self.hour != other.hour:
            return False
        if self.precision >= TimePrecision.MINUTE and self.minute != other.minute:
            return False
        if self.precision >= TimePrecision.SECOND and self.second != other.second:
            return False
        if (
            self.precision >= TimePrecision.MILLIS
            and self.millisecond != other.millisecond
        ):
            return False
        return True

    def compare(self, other: Value) -> int:
        """Return -1, 0 or 1; raise ValueError when precisions make it ambiguous."""
        if not isinstance(other, Time):
            raise TypeError(f"cannot compare Time with {other.type_name()}")

        if self.precision != other.precision:
            lowest = min(self.precision, other.precision)
            if self.hour != other.hour:
                return _sign(self.hour - other.hour)
            if lowest < TimePrecision.MINUTE:
                raise _ambiguous("times")
            if self.minute != other.minute:
                return _sign(self.minute - other.minute)
            if lowest < TimePrecision.SECOND:
                raise _ambiguous("times")
            if self.second != other.second:
                return _sign(self.second - other.second)
            raise _ambiguous("times")

        components = [(self.hour, other.hour)]
        if self.precision >= TimePrecision.MINUTE:
            components.append((self.minute, other.minute))
        if self.precision >= TimePrecision.SECOND:
            components.append((self.second, other.second))
        if self.precision >= TimePrecision.MILLIS:
            components.append((self.millisecond, other.millisecond))
        for mine, theirs in components:
            if mine != theirs:
                return _sign(mine - theirs)
        return 0

    def __str__(self) -> str:
        result = f"{self.hour:02d}"
        if self.precision >= TimePrecision.MINUTE:
            result += f":{self.minute:02d}"
        if self.precision >= TimePrecision.SECOND:
            result += f":{self.second:02d}"
        if self.precision >= TimePrecision.MILLIS:
            result += f".{self.millisecond:03d}"
        return result


def parse_time(text: str) -> Time:
    """Parse ``HH``, ``HH:MM``, ``HH:MM:SS`` or ``HH:MM:SS.fff``, optionally after ``T``."""
    match = _TIME_PATTERN.match(text)
    if match is None:
        raise ValueError(f"invalid time format: {text}")
    hour, minute, second, fraction = match.groups()
    precision = TimePrecision.HOUR
    fields = {"hour": int(hour)}
    if minute is not None:
        fields["minute"] = int(minute)
        precision = TimePrecision.MINUTE
    if second is not None:
        fields["second"] = int(second)
        precision = TimePrecision.SECOND
    if fraction is not None:
        fields["millisecond"] = _millis_from_fraction(fraction)
        precision = TimePrecision.MILLIS
    return Time(precision=precision, **fields)


def time_from_python(value: _dt.time | _dt.datetime) -> Time:
    """A millisecond-precision Time from a ``datetime.time`` or ``datetime.datetime``."""
    return Time(
        value.hour,
        value.minute,
        value.second,
        value.microsecond // 1000,
        TimePrecision.MILLIS,
    )