"""FHIRPath DateTime values with partial precision and optional timezone."""

from __future__ import annotations

import datetime as _dt
import re
from dataclasses import dataclass
from enum import IntEnum

from fhirpath_types.values import Value

_DATETIME_PATTERN = re.compile(
    r"^(\d{4})(?:-(\d{2})(?:-(\d{2})(?:T(\d{2})(?::(\d{2})(?::(\d{2})"
    r"(?:\.(\d+))?)?)?)?)?)?(Z|[+-]\d{2}:\d{2})?$",
    re.ASCII,
)

_CALENDAR_UNITS = {
    **dict.fromkeys(("year", "years", "'year'", "'years'"), "years"),
    **dict.fromkeys(("month", "months", "'month'", "'months'"), "months"),
    **dict.fromkeys(("week", "weeks", "'week'", "'weeks'"), "weeks"),
    **dict.fromkeys(("day", "days", "'day'", "'days'"), "days"),
}
_CLOCK_UNITS = {
    **dict.fromkeys(("hour", "hours", "'hour'", "'hours'"), "hours"),
    **dict.fromkeys(("minute", "minutes", "'minute'", "'minutes'"), "minutes"),
    **dict.fromkeys(("second", "seconds", "'second'", "'seconds'"), "seconds"),
    **dict.fromkeys(
        ("millisecond", "milliseconds", "'millisecond'", "'milliseconds'", "ms"),
        "milliseconds",
    ),
}


def _sign(n: int) -> int:
    return (n > 0) - (n < 0)


def _ambiguous() -> ValueError:
    return ValueError(
        "ambiguous comparison between datetimes with different precisions"
    )


def _build(
    year: int,
    month: int,
    day: int,
    hour: int,
    minute: int,
    second: int,
    millis: int,
    tz: _dt.tzinfo,
) -> _dt.datetime:
    """Build a datetime, letting out-of-range components roll over."""
    new_year, month_index = divmod(year * 12 + (month - 1), 12)
    base = _dt.datetime(new_year, month_index + 1, 1, tzinfo=tz)
    return base + _dt.timedelta(
        days=day - 1,
        hours=hour,
        minutes=minute,
        seconds=second,
        milliseconds=millis,
    )


class DateTimePrecision(IntEnum):
    """How much of a datetime is specified."""

    YEAR = 0
    MONTH = 1
    DAY = 2
    HOUR = 3
    MINUTE = 4
    SECOND = 5
    MILLIS = 6


@dataclass(frozen=True)
class DateTime(Value):
    """A FHIRPath datetime; tz_offset is in minutes east of UTC."""

    year: int
    month: int = 0
    day: int = 0
    hour: int = 0
    minute: int = 0
    second: int = 0
    millisecond: int = 0
    tz_offset: int = 0
    has_tz: bool = False
    precision: DateTimePrecision = DateTimePrecision.MILLIS

    def type_name(self) -> str:
        return "DateTime"

    def equal(self, other: Value) -> bool:
        """Whether both denote the same instant."""
        if not isinstance(other, DateTime):
            return False
        return self.to_datetime() == other.to_datetime()

    def _tzinfo(self) -> _dt.tzinfo:
        if self.has_tz:
            return _dt.timezone(_dt.timedelta(minutes=self.tz_offset))
        return _dt.timezone.utc

    def to_datetime(self) -> _dt.datetime:
        """An aware datetime; missing month and day are taken as 1, no zone as UTC."""
        return _build(
            self.year,
            self.month or 1,
            self.day or 1,
            self.hour,
            self.minute,
            self.second,
            self.millisecond,
            self._tzinfo(),
        )

    def add_duration(self, value: int, unit: str) -> DateTime:
        """Add a duration; unsupported units leave the value unchanged."""
        current = self.to_datetime()
        if unit in _CALENDAR_UNITS:
            kind = _CALENDAR_UNITS[unit]
            years = value if kind == "years" else 0
            months = value if kind == "months" else 0
            days = value * 7 if kind == "weeks" else value if kind == "days" else 0
            moved = _build(
                current.year + years,
                current.month + months,
                current.day + days,
                current.hour,
                current.minute,
                current.second,
                current.microsecond // 1000,
                current.tzinfo,
            )
        elif unit in _CLOCK_UNITS:
            moved = current + _dt.timedelta(**{_CLOCK_UNITS[unit]: value})
        else:
            return self

        p = self.precision
        return DateTime(
            year=moved.year,
            month=moved.month if p >= DateTimePrecision.MONTH else 0,
            day=moved.day if p >= DateTimePrecision.DAY else 0,
            hour=moved.hour if p >= DateTimePrecision.HOUR else 0,
            minute=moved.minute if p >= DateTimePrecision.MINUTE else 0,
            second=moved.second if p >= DateTimePrecision.SECOND else 0,
            millisecond=(
                moved.microsecond // 1000 if p >= DateTimePrecision.MILLIS else 0
            ),
            tz_offset=self.tz_offset,
            has_tz=self.has_tz,
            precision=p,
        )

    def subtract_duration(self, value: int, unit: str) -> DateTime:
        """Subtract a duration."""
        return self.add_duration(-value, unit)

    def compare(self, other: Value) -> int:
        """Return -1, 0 or 1; raise ValueError when precisions make it ambiguous."""
        if not isinstance(other, DateTime):
            raise TypeError(f"cannot compare DateTime with {other.type_name()}")

        if self.precision != other.precision:
            lowest = min(self.precision, other.precision)
            if self.year != other.year:
                return _sign(self.year - other.year)
            steps = (
                (DateTimePrecision.MONTH, self.month, other.month),
                (DateTimePrecision.DAY, self.day, other.day),
                (DateTimePrecision.HOUR, self.hour, other.hour),
                (DateTimePrecision.MINUTE, self.minute, other.minute),
                (DateTimePrecision.SECOND, self.second, other.second),
            )
            for needed, mine, theirs in steps:
                if lowest < needed:
                    raise _ambiguous()
                if mine != theirs:
                    return _sign(mine - theirs)
            raise _ambiguous()

        mine, theirs = self.to_datetime(), other.to_datetime()
        return (mine > theirs) - (mine < theirs)

    def __str__(self) -> str:
        p = self.precision
        result = f"{self.year:04d}"
        if p >= DateTimePrecision.MONTH:
            result += f"-{self.month:02d}"
        if p >= DateTimePrecision.DAY:
            result += f"-{self.day:02d}"
        if p >= DateTimePrecision.HOUR:
            result += f"T{self.hour:02d}"
        if p >= DateTimePrecision.MINUTE:
            result += f":{self.minute:02d}"
        if p >= DateTimePrecision.SECOND:
            result += f":{self.second:02d}"
        if p >= DateTimePrecision.MILLIS:
            result += f".{self.millisecond:03d}"
        if self.has_tz:
            if self.tz_offset == 0:
                result += "Z"
            else:
                sign = "-" if self.tz_offset < 0 else "+"
                hours, minutes = divmod(abs(self.tz_offset), 60)
                result += f"{sign}{hours:02d}:{minutes:02d}"
        return result


def parse_datetime(text: str) -> DateTime:
    """Parse a partial ISO datetime such as ``2024-01-15T10:30:45.123Z``."""
    match = _DATETIME_PATTERN.match(text)
    if match is None:
        raise ValueError(f"invalid datetime format: {text}")
    year, month, day, hour, minute, second, fraction, zone = match.groups()

    fields: dict = {"year": int(year)}
    precision = DateTimePrecision.YEAR
    for name, group, level in (
        ("month", month, DateTimePrecision.MONTH),
        ("day", day, DateTimePrecision.DAY),
        ("hour", hour, DateTimePrecision.HOUR),
        ("minute", minute, DateTimePrecision.MINUTE),
        ("second", second, DateTimePrecision.SECOND),
    ):
        if group is not None:
            fields[name] = int(group)
            precision = level
    if fraction is not None:
        fields["millisecond"] = int(fraction[:3].ljust(3, "0"))
        precision = DateTimePrecision.MILLIS

    if zone is not None:
        fields["has_tz"] = True
        if zone != "Z":
            sign = -1 if zone[0] == "-" else 1
            fields["tz_offset"] = sign * (int(zone[1:3]) * 60 + int(zone[4:6]))

    return DateTime(precision=precision, **fields)


def datetime_from_python(value: _dt.datetime) -> DateTime:
    """A millisecond-precision DateTime; a naive value is taken as UTC."""
    offset = value.utcoffset() or _dt.timedelta(0)
    return DateTime(
        year=value.year,
        month=value.month,
        day=value.day,
        hour=value.hour,
        minute=value.minute,
        second=value.second,
        millisecond=value.microsecond // 1000,
        tz_offset=int(offset.total_seconds() // 60),
        has_tz=True,
        precision=DateTimePrecision.MILLIS,
    )