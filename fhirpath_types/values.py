"""Scalar FHIRPath values: Boolean, String, Integer and Decimal."""

from __future__ import annotations

import decimal
import math
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass

TYPE_NAME_DECIMAL = "Decimal"

_INT64_MIN = -(2**63)
_UINT64_RANGE = 2**64

# Exact arithmetic for addition, subtraction, multiplication and rounding.
_EXACT = decimal.Context(
    prec=decimal.MAX_PREC,
    Emax=decimal.MAX_EMAX,
    Emin=decimal.MIN_EMIN,
)
# Working context for division before rounding to the fixed scale.
_DIVISION = decimal.Context(
    prec=1000,
    Emax=decimal.MAX_EMAX,
    Emin=decimal.MIN_EMIN,
)
_DIVISION_PLACES = decimal.Decimal(1).scaleb(-16)

_DECIMAL_PATTERN = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$")


def _wrap_int64(n: int) -> int:
    """Wrap an integer into the signed 64-bit range."""
    return (n - _INT64_MIN) % _UINT64_RANGE + _INT64_MIN


def _normalize_string(text: str) -> str:
    """Lower-case the text, trim it and collapse internal whitespace."""
    return " ".join(text.lower().split())


def _format_decimal(value: decimal.Decimal) -> str:
    """Render a decimal without exponent and without trailing zeros."""
    if value == 0:
        return "0"
    return format(value.normalize(_EXACT), "f")


def _sign(n) -> int:
    return (n > 0) - (n < 0)


class FHIRPathTypeError(TypeError):
    """Raised when an operation receives a value of the wrong type."""

    def __init__(self, expected: str, actual: str, operation: str) -> None:
        self.expected = expected
        self.actual = actual
        self.operation = operation
        super().__init__(
            f"type error in {operation}: expected {expected}, got {actual}"
        )


class Value(ABC):
    """Base class of every FHIRPath value."""

    @abstractmethod
    def type_name(self) -> str:
        """Return the FHIRPath type name."""

    @abstractmethod
    def equal(self, other: Value) -> bool:
        """Exact equality, as the ``=`` operator."""

    def equivalent(self, other: Value) -> bool:
        """Equivalence, as the ``~`` operator."""
        return self.equal(other)

    def is_empty(self) -> bool:
        """Whether this value stands for empty."""
        return False


@dataclass(frozen=True)
class Boolean(Value):
    """A FHIRPath boolean."""

    value: bool

    def type_name(self) -> str:
        return "Boolean"

    def equal(self, other: Value) -> bool:
        return isinstance(other, Boolean) and self.value == other.value

    def negate(self) -> Boolean:
        """Return the logical negation."""
        return Boolean(not self.value)

    def __bool__(self) -> bool:
        return self.value

    def __str__(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True)
class String(Value):
    """A FHIRPath string."""

    value: str

    def type_name(self) -> str:
        return "String"

    def equal(self, other: Value) -> bool:
        return isinstance(other, String) and self.value == other.value

    def equivalent(self, other: Value) -> bool:
        """Compare case-insensitively with normalised whitespace."""
        return isinstance(other, String) and _normalize_string(
            self.value
        ) == _normalize_string(other.value)

    def is_empty(self) -> bool:
        return self.value == ""

    def length(self) -> int:
        """Number of characters."""
        return len(self.value)

    def contains(self, substr: str) -> bool:
        return substr in self.value

    def starts_with(self, prefix: str) -> bool:
        return self.value.startswith(prefix)

    def ends_with(self, suffix: str) -> bool:
        return self.value.endswith(suffix)

    def upper(self) -> String:
        return String(self.value.upper())

    def lower(self) -> String:
        return String(self.value.lower())

    def compare(self, other: Value) -> int:
        """Lexicographic comparison returning -1, 0 or 1."""
        if not isinstance(other, String):
            raise FHIRPathTypeError("String", other.type_name(), "comparison")
        return _sign((self.value > other.value) - (self.value < other.value))

    def index_of(self, substr: str) -> int:
        """Index of the first occurrence of substr, or -1."""
        return self.value.find(substr)

    def substring(self, start: int, length: int) -> String:
        """Characters from start, at most length of them."""
        if start < 0 or start >= len(self.value):
            return String("")
        end = min(start + length, len(self.value))
        return String(self.value[start:end])

    def replace(self, old: str, replacement: str) -> String:
        """Replace every occurrence of old."""
        return String(self.value.replace(old, replacement))

    def to_chars(self) -> list[String]:
        """Split into single-character strings."""
        return [String(ch) for ch in self.value]

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Integer(Value):
    """A FHIRPath 64-bit integer."""

    value: int

    def type_name(self) -> str:
        return "Integer"

    def equal(self, other: Value) -> bool:
        if isinstance(other, Integer):
            return self.value == other.value
        if isinstance(other, Decimal):
            return self.to_decimal().equal(other)
        return False

    def to_decimal(self) -> Decimal:
        return Decimal(decimal.Decimal(self.value))

    def compare(self, other: Value) -> int:
        """Numeric comparison returning -1, 0 or 1."""
        if isinstance(other, Integer):
            return _sign(self.value - other.value)
        if isinstance(other, Decimal):
            return self.to_decimal().compare(other)
        raise FHIRPathTypeError("Integer", other.type_name(), "comparison")

    def add(self, other: Integer) -> Integer:
        return Integer(_wrap_int64(self.value + other.value))

    def subtract(self, other: Integer) -> Integer:
        return Integer(_wrap_int64(self.value - other.value))

    def multiply(self, other: Integer) -> Integer:
        return Integer(_wrap_int64(self.value * other.value))

    def divide(self, other: Integer) -> Decimal:
        """Division yielding a Decimal."""
        if other.value == 0:
            raise ZeroDivisionError("division by zero")
        return self.to_decimal().divide(other.to_decimal())

    def div(self, other: Integer) -> Integer:
        """Integer division truncating toward zero."""
        if other.value == 0:
            raise ZeroDivisionError("division by zero")
        quotient = abs(self.value) // abs(other.value)
        if (self.value < 0) != (other.value < 0):
            quotient = -quotient
        return Integer(_wrap_int64(quotient))

    def mod(self, other: Integer) -> Integer:
        """Remainder taking the sign of the dividend."""
        if other.value == 0:
            raise ZeroDivisionError("division by zero")
        remainder = abs(self.value) % abs(other.value)
        return Integer(-remainder if self.value < 0 else remainder)

    def negate(self) -> Integer:
        return Integer(_wrap_int64(-self.value))

    def abs(self) -> Integer:
        if self.value < 0:
            return self.negate()
        return self

    def power(self, exponent: Integer) -> Decimal:
        return self.to_decimal().power(exponent.to_decimal())

    def sqrt(self) -> Decimal:
        if self.value < 0:
            raise ValueError("cannot take square root of negative number")
        return Decimal.from_float(math.sqrt(float(self.value)))

    def __str__(self) -> str:
        return str(self.value)


def parse_decimal(text: str) -> Decimal:
    """Parse a decimal literal, raising ValueError if it is malformed."""
    if not _DECIMAL_PATTERN.match(text):
        raise ValueError(f"invalid decimal: {text}")
    return Decimal(decimal.Decimal(text))


@dataclass(frozen=True)
class Decimal(Value):
    """A FHIRPath decimal with arbitrary precision."""

    value: decimal.Decimal

    @classmethod
    def from_int(cls, value: int) -> Decimal:
        return cls(decimal.Decimal(value))

    @classmethod
    def from_float(cls, value: float) -> Decimal:
        """Build from a float using its shortest exact representation."""
        if not math.isfinite(value):
            raise ValueError(f"cannot represent {value} as a decimal")
        return cls(decimal.Decimal(repr(float(value))))

    def type_name(self) -> str:
        return TYPE_NAME_DECIMAL

    def equal(self, other: Value) -> bool:
        if isinstance(other, Decimal):
            return self.value == other.value
        if isinstance(other, Integer):
            return self.value == decimal.Decimal(other.value)
        return False

    def to_decimal(self) -> Decimal:
        return self

    def compare(self, other: Value) -> int:
        """Numeric comparison returning -1, 0 or 1."""
        if isinstance(other, Decimal):
            return self.value.compare(other.value).__int__()
        if isinstance(other, Integer):
            return int(self.value.compare(decimal.Decimal(other.value)))
        raise FHIRPathTypeError(TYPE_NAME_DECIMAL, other.type_name(), "comparison")

    def add(self, other: Decimal) -> Decimal:
        return Decimal(_EXACT.add(self.value, other.value))

    def subtract(self, other: Decimal) -> Decimal:
        return Decimal(_EXACT.subtract(self.value, other.value))

    def multiply(self, other: Decimal) -> Decimal:
        return Decimal(_EXACT.multiply(self.value, other.value))

    def divide(self, other: Decimal) -> Decimal:
        """Division rounded half away from zero to 16 decimal places."""
        if other.value.is_zero():
            raise ZeroDivisionError("division by zero")
        quotient = _DIVISION.divide(self.value, other.value)
        return Decimal(
            quotient.quantize(
                _DIVISION_PLACES, rounding=decimal.ROUND_HALF_UP, context=_EXACT
            )
        )

    def negate(self) -> Decimal:
        return Decimal(_EXACT.minus(self.value))

    def abs(self) -> Decimal:
        return Decimal(_EXACT.abs(self.value))

    def ceiling(self) -> Integer:
        return Integer(_wrap_int64(math.ceil(self.value)))

    def floor(self) -> Integer:
        return Integer(_wrap_int64(math.floor(self.value)))

    def truncate(self) -> Integer:
        return Integer(_wrap_int64(int(self.value)))

    def round(self, precision: int) -> Decimal:
        """Round half away from zero to the given number of places."""
        exponent = decimal.Decimal(1).scaleb(-precision)
        return Decimal(
            self.value.quantize(
                exponent, rounding=decimal.ROUND_HALF_UP, context=_EXACT
            )
        )

    def power(self, exponent: Decimal) -> Decimal:
        return Decimal.from_float(math.pow(float(self.value), float(exponent.value)))

    def sqrt(self) -> Decimal:
        if self.value < 0:
            raise ValueError("cannot take square root of negative number")
        return Decimal.from_float(math.sqrt(float(self.value)))

    def exp(self) -> Decimal:
        return Decimal.from_float(math.exp(float(self.value)))

    def ln(self) -> Decimal:
        if self.value <= 0:
            raise ValueError("cannot take logarithm of non-positive number")
        return Decimal.from_float(math.log(float(self.value)))

    def log(self, base: Decimal) -> Decimal:
        if self.value <= 0:
            raise ValueError("cannot take logarithm of non-positive number")
        if base.value <= 0 or base.value == 1:
            raise ValueError("invalid logarithm base")
        return Decimal.from_float(
            math.log(float(self.value)) / math.log(float(base.value))
        )

    def is_integer(self) -> bool:
        """Whether there is no fractional part."""
        return self.value == self.value.to_integral_value(rounding=decimal.ROUND_DOWN)

    def to_integer(self) -> Integer | None:
        """The Integer of a whole number, or None if there is a fraction."""
        if self.is_integer():
            return Integer(_wrap_int64(int(self.value)))
        return None

    def __str__(self) -> str:
        return _format_decimal(self.value)