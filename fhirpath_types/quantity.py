"""FHIRPath quantities: a decimal amount with a unit."""

from __future__ import annotations

import decimal
import re
from dataclasses import dataclass

from fhirpath_types.values import Decimal, Value

_EXACT = decimal.Context(
    prec=decimal.MAX_PREC,
    Emax=decimal.MAX_EMAX,
    Emin=decimal.MIN_EMIN,
)

_QUANTITY_PATTERN = re.compile(
    r"^([+-]?\d+\.?\d*)\s*(?:'([^']+)'|(\S+))?$", re.ASCII
)


def parse_quantity(text: str) -> Quantity:
    """Parse text such as ``10 kg`` or ``5.5 'kg/m2'``."""
    match = _QUANTITY_PATTERN.match(text.strip())
    if match is None:
        raise ValueError(f"invalid quantity format: {text}")
    number, quoted, bare = match.groups()
    try:
        value = decimal.Decimal(number)
    except decimal.InvalidOperation:
        raise ValueError(f"invalid quantity value: {number}") from None
    return Quantity(value, quoted or bare or "")


@dataclass(frozen=True)
class Quantity(Value):
    """A decimal amount with a unit; the empty unit matches any unit."""

    value: decimal.Decimal
    unit: str = ""

    def type_name(self) -> str:
        return "Quantity"

    def equal(self, other: Value) -> bool:
        """Equal amounts in the same unit, or where either unit is empty."""
        if not isinstance(other, Quantity):
            return False
        if self.unit == other.unit or not self.unit or not other.unit:
            return self.value == other.value
        return False

    def equivalent(self, other: Value) -> bool:
        """Like equal, but units compare case-insensitively."""
        if not isinstance(other, Quantity):
            return False
        if not self.unit or not other.unit:
            return self.value == other.value
        if self.unit.casefold() == other.unit.casefold():
            return self.value == other.value
        return False

    def compare(self, other: Value) -> int:
        """Compare amounts, returning -1, 0 or 1; units must agree."""
        if not isinstance(other, Quantity):
            raise TypeError(f"cannot compare Quantity with {other.type_name()}")
        if self.unit != other.unit and self.unit and other.unit:
            raise ValueError(f"incompatible units: {self.unit} and {other.unit}")
        return int(self.value.compare(other.value))

    def _result_unit(self, other: Quantity) -> str:
        if self.unit != other.unit and self.unit and other.unit:
            raise ValueError(f"incompatible units: {self.unit} and {other.unit}")
        return self.unit or other.unit

    def add(self, other: Quantity) -> Quantity:
        unit = self._result_unit(other)
        return Quantity(_EXACT.add(self.value, other.value), unit)

    def subtract(self, other: Quantity) -> Quantity:
        unit = self._result_unit(other)
        return Quantity(_EXACT.subtract(self.value, other.value), unit)

    def multiply(self, factor: decimal.Decimal | int) -> Quantity:
        """Scale the amount by a number."""
        return Quantity(_EXACT.multiply(self.value, decimal.Decimal(factor)), self.unit)

    def divide(self, divisor: decimal.Decimal | int) -> Quantity:
        """Divide the amount by a number, to 16 decimal places."""
        divisor = decimal.Decimal(divisor)
        if divisor.is_zero():
            raise ZeroDivisionError("division by zero")
        quotient = Decimal(self.value).divide(Decimal(divisor))
        return Quantity(quotient.value, self.unit)

    def __str__(self) -> str:
        amount = str(Decimal(self.value))
        if not self.unit:
            return amount
        if " " in self.unit:
            return f"{amount} '{self.unit}'"
        return f"{amount} {self.unit}"