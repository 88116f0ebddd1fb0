# fhirpath-types

The value types a FHIRPath evaluator works with, as a small Python package that
needs nothing beyond the standard library.

## What it holds

- `fhirpath_types.values`: the `Value` base class, with `type_name()`, `equal()`,
  `equivalent()` and `is_empty()`, and the scalar values `Boolean`, `String`,
  `Integer` and `Decimal`. `parse_decimal` reads a decimal literal. `Decimal` keeps
  exact precision for addition, subtraction and multiplication, so `0.1 + 0.2` is
  equal to `0.3`; division is rounded half away from zero to 16 decimal places.
  `Integer` arithmetic wraps in the signed 64-bit range; `div` truncates toward zero
  and `mod` takes the sign of the dividend. `String.equivalent` ignores case,
  leading and trailing whitespace, and collapses runs of inner whitespace.
  Comparing a scalar with a value of another type raises `FHIRPathTypeError` (a
  `TypeError`); dividing by zero raises `ZeroDivisionError`.
- `fhirpath_types.collection`: `Collection`, a `list` of values whose methods use
  FHIRPath equality: `first`, `last` (both `None` when empty), `single`, `tail`,
  `skip`, `take`, `contains`, `distinct`, `is_distinct`, `union`, `combine`,
  `intersect`, `exclude`, `to_boolean` and the `all_true` / `any_true` /
  `all_false` / `any_false` aggregates. The helpers `get_boolean`, `get_integer`
  (shared instances for -128 to 127) and `singleton_collection` live here too.
- `fhirpath_types.quantity`: `Quantity` and `parse_quantity`, for values such as
  `10 kg` or `5.5 'kg/m2'`. An empty unit matches any unit; `equivalent` compares
  units case-insensitively. Adding, subtracting or comparing quantities with two
  different non-empty units raises `ValueError`.
- `fhirpath_types.temporal`: partial `Date` and `Time` values with `DatePrecision`
  and `TimePrecision`, read by `parse_date` and `parse_time` or built from the
  standard library by `date_from_python` and `time_from_python`. `Date` supports
  `add_duration` / `subtract_duration` in years, months, weeks and days.
- `fhirpath_types.fhirdatetime`: `DateTime` with `DateTimePrecision` and an
  optional time-zone offset, read by `parse_datetime` or built by
  `datetime_from_python`. `add_duration` also accepts hours, minutes, seconds and
  milliseconds; `to_datetime` gives an aware `datetime.datetime`.
- `fhirpath_types.objects`: `ObjectValue`, a JSON object (bytes, text or a mapping)
  that reports its `resourceType`, or else infers a FHIR type such as `Quantity`,
  `Coding`, `CodeableConcept` or `HumanName` from its fields, falling back to
  `Object`. It offers `get`, `get_collection`, `keys`, `children` and
  `to_quantity`. `json_to_collection` turns JSON text into a `Collection`.

Temporal comparisons are precision-aware: `compare` returns -1, 0 or 1, and raises
`ValueError` when the precisions differ and the answer is ambiguous.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Examples

```python
from fhirpath_types.values import Integer, parse_decimal
from fhirpath_types.collection import Collection
from fhirpath_types.quantity import parse_quantity
from fhirpath_types.temporal import parse_date
from fhirpath_types.fhirdatetime import parse_datetime
from fhirpath_types.objects import ObjectValue, json_to_collection

total = parse_decimal("0.1").add(parse_decimal("0.2"))
assert total.equal(parse_decimal("0.3"))

items = Collection([Integer(1), Integer(2), Integer(1), Integer(3)])
assert len(items.distinct()) == 3

weight = parse_quantity("10 kg").add(parse_quantity("5 kg"))
assert str(weight) == "15 kg"

assert parse_date("2024-01-15").compare(parse_date("2024-01-20")) == -1
# Comparing "2024" with "2024-06-15" is ambiguous and raises ValueError.

utc = parse_datetime("2024-01-15T10:00:00Z")
east = parse_datetime("2024-01-15T15:00:00+05:00")
assert utc.compare(east) == 0

patient = ObjectValue(b'{"resourceType": "Patient", "id": "123"}')
assert patient.type_name() == "Patient"

assert len(json_to_collection(b"[1, 2, 3]")) == 3
```

## What it does not do

- It does not parse or evaluate FHIRPath expressions; it only provides the values
  an evaluator works with.
- It does not convert between units. Quantities in different non-empty units
  (`1 kg` and `1000 g`) are never equal, and comparing or adding them raises
  `ValueError`.
- It offers no command-line tool.