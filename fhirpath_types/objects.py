"""JSON objects as FHIRPath values, with FHIR type inference."""

from __future__ import annotations

import decimal
import json
from collections.abc import Mapping
from typing import Any

from fhirpath_types.collection import Collection
from fhirpath_types.quantity import Quantity
from fhirpath_types.values import Boolean, Decimal, Integer, String, Value

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1

_TYPE_QUANTITY = "Quantity"
_TYPE_CODING = "Coding"
_TYPE_CODEABLE_CONCEPT = "CodeableConcept"
_TYPE_REFERENCE = "Reference"
_TYPE_PERIOD = "Period"
_TYPE_IDENTIFIER = "Identifier"
_TYPE_RANGE = "Range"
_TYPE_RATIO = "Ratio"
_TYPE_ATTACHMENT = "Attachment"
_TYPE_HUMAN_NAME = "HumanName"
_TYPE_ADDRESS = "Address"
_TYPE_CONTACT_POINT = "ContactPoint"
_TYPE_ANNOTATION = "Annotation"
_TYPE_OBJECT = "Object"


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid JSON constant: {name}")


def _first_wins(pairs: list[tuple[str, Any]]) -> dict[str, Any]:
    """Build an object keeping the first occurrence of a repeated key."""
    result: dict[str, Any] = {}
    for key, item in pairs:
        result.setdefault(key, item)
    return result


def _decode(data: bytes | str) -> Any:
    """Parse JSON text, keeping non-integral numbers as exact decimals."""
    if isinstance(data, (bytes, bytearray)):
        data = data.decode("utf-8")
    return json.loads(
        data,
        parse_float=decimal.Decimal,
        parse_constant=_reject_constant,
        object_pairs_hook=_first_wins,
    )


def _dump(raw: Any) -> str:
    """Render parsed JSON back to compact text, numbers as written."""
    if raw is None:
        return "null"
    if isinstance(raw, bool):
        return "true" if raw else "false"
    if isinstance(raw, int):
        return str(raw)
    if isinstance(raw, decimal.Decimal):
        return str(raw)
    if isinstance(raw, float):
        return repr(raw)
    if isinstance(raw, str):
        return json.dumps(raw, ensure_ascii=False)
    if isinstance(raw, Mapping):
        members = ",".join(
            f"{json.dumps(key, ensure_ascii=False)}:{_dump(item)}"
            for key, item in raw.items()
        )
        return "{" + members + "}"
    if isinstance(raw, (list, tuple)):
        return "[" + ",".join(_dump(item) for item in raw) + "]"
    raise TypeError(f"cannot represent {type(raw).__name__} as JSON")


def _is_number(raw: Any) -> bool:
    return isinstance(raw, (int, float, decimal.Decimal)) and not isinstance(raw, bool)


def _to_value(raw: Any) -> Value | None:
    """Convert a parsed JSON item to a FHIRPath value; arrays and null give None."""
    if raw is None or isinstance(raw, (list, tuple)):
        return None
    if isinstance(raw, bool):
        return Boolean(raw)
    if isinstance(raw, int):
        if _INT64_MIN <= raw <= _INT64_MAX:
            return Integer(raw)
        return Decimal(decimal.Decimal(raw))
    if isinstance(raw, decimal.Decimal):
        return Decimal(raw)
    if isinstance(raw, float):
        return Decimal.from_float(raw)
    if isinstance(raw, str):
        return String(raw)
    if isinstance(raw, Mapping):
        return ObjectValue(raw)
    return None


def _array_to_collection(items: list[Any]) -> Collection:
    values = (_to_value(item) for item in items)
    return Collection(value for value in values if value is not None)


class ObjectValue(Value):
    """A FHIR resource or complex type held as a JSON object."""

    def __init__(self, data: bytes | str | Mapping[str, Any]) -> None:
        if isinstance(data, Mapping):
            fields = dict(data)
            text = _dump(fields)
        else:
            fields = _decode(data)
            if not isinstance(fields, dict):
                raise ValueError("JSON data is not an object")
            text = data.decode("utf-8") if isinstance(data, (bytes, bytearray)) else data
        self._fields: dict[str, Any] = fields
        self._text = text
        self._canonical: str | None = None
        self._cache: dict[str, Value | None] = {}

    @property
    def data(self) -> str:
        """The JSON text of the object."""
        return self._text

    def _canonical_text(self) -> str:
        if self._canonical is None:
            self._canonical = _dump(self._fields)
        return self._canonical

    def type_name(self) -> str:
        """The resourceType if present, otherwise a type inferred from the fields."""
        resource_type = self._fields.get("resourceType")
        if isinstance(resource_type, str):
            return resource_type
        return (
            self._infer_quantity()
            or self._infer_coding()
            or self._infer_complex()
            or _TYPE_OBJECT
        )

    def _has(self, name: str) -> bool:
        return name in self._fields

    def _has_array(self, name: str) -> bool:
        return isinstance(self._fields.get(name), list)

    def _has_string(self, name: str) -> bool:
        return isinstance(self._fields.get(name), str)

    def _infer_quantity(self) -> str:
        if self._has("value") and (
            self._has("unit") or self._has("code") or self._has("system")
        ):
            return _TYPE_QUANTITY
        return ""

    def _infer_coding(self) -> str:
        if self._has("system") and self._has("code") and not self._has("value"):
            return _TYPE_CODING
        return ""

    def _infer_complex(self) -> str:
        checks = (
            (self._has_array("coding"), _TYPE_CODEABLE_CONCEPT),
            (self._has("reference"), _TYPE_REFERENCE),
            (self._has("start") or self._has("end"), _TYPE_PERIOD),
            (self._has("system") and self._has_string("value"), _TYPE_IDENTIFIER),
            (self._has("low") or self._has("high"), _TYPE_RANGE),
            (self._has("numerator") or self._has("denominator"), _TYPE_RATIO),
            (self._has("contentType"), _TYPE_ATTACHMENT),
            (self._has("family") or self._has_array("given"), _TYPE_HUMAN_NAME),
            (self._has("city") or self._has("postalCode"), _TYPE_ADDRESS),
            (self._has("system") and self._has("use"), _TYPE_CONTACT_POINT),
            (
                self._has("text")
                and (
                    self._has("time")
                    or self._has("authorReference")
                    or self._has("authorString")
                ),
                _TYPE_ANNOTATION,
            ),
        )
        return next((name for matched, name in checks if matched), "")

    def equal(self, other: Value) -> bool:
        """Whether other is an object with the same JSON content."""
        return (
            isinstance(other, ObjectValue)
            and self._canonical_text() == other._canonical_text()
        )

    def get(self, field: str) -> Value | None:
        """The value of field, or None when it is absent, null or an array."""
        if field in self._cache:
            return self._cache[field]
        if field not in self._fields:
            return None
        value = _to_value(self._fields[field])
        self._cache[field] = value
        return value

    def get_collection(self, field: str) -> Collection:
        """The field as a collection: array items, a singleton, or empty."""
        if field not in self._fields:
            return Collection()
        raw = self._fields[field]
        if isinstance(raw, list):
            return _array_to_collection(raw)
        value = _to_value(raw)
        return Collection() if value is None else Collection([value])

    def keys(self) -> list[str]:
        """All field names, in document order."""
        return list(self._fields)

    def children(self) -> Collection:
        """Every child value, with array items flattened in."""
        result = Collection()
        for raw in self._fields.values():
            if isinstance(raw, list):
                result.extend(_array_to_collection(raw))
            else:
                value = _to_value(raw)
                if value is not None:
                    result.append(value)
        return result

    def to_quantity(self) -> Quantity | None:
        """A Quantity from a numeric "value" and a "unit" or "code", or None."""
        raw = self._fields.get("value")
        if not _is_number(raw):
            return None
        amount = raw if isinstance(raw, decimal.Decimal) else decimal.Decimal(_dump(raw))
        unit = ""
        for name in ("unit", "code"):
            if name in self._fields:
                unit_raw = self._fields[name]
                unit = unit_raw if isinstance(unit_raw, str) else _dump(unit_raw)
                break
        return Quantity(amount, unit)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ObjectValue):
            return NotImplemented
        return self.equal(other)

    def __hash__(self) -> int:
        return hash(self._canonical_text())

    def __repr__(self) -> str:
        return f"ObjectValue({self._text!r})"

    def __str__(self) -> str:
        return self._text


def json_to_collection(data: bytes | str) -> Collection:
    """Turn JSON text into a collection; raises ValueError on malformed JSON."""
    raw = _decode(data)
    if isinstance(raw, dict):
        return Collection([ObjectValue(data)])
    if isinstance(raw, list):
        return _array_to_collection(raw)
    value = _to_value(raw)
    return Collection() if value is None else Collection([value])