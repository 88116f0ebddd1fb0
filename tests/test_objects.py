import pytest

from fhirpath_types.objects import ObjectValue, json_to_collection
from fhirpath_types.quantity import parse_quantity
from fhirpath_types.values import Boolean, Decimal, Integer, String


def test_plain_object_type():
    obj = ObjectValue(b'{"name": "John", "age": 30}')
    assert obj.type_name() == "Object"


def test_get_fields():
    obj = ObjectValue(b'{"name": "John", "age": 30, "active": true}')
    assert obj.get("name") == String("John")
    assert obj.get("age") == Integer(30)
    assert obj.get("active") == Boolean(True)


def test_get_missing_and_array_fields():
    obj = ObjectValue('{"items": [1, 2], "nothing": null}')
    assert obj.get("absent") is None
    assert obj.get("items") is None
    assert obj.get("nothing") is None


def test_get_decimal_and_escaped_string():
    obj = ObjectValue(r'{"x": 1.50, "s": "a\"b\u00e9"}')
    x = obj.get("x")
    assert isinstance(x, Decimal)
    assert x.equal(Decimal.from_int(0).add(Decimal.from_float(1.5)))
    assert obj.get("s") == String('a"bé')


def test_get_large_integer_becomes_decimal():
    obj = ObjectValue('{"big": 99999999999999999999}')
    big = obj.get("big")
    assert isinstance(big, Decimal)
    assert str(big) == "99999999999999999999"


def test_get_collection():
    obj = ObjectValue(b'{"items": [1, 2, 3]}')
    items = obj.get_collection("items")
    assert len(items) == 3
    assert items == [Integer(1), Integer(2), Integer(3)]


def test_get_collection_scalar_missing_and_nulls():
    obj = ObjectValue('{"id": "x", "list": [null, "a", null]}')
    assert obj.get_collection("id") == [String("x")]
    assert obj.get_collection("missing").is_empty()
    assert obj.get_collection("list") == [String("a")]


def test_nested_object():
    obj = ObjectValue(
        '{"resourceType": "Patient", "meta": {"tag": [{"system": "s", "code": "c"}]}}'
    )
    meta = obj.get("meta")
    assert isinstance(meta, ObjectValue)
    tags = meta.get_collection("tag")
    assert len(tags) == 1
    assert tags[0].type_name() == "Coding"


def test_resource_type():
    obj = ObjectValue(b'{"resourceType": "Patient", "id": "123"}')
    assert obj.type_name() == "Patient"


def test_non_string_resource_type_is_ignored():
    obj = ObjectValue('{"resourceType": 5}')
    assert obj.type_name() == "Object"


@pytest.mark.parametrize(
    "text, expected",
    [
        ('{"value": 1, "unit": "kg"}', "Quantity"),
        ('{"system": "s", "code": "c"}', "Coding"),
        ('{"coding": []}', "CodeableConcept"),
        ('{"reference": "#org1"}', "Reference"),
        ('{"start": "2024"}', "Period"),
        ('{"low": {"value": 1}}', "Range"),
        ('{"numerator": {"value": 1}}', "Ratio"),
        ('{"contentType": "text/plain"}', "Attachment"),
        ('{"family": "Doe"}', "HumanName"),
        ('{"given": ["Jane"]}', "HumanName"),
        ('{"city": "Springfield"}', "Address"),
        ('{"system": "phone", "use": "home"}', "ContactPoint"),
        ('{"text": "note", "time": "2024"}', "Annotation"),
        ('{"text": "note"}', "Object"),
        ('{"coding": "not an array"}', "Object"),
    ],
)
def test_type_inference(text, expected):
    assert ObjectValue(text).type_name() == expected


def test_keys_and_children():
    obj = ObjectValue('{"a": 1, "b": [2, 3], "c": null, "d": "x"}')
    assert obj.keys() == ["a", "b", "c", "d"]
    assert obj.children() == [Integer(1), Integer(2), Integer(3), String("x")]


def test_equality_and_string():
    text = '{"a": 1}'
    first = ObjectValue(text)
    second = ObjectValue(text)
    other = ObjectValue('{"a": 2}')
    assert first.equal(second)
    assert first.equivalent(second)
    assert not first.equal(other)
    assert not first.equal(String(text))
    assert str(first) == text
    assert first.is_empty() is False


def test_invalid_json_raises():
    with pytest.raises(ValueError):
        ObjectValue("{not json")
    with pytest.raises(ValueError):
        ObjectValue("[1, 2]")


def test_to_quantity_with_unit_field():
    q = ObjectValue(b'{"value": 120, "unit": "mm[Hg]"}').to_quantity()
    assert q is not None
    assert str(q.value) == "120"
    assert q.unit == "mm[Hg]"


def test_to_quantity_with_code_field():
    q = ObjectValue(b'{"value": 75.5, "code": "kg"}').to_quantity()
    assert q is not None
    assert str(q.value) == "75.5"
    assert q.unit == "kg"


def test_to_quantity_with_both_unit_and_code():
    q = ObjectValue(b'{"value": 100, "unit": "mg", "code": "mg"}').to_quantity()
    assert q is not None
    assert q.unit == "mg"


def test_to_quantity_without_unit():
    q = ObjectValue(b'{"value": 42}').to_quantity()
    assert q is not None
    assert str(q.value) == "42"
    assert q.unit == ""


def test_to_quantity_with_decimal_value():
    q = ObjectValue(b'{"value": 3.14159, "unit": "rad"}').to_quantity()
    assert q is not None
    assert str(q.value) == "3.14159"


@pytest.mark.parametrize(
    "text",
    [
        '{"unit": "kg"}',
        '{"value": "not a number", "unit": "kg"}',
        '{"value": null, "unit": "kg"}',
        '{"value": true, "unit": "kg"}',
    ],
)
def test_to_quantity_failures(text):
    assert ObjectValue(text).to_quantity() is None


def test_to_quantity_fhir_example():
    obj = ObjectValue(
        b"""{
            "value": 6.3,
            "unit": "mmol/l",
            "system": "http://unitsofmeasure.org",
            "code": "mmol/L"
        }"""
    )
    q = obj.to_quantity()
    assert q is not None
    assert str(q.value) == "6.3"
    assert q.unit == "mmol/l"


def test_to_quantity_comparison():
    q = ObjectValue(b'{"value": 120, "unit": "mm[Hg]"}').to_quantity()
    assert q is not None
    assert q.compare(parse_quantity("90 mm[Hg]")) == 1


def test_json_to_collection_object():
    c = json_to_collection(b'{"name": "John"}')
    assert len(c) == 1
    assert isinstance(c[0], ObjectValue)
    assert c[0].get("name") == String("John")


def test_json_to_collection_array():
    c = json_to_collection(b"[1, 2, 3]")
    assert len(c) == 3


def test_json_to_collection_null():
    assert json_to_collection(b"null").is_empty()


def test_json_to_collection_primitive():
    c = json_to_collection(b"42")
    assert len(c) == 1
    assert c[0] == Integer(42)


def test_json_to_collection_string_and_invalid():
    assert json_to_collection('"hi"') == [String("hi")]
    with pytest.raises(ValueError):
        json_to_collection("{oops")
    with pytest.raises(ValueError):
        json_to_collection("NaN")