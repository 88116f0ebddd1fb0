import pytest

from fhirpath_types.collection import (
    Collection,
    get_boolean,
    get_integer,
    singleton_collection,
)
from fhirpath_types.values import Boolean, Decimal, Integer, String


def ints(*values):
    return Collection(Integer(v) for v in values)


def test_empty():
    c = Collection()
    assert c.is_empty()
    assert len(c) == 0


def test_first_and_last():
    c = ints(1, 2, 3)
    assert c.first() == Integer(1)
    assert c.last() == Integer(3)


def test_first_and_last_of_empty():
    assert Collection().first() is None
    assert Collection().last() is None


def test_single():
    assert ints(42).single() == Integer(42)
    with pytest.raises(ValueError, match="empty"):
        Collection().single()
    with pytest.raises(ValueError, match="2 elements"):
        ints(1, 2).single()


def test_skip_and_take():
    c = ints(1, 2, 3, 4, 5)
    assert c.skip(2) == ints(3, 4, 5)
    assert c.take(3) == ints(1, 2, 3)


def test_skip_edge_cases():
    c = ints(1, 2)
    assert c.skip(10).is_empty()
    assert c.skip(0) == ints(1, 2)
    assert c.skip(-1) == ints(1, 2)


def test_take_edge_cases():
    c = ints(1, 2)
    assert len(c.take(10)) == 2
    assert c.take(0).is_empty()
    assert c.take(-3).is_empty()


def test_tail():
    assert ints(1, 2, 3).tail() == ints(2, 3)
    assert Collection().tail().is_empty()
    assert isinstance(ints(1, 2).tail(), Collection)


def test_distinct_keeps_first_occurrence_order():
    distinct = ints(1, 2, 1, 3, 2).distinct()
    assert distinct == ints(1, 2, 3)


def test_distinct_uses_numeric_equality():
    c = Collection([Integer(1), Decimal.from_int(1)])
    assert len(c.distinct()) == 1


def test_is_distinct():
    assert ints(1, 2).is_distinct()
    assert not ints(1, 1).is_distinct()


def test_union_and_intersect():
    c1 = ints(1, 2, 3)
    c2 = ints(2, 3, 4)
    assert c1.union(c2) == ints(1, 2, 3, 4)
    assert c1.intersect(c2) == ints(2, 3)


def test_exclude():
    assert ints(1, 2, 3).exclude(ints(2)) == ints(1, 3)


def test_combine_keeps_duplicates():
    combined = ints(1).combine(ints(1))
    assert len(combined) == 2


def test_contains():
    c = Collection([String("a"), Integer(2)])
    assert c.contains(String("a"))
    assert c.contains(Decimal.from_int(2))
    assert not c.contains(String("b"))


def test_boolean_aggregation():
    assert Collection([Boolean(True)] * 3).all_true()
    mixed = Collection([Boolean(False), Boolean(True)])
    assert mixed.any_true()
    assert mixed.any_false()
    assert not mixed.all_true()
    assert not mixed.all_false()


def test_all_false_and_any_false():
    assert Collection([Boolean(False), Boolean(False)]).all_false()
    assert Collection([Boolean(True), Boolean(False)]).any_false()


def test_aggregation_of_empty():
    assert Collection().all_true()
    assert Collection().all_false()
    assert not Collection().any_true()
    assert not Collection().any_false()


def test_non_boolean_items_are_not_true():
    c = Collection([Integer(1)])
    assert not c.all_true()
    assert not c.any_true()


def test_to_boolean():
    assert Collection([Boolean(True)]).to_boolean() is True
    assert Collection([Boolean(False)]).to_boolean() is False


def test_to_boolean_errors():
    with pytest.raises(ValueError):
        Collection().to_boolean()
    with pytest.raises(ValueError):
        Collection([Boolean(True), Boolean(True)]).to_boolean()
    with pytest.raises(TypeError):
        ints(1).to_boolean()


def test_string_representation():
    assert str(Collection()) == "[]"
    assert str(Collection([Integer(1), String("a"), Boolean(True)])) == "[1, a, true]"


def test_get_boolean_cache():
    assert get_boolean(True) is get_boolean(True)
    assert get_boolean(False) is get_boolean(False)
    assert get_boolean(True).value is True
    assert get_boolean(False).value is False


def test_get_integer_cache_range():
    assert get_integer(42) is get_integer(42)
    assert get_integer(-100) is get_integer(-100)
    assert get_integer(-128).value == -128
    assert get_integer(127).value == 127
    assert get_integer(1000).value == 1000


def test_singleton_collection():
    c = singleton_collection(Integer(42))
    assert len(c) == 1
    assert c[0] == Integer(42)