"""Ordered FHIRPath collections and shared cached values."""

from __future__ import annotations

from collections.abc import Iterable

from fhirpath_types.values import Boolean, Integer, Value

_TRUE = Boolean(True)
_FALSE = Boolean(False)
_INTEGER_CACHE = {n: Integer(n) for n in range(-128, 128)}


class Collection(list):
    """An ordered sequence of FHIRPath values.

    Membership tests made through the methods below use FHIRPath equality
    (``Value.equal``), so an Integer and a Decimal of the same amount match.
    """

    def is_empty(self) -> bool:
        """Whether the collection has no elements."""
        return not self

    def first(self) -> Value | None:
        """The first element, or None if the collection is empty."""
        return self[0] if self else None

    def last(self) -> Value | None:
        """The last element, or None if the collection is empty."""
        return self[-1] if self else None

    def single(self) -> Value:
        """The only element; raises ValueError unless there is exactly one."""
        if not self:
            raise ValueError("expected single value, got empty collection")
        if len(self) > 1:
            raise ValueError(f"expected single value, got {len(self)} elements")
        return self[0]

    def tail(self) -> Collection:
        """All elements except the first."""
        return Collection(self[1:])

    def skip(self, n: int) -> Collection:
        """The collection without its first n elements."""
        return Collection(self[max(n, 0):])

    def take(self, n: int) -> Collection:
        """Only the first n elements."""
        if n <= 0:
            return Collection()
        return Collection(self[:n])

    def contains(self, value: Value) -> bool:
        """Whether an element is equal to value."""
        return any(item.equal(value) for item in self)

    def distinct(self) -> Collection:
        """Duplicates removed, keeping the order of first occurrence."""
        result = Collection()
        for item in self:
            if not result.contains(item):
                result.append(item)
        return result

    def is_distinct(self) -> bool:
        """Whether every element is unique."""
        return len(self) == len(self.distinct())

    def union(self, other: Iterable[Value]) -> Collection:
        """This collection followed by the elements of other not yet present."""
        result = Collection(self)
        for item in other:
            if not result.contains(item):
                result.append(item)
        return result

    def combine(self, other: Iterable[Value]) -> Collection:
        """Both collections concatenated, duplicates kept."""
        return Collection([*self, *other])

    def intersect(self, other: Iterable[Value]) -> Collection:
        """Elements present in both collections, without duplicates."""
        others = Collection(other)
        result = Collection()
        for item in self:
            if others.contains(item) and not result.contains(item):
                result.append(item)
        return result

    def exclude(self, other: Iterable[Value]) -> Collection:
        """Elements of this collection not present in other."""
        others = Collection(other)
        return Collection(item for item in self if not others.contains(item))

    def to_boolean(self) -> bool:
        """The truth value of a singleton Boolean collection."""
        if not self:
            raise ValueError("cannot convert empty collection to boolean")
        if len(self) > 1:
            raise ValueError(
                f"cannot convert collection with {len(self)} elements to boolean"
            )
        item = self[0]
        if not isinstance(item, Boolean):
            raise TypeError(f"cannot convert {item.type_name()} to boolean")
        return item.value

    def all_true(self) -> bool:
        return all(isinstance(item, Boolean) and item.value for item in self)

    def any_true(self) -> bool:
        return any(isinstance(item, Boolean) and item.value for item in self)

    def all_false(self) -> bool:
        return all(isinstance(item, Boolean) and not item.value for item in self)

    def any_false(self) -> bool:
        return any(isinstance(item, Boolean) and not item.value for item in self)

    def __str__(self) -> str:
        return "[" + ", ".join(str(item) for item in self) + "]"


def get_boolean(flag: bool) -> Boolean:
    """The shared Boolean instance for flag."""
    return _TRUE if flag else _FALSE


def get_integer(n: int) -> Integer:
    """A shared Integer for values in [-128, 127], a new one otherwise."""
    cached = _INTEGER_CACHE.get(n)
    return cached if cached is not None else Integer(n)


def singleton_collection(value: Value) -> Collection:
    """A collection holding only value."""
    return Collection([value])