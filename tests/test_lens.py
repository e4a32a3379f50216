"""Tests for Lens."""

from collections import OrderedDict, namedtuple
from dataclasses import dataclass

import pytest

from opticheck.core.errors import StructuralError
from opticheck.core.types import Absent, Present
from opticheck.optics import Lens


@dataclass(frozen=True)
class Address:
    city: str
    zip: str


@dataclass(frozen=True)
class User:
    name: str
    address: Address


Point = namedtuple("Point", ["x", "y"])


class Plain:
    def __init__(self, label):
        self.label = label


class Slotted:
    __slots__ = ("size",)

    def __init__(self, size):
        self.size = size

    def describe(self):
        return f"size {self.size}"


# =============================================================================
# view / set / over
# =============================================================================


class TestLensKey:
    def test_view_mapping_key(self):
        assert Lens.key("name").view({"name": "Alice"}) == "Alice"

    def test_view_attribute(self):
        user = User("Alice", Address("Paris", "75001"))
        assert Lens.key("name").view(user) == "Alice"

    def test_view_missing_key_raises_structural_error(self):
        with pytest.raises(StructuralError) as exc_info:
            Lens.key("email").view({"name": "Alice"})
        assert exc_info.value.location == "email"

    def test_view_none_value_is_returned(self):
        assert Lens.key("email").view({"email": None}) is None

    def test_structural_error_is_a_lookup_error(self):
        with pytest.raises(LookupError):
            Lens.key("missing").view({})

    def test_set_returns_new_dict(self):
        original = {"name": "Alice", "age": 30}
        updated = Lens.key("name").set(original, "Bob")
        assert updated == {"name": "Bob", "age": 30}
        assert original == {"name": "Alice", "age": 30}

    def test_set_missing_key_raises(self):
        with pytest.raises(StructuralError):
            Lens.key("email").set({"name": "Alice"}, "a@b.com")

    def test_set_keeps_dict_subclass(self):
        original = OrderedDict(a=1, b=2)
        updated = Lens.key("a").set(original, 10)
        assert isinstance(updated, OrderedDict)
        assert list(updated.items()) == [("a", 10), ("b", 2)]

    def test_set_dataclass(self):
        user = User("Alice", Address("Paris", "75001"))
        updated = Lens.key("name").set(user, "Bob")
        assert isinstance(updated, User)
        assert updated.name == "Bob"
        assert user.name == "Alice"

    def test_set_namedtuple_attribute(self):
        updated = Lens.key("x").set(Point(1, 2), 5)
        assert updated == Point(5, 2)
        assert isinstance(updated, Point)

    def test_set_plain_object_does_not_mutate(self):
        obj = Plain("before")
        updated = Lens.key("label").set(obj, "after")
        assert updated.label == "after"
        assert obj.label == "before"

    def test_over(self):
        assert Lens.key("n").over({"n": 2}, lambda n: n * 10) == {"n": 20}

    def test_methods_are_not_fields(self):
        with pytest.raises(StructuralError):
            Lens.key("count").view([1, 2])

    def test_set_method_name_raises_structural_error(self):
        with pytest.raises(StructuralError):
            Lens.key("count").set([1, 2], 5)

    def test_slotted_object(self):
        obj = Slotted(3)
        assert Lens.key("size").view(obj) == 3
        with pytest.raises(StructuralError):
            Lens.key("describe").view(obj)


class TestLensIndex:
    def test_view_list_position(self):
        assert Lens.index(1).view(["a", "b", "c"]) == "b"

    def test_set_tuple_keeps_tuple(self):
        assert Lens.index(0).set((1, 2), 9) == (9, 2)

    def test_set_namedtuple_position(self):
        assert Lens.index(1).set(Point(1, 2), 7) == Point(1, 7)

    def test_out_of_range_raises(self):
        with pytest.raises(StructuralError):
            Lens.index(5).view([1, 2])

    def test_rejects_non_int(self):
        with pytest.raises(TypeError):
            Lens.index("0")


class TestLensPath:
    def test_view_nested(self):
        data = {"address": {"city": "Paris"}}
        assert Lens.path(["address", "city"]).view(data) == "Paris"

    def test_view_nested_dataclass(self):
        user = User("Alice", Address("Paris", "75001"))
        assert Lens.path(["address", "city"]).view(user) == "Paris"

    def test_missing_intermediate_raises(self):
        with pytest.raises(StructuralError):
            Lens.path(["address", "city"]).view({"name": "Alice"})

    def test_set_nested_rebuilds_only_the_path(self):
        user = User("Alice", Address("Paris", "75001"))
        updated = Lens.path(["address", "city"]).set(user, "Lyon")
        assert updated == User("Alice", Address("Lyon", "75001"))
        assert user.address.city == "Paris"

    def test_empty_path_is_identity(self):
        assert Lens.path([]).view({"a": 1}) == {"a": 1}


# =============================================================================
# Laws
# =============================================================================


class TestLensLaws:
    @pytest.mark.parametrize(
        "lens, structure, value",
        [
            (Lens.key("a"), {"a": 1, "b": 2}, 5),
            (Lens.path(["a", "b"]), {"a": {"b": 1}}, 9),
            (Lens.index(0), [1, 2, 3], 0),
            (Lens.key("a").compose(Lens.key("b")), {"a": {"b": 1}}, 3),
        ],
    )
    def test_get_set_set_get_set_set(self, lens, structure, value):
        assert lens.set(structure, lens.view(structure)) == structure
        assert lens.view(lens.set(structure, value)) == value
        assert lens.set(lens.set(structure, value), "other") == lens.set(structure, "other")


class TestLensAsPrism:
    def test_present_focus(self):
        assert Lens.key("a").as_prism().preview({"a": 1}) == Present(1)

    def test_structural_absence_becomes_absent(self):
        assert Lens.key("a").as_prism().preview({}) is Absent

    def test_review_uses_builder(self):
        assert Lens.key("a").as_prism().review(1) == {"a": 1}

    def test_review_without_builder_raises(self):
        with pytest.raises(TypeError):
            Lens.index(0).as_prism().review(1)

    def test_identity(self):
        assert Lens.identity().view(5) == 5
        assert Lens.identity().set(5, 6) == 6
