"""Tests for step descriptors and their normalization."""

import pytest

from opticheck.core.errors import BuildError, StructuralError
from opticheck.core.types import Absent, Present
from opticheck.optics import Iso, Lens, Prism, Traversal
from opticheck.validation.steps import (
    ProjectionKind,
    at,
    normalize_projection,
    normalize_step,
    normalize_validators,
)
from opticheck.validation.validators import Email, MinLength, Required


def has_at(value):
    return "ok" if "@" in value else ("error", "no @")


class TestDescriptorForms:
    def test_bare_validator_is_root_step(self):
        step = normalize_step(Required, 0)
        assert step.is_root
        assert len(step.validators) == 1

    def test_validator_list_is_root_step(self):
        step = normalize_step([Required, Email], 0)
        assert step.is_root
        assert [v.ref.name for v in step.validators] == ["Required", "Email"]

    def test_validator_with_options_pair_is_root_step(self):
        step = normalize_step((MinLength, {"min": 3}), 0)
        assert step.is_root
        assert step.validators[0].options["min"] == 3

    def test_at_helper_is_projected_step(self):
        step = normalize_step(at("name", Required), 0)
        assert not step.is_root
        assert step.projection.kind is ProjectionKind.PRISM

    def test_plain_pair_is_projected_step(self):
        step = normalize_step(("name", [Required, (MinLength, {"min": 2})]), 0)
        assert step.projection.kind is ProjectionKind.PRISM
        assert [v.ref.name for v in step.validators] == ["Required", "MinLength"]

    def test_validator_order_is_kept(self):
        step = normalize_step(at("email", [Email, Required, has_at]), 0)
        assert [v.ref.name for v in step.validators] == ["Email", "Required", "has_at"]


class TestProjectionPrecedence:
    def test_string_is_prism_key(self):
        projection = normalize_projection("email")
        assert projection.kind is ProjectionKind.PRISM
        assert projection.apply({}) is Absent
        assert projection.apply({"email": "a@b.com"}) == "a@b.com"

    def test_list_of_names_is_prism_path(self):
        projection = normalize_projection(["address", "city"])
        assert projection.apply({"address": {"city": "Paris"}}) == "Paris"
        assert projection.apply({"address": None}) is Absent

    def test_lens_kept_and_raises_on_missing(self):
        projection = normalize_projection(Lens.key("id"))
        assert projection.kind is ProjectionKind.LENS
        with pytest.raises(StructuralError):
            projection.apply({})

    def test_iso_used_as_lens(self):
        projection = normalize_projection(Iso.make(str.lower, str.upper))
        assert projection.kind is ProjectionKind.LENS
        assert projection.apply("ABC") == "abc"

    def test_prism_focus_is_unwrapped(self):
        projection = normalize_projection(Prism.key("a"))
        assert projection.apply({"a": 1}) == 1

    def test_traversal_gives_list(self):
        t = Traversal.combine([Prism.key("a"), Prism.key("b")])
        projection = normalize_projection(t)
        assert projection.kind is ProjectionKind.TRAVERSAL
        assert projection.apply({"a": 1}) == [1]

    def test_callable_is_ad_hoc_projection(self):
        projection = normalize_projection(lambda user: user["first"] + user["last"])
        assert projection.kind is ProjectionKind.FUNCTION
        assert projection.apply({"first": "a", "last": "b"}) == "ab"

    def test_callable_returning_present_is_unwrapped(self):
        projection = normalize_projection(lambda value: Present(value * 2))
        assert projection.apply(2) == 4


class TestBuildErrors:
    @pytest.mark.parametrize("literal", ["required", 1, 2.5, True, None, b"x"])
    def test_literals_are_not_validators(self, literal):
        with pytest.raises(BuildError) as exc_info:
            normalize_step(at("name", literal), 3)
        assert exc_info.value.index == 3
        assert str(exc_info.value).startswith("step 3:")

    def test_literal_in_list_rejected(self):
        with pytest.raises(BuildError):
            normalize_step([Required, "email"], 0)

    def test_empty_validator_list_rejected(self):
        with pytest.raises(BuildError, match="empty validator list"):
            normalize_step(at("name", []), 1)

    def test_nested_list_rejected(self):
        with pytest.raises(BuildError, match="nested"):
            normalize_step([Required, [Email]], 0)

    def test_validator_as_projection_rejected(self):
        with pytest.raises(BuildError, match="not a projection"):
            normalize_step((Required, Email), 0)

    def test_non_mapping_options_rejected(self):
        with pytest.raises(BuildError):
            normalize_validators([(MinLength, [3])])

    def test_empty_path_rejected(self):
        with pytest.raises(BuildError, match="must not be empty"):
            normalize_step(at([], Required), 0)

    def test_path_of_non_names_rejected(self):
        with pytest.raises(BuildError):
            normalize_step(at(["a", 1.5], Required), 0)

    def test_invalid_projection_rejected(self):
        with pytest.raises(BuildError, match="invalid projection"):
            normalize_step(at(42, Required), 0)

    def test_error_carries_descriptor(self):
        descriptor = at("name", 7)
        with pytest.raises(BuildError) as exc_info:
            normalize_step(descriptor, 0)
        assert exc_info.value.descriptor is descriptor


class TestStepRun:
    def test_collects_every_failure_in_order(self):
        step = normalize_step(at("email", [Required, Email, has_at]), 0)
        failures = step.run({"email": "bad"}, {})
        assert len(failures) == 2
        assert failures[0].messages == ["must be a valid email"]
        assert failures[1] == "no @"

    def test_absent_focus_passes_non_presence_validators(self):
        step = normalize_step(at("email", Email), 0)
        assert step.run({}, {}) == []

    def test_options_reach_the_validator(self):
        step = normalize_step(at("name", (MinLength, {"min": 5})), 0)
        failures = step.run({"name": "Al"}, {})
        assert failures[0].messages == ["must be at least 5 characters"]
