"""Tests for ValidatorRegistry and the error value types."""

import pytest

from opticheck.core.errors import BuildError
from opticheck.core.types import Success
from opticheck.validation.registry import BaseValidator, ValidatorRegistry, build_message
from opticheck.validation.types import (
    Encoding,
    Mode,
    ValidationError,
    ValidationFailed,
    error_messages,
)
from opticheck.validation.validators import (
    BUILTIN_VALIDATORS,
    Required,
    register_builtin_validators,
)


class OrderTotal(BaseValidator):
    def check(self, value, options, env):
        return Success(value)


class TestValidatorRegistry:
    def test_builtins_registered(self):
        assert ValidatorRegistry.list_registered() == sorted(BUILTIN_VALIDATORS)
        assert ValidatorRegistry.get("required") is Required

    def test_register_custom(self):
        ValidatorRegistry.register("shop.orderTotal", OrderTotal)
        assert ValidatorRegistry.is_registered("shop.orderTotal")
        assert ValidatorRegistry.get("shop.orderTotal") is OrderTotal

    def test_register_function(self):
        def positive_total(order):
            return "ok"

        ValidatorRegistry.register("shop.positiveTotal", positive_total)
        assert ValidatorRegistry.get("shop.positiveTotal") is positive_total

    def test_register_is_idempotent(self):
        ValidatorRegistry.register("required", OrderTotal)
        assert ValidatorRegistry.get("required") is Required

    def test_unknown_name_lists_available(self):
        with pytest.raises(ValueError, match="not registered") as exc_info:
            ValidatorRegistry.get("doesNotExist")
        assert "minLength" in str(exc_info.value)

    def test_clear(self):
        ValidatorRegistry.clear()
        assert ValidatorRegistry.list_registered() == []
        register_builtin_validators()
        assert ValidatorRegistry.is_registered("email")


class TestBaseValidator:
    def test_check_must_be_overridden(self):
        with pytest.raises(NotImplementedError):
            BaseValidator().validate("x", {}, {})

    def test_build_message_default(self):
        assert build_message({}, "x", "default") == "default"

    def test_build_message_stringifies(self):
        assert build_message({"message": 42}, "x", "default") == "42"


class TestValidationError:
    def test_new_from_single_and_list(self):
        assert ValidationError.new("a").errors == ("a",)
        assert ValidationError.new(["a", "b"]).errors == ("a", "b")

    def test_new_keeps_existing(self):
        error = ValidationError.new("a")
        assert ValidationError.new(error) is error

    def test_iteration_and_length(self):
        error = ValidationError.new(["a", "b"])
        assert list(error) == ["a", "b"]
        assert len(error) == 2

    def test_to_dict(self):
        assert ValidationError.new(["a", 1]).to_dict() == {"errors": ["a", 1]}

    def test_str(self):
        assert str(ValidationError.new(["a", "b"])) == "ValidationError(a, b)"


class TestValidationFailed:
    def test_carries_errors(self):
        error = ValidationError.new(["a", "b"])
        exc = ValidationFailed(error)
        assert exc.errors is error
        assert str(exc) == "a, b"

    def test_plain_list_errors(self):
        assert str(ValidationFailed(["x", "y"])) == "x, y"

    def test_nested_validation_errors_are_flattened(self):
        errors = [ValidationError.new(["a", "b"]), "c"]
        assert error_messages(errors) == ["a", "b", "c"]
        assert str(ValidationFailed(errors)) == "a, b, c"


class TestSelectors:
    def test_parse_strings(self):
        assert Mode.parse("parallel") is Mode.PARALLEL
        assert Encoding.parse("tagged") is Encoding.TAGGED

    def test_parse_enum_members(self):
        assert Mode.parse(Mode.SEQUENTIAL) is Mode.SEQUENTIAL

    def test_unknown_selector(self):
        with pytest.raises(BuildError, match="expected one of: result, tagged, raise"):
            Encoding.parse("xml")
