"""Canned validators for relationships and composition.

These usually run on a root step or on a Traversal focus list rather than on
a single field.

Available validators:
- allEqual: Every item of a list is equal
- dateRange: A start date is before an end date
- confirmation: A value matches another field (password confirmation)
- anyOf: At least one of several validators passes
- not: A validator must fail
- each: Every item of a list passes the given validators
- predicate: Lift a boolean function into a validator
"""

from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import Any

from opticheck.core.errors import BuildError
from opticheck.core.types import Failure, Result, Success
from opticheck.validation.appendable import accumulate
from opticheck.validation.registry import BaseValidator
from opticheck.validation.steps import normalize_validators
from opticheck.validation.validators.field_constraints import require_option


# =============================================================================
# All Equal Validator
# =============================================================================


class AllEqual(BaseValidator):
    """Validates that every item of a list is equal to the first one.

    Typically used with a Traversal projection over several fields.
    """

    def check(self, value: Any, options: Mapping[str, Any], env: Any) -> Result:
        if not isinstance(value, (list, tuple)):
            return self.fail(options, value, "must be a list")
        if any(item != value[0] for item in value[1:]):
            return self.fail(options, value, "must be all matching")
        return Success(value)


# =============================================================================
# Date Range Validator
# =============================================================================


class DateRange(BaseValidator):
    """Validates that a start date is before an end date.

    The focus is either a ``[start, end]`` list (from a Traversal) or a
    mapping read through the ``startField`` / ``endField`` options. A missing
    or None date skips the check; pair with Required for mandatory dates.

    Options:
        startField: Name of the start date field (mapping focus only)
        endField: Name of the end date field (mapping focus only)
        allowEqual: If true, start == end is valid (default: false)
    """

    def check(self, value: Any, options: Mapping[str, Any], env: Any) -> Result:
        start_field = options.get("startField")
        end_field = options.get("endField")

        if start_field is not None or end_field is not None:
            if not isinstance(value, Mapping):
                return self.fail(options, value, "must be a mapping")
            start_value = value.get(start_field)
            end_value = value.get(end_field)
            default = f"{end_field} must be after {start_field}"
        else:
            if not isinstance(value, Sequence) or isinstance(value, str):
                return self.fail(options, value, "must be a list of two dates")
            if len(value) < 2:
                return Success(value)
            start_value, end_value = value[0], value[1]
            default = "end date must be after start date"

        if start_value is None or end_value is None:
            return Success(value)

        # Convert datetime to date for comparison if needed
        if isinstance(start_value, datetime):
            start_value = start_value.date()
        if isinstance(end_value, datetime):
            end_value = end_value.date()

        if options.get("allowEqual", False):
            if start_value > end_value:
                return self.fail(options, value, default)
        elif start_value >= end_value:
            return self.fail(options, value, default)

        return Success(value)


# =============================================================================
# Confirmation Validator
# =============================================================================


class Confirmation(BaseValidator):
    """Validates that the focus equals another field's value.

    Options:
        field: Name of the field to compare against (required)
        data: Mapping holding that field; defaults to the run environment
    """

    def check(self, value: Any, options: Mapping[str, Any], env: Any) -> Result:
        field = require_option(options, "field", "Confirmation")
        data = options.get("data", env)
        expected = data.get(field) if isinstance(data, Mapping) else None
        if value != expected:
            return self.fail(options, value, f"does not match {field}")
        return Success(value)


# =============================================================================
# Combinators
# =============================================================================


class AnyOf(BaseValidator):
    """Passes when at least one of ``validators`` passes.

    Options:
        validators: Validator specs, in the same forms a plan step accepts
    """

    def prepare(self, options: Mapping[str, Any]) -> Mapping[str, Any]:
        return _compile_nested(options, "validators", "AnyOf")

    def check(self, value: Any, options: Mapping[str, Any], env: Any) -> Result:
        for validator in options["validators"]:
            if validator(value, env).is_success:
                return Success(value)
        return self.fail(options, value, "value must satisfy at least one alternative")


class Not(BaseValidator):
    """Passes when ``validator`` fails, and fails when it passes.

    Options:
        validator: A single validator spec
    """

    def prepare(self, options: Mapping[str, Any]) -> Mapping[str, Any]:
        return _compile_nested(options, "validator", "Not")

    def check(self, value: Any, options: Mapping[str, Any], env: Any) -> Result:
        if all(validator(value, env).is_success for validator in options["validator"]):
            return self.fail(options, value, "must not satisfy condition")
        return Success(value)


class Each(BaseValidator):
    """Runs ``validator`` (or every one of ``validators``) on each list item.

    All failures are collected, item by item. An empty list passes.

    Options:
        validator: A single validator spec
        validators: Several validator specs (exclusive with ``validator``)
    """

    def prepare(self, options: Mapping[str, Any]) -> Mapping[str, Any]:
        if "validator" in options and "validators" in options:
            raise BuildError("Each validator accepts 'validator' or 'validators', not both")
        key = "validator" if "validator" in options else "validators"
        return _compile_nested(options, key, "Each")

    def check(self, value: Any, options: Mapping[str, Any], env: Any) -> Result:
        if not isinstance(value, (list, tuple)):
            return self.fail(options, value, "must be a list")
        validators = options["validator" if "validator" in options else "validators"]
        failures = []
        for item in value:
            for validator in validators:
                result = validator(item, env)
                if not result.is_success:
                    failures.append(result.error)
        errors = accumulate(failures)
        if errors is None:
            return Success(value)
        return Failure(errors)


def _compile_nested(options: Mapping[str, Any], key: str, validator: str) -> dict[str, Any]:
    if key not in options:
        raise BuildError(f"{validator} validator requires a '{key}' option")
    return {**options, key: normalize_validators(options[key])}


class Predicate(BaseValidator):
    """Lifts a boolean function into a validator.

    Options:
        pred: ``value -> bool`` (required)
    """

    def check(self, value: Any, options: Mapping[str, Any], env: Any) -> Result:
        pred = require_option(options, "pred", "Predicate")
        if not pred(value):
            return self.fail(options, value, "invalid value")
        return Success(value)
