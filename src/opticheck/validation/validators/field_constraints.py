"""Single-value constraint validators.

Each validator checks one focus:
- Required: value must be present and non-blank
- MinLength / MaxLength: string length bounds
- Pattern: regex match
- Email: email address format
- Range / Positive / Negative / Integer: numeric checks
- In / NotIn / Contains: membership checks
- Equal / NotEqual / GreaterThan / GreaterThanOrEqual / LessThan /
  LessThanOrEqual: comparison against a ``value`` option

All except Required pass on an absent focus; combine them with Required to
make a field mandatory. Every validator accepts a ``message`` option.
"""

import re
from collections.abc import Mapping
from typing import Any

from opticheck.core.types import Absent, Result, Success
from opticheck.validation.registry import BaseValidator


# =============================================================================
# Format Patterns
# =============================================================================

# Email: Basic RFC 5322 compliant pattern
EMAIL_PATTERN = re.compile(
    r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"
)


def require_option(options: Mapping[str, Any], key: str, validator: str) -> Any:
    """Fetch a mandatory option, raising ValueError when it was not declared."""
    if key not in options:
        raise ValueError(f"{validator} validator requires a '{key}' option")
    return options[key]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


# =============================================================================
# Presence
# =============================================================================


class Required(BaseValidator):
    """Fails on an absent focus, None, or a blank string.

    Zero, False and empty collections are present values.
    """

    handles_absent = True

    def check(self, value: Any, options: Mapping[str, Any], env: Any) -> Result:
        if self._is_empty(value):
            return self.fail(options, None if value is Absent else value, "is required")
        return Success(value)

    def _is_empty(self, value: Any) -> bool:
        if value is Absent or value is None:
            return True
        if isinstance(value, str) and value.strip() == "":
            return True
        return False


# =============================================================================
# Strings
# =============================================================================


class MinLength(BaseValidator):
    """Options: ``min`` (required)."""

    def check(self, value: Any, options: Mapping[str, Any], env: Any) -> Result:
        minimum = require_option(options, "min", "MinLength")
        if not isinstance(value, str):
            return self.fail(options, value, "must be a string")
        if len(value) < minimum:
            return self.fail(options, value, f"must be at least {minimum} characters")
        return Success(value)


class MaxLength(BaseValidator):
    """Options: ``max`` (required)."""

    def check(self, value: Any, options: Mapping[str, Any], env: Any) -> Result:
        maximum = require_option(options, "max", "MaxLength")
        if not isinstance(value, str):
            return self.fail(options, value, "must be a string")
        if len(value) > maximum:
            return self.fail(options, value, f"must be at most {maximum} characters")
        return Success(value)


class Pattern(BaseValidator):
    """Options: ``regex`` (required), a pattern string or compiled pattern.

    The pattern may match anywhere in the value; anchor it to match the whole.
    """

    def check(self, value: Any, options: Mapping[str, Any], env: Any) -> Result:
        regex = require_option(options, "regex", "Pattern")
        if not isinstance(value, str):
            return self.fail(options, value, "must be a string")
        if not re.search(regex, value):
            return self.fail(options, value, "has invalid format")
        return Success(value)


class Email(BaseValidator):
    def check(self, value: Any, options: Mapping[str, Any], env: Any) -> Result:
        if not isinstance(value, str) or not EMAIL_PATTERN.match(value):
            return self.fail(options, value, "must be a valid email")
        return Success(value)


# =============================================================================
# Numbers
# =============================================================================


class Range(BaseValidator):
    """Options: ``min`` and/or ``max`` (inclusive bounds, at least one)."""

    def check(self, value: Any, options: Mapping[str, Any], env: Any) -> Result:
        minimum = options.get("min")
        maximum = options.get("max")
        if minimum is None and maximum is None:
            raise ValueError("Range validator requires a 'min' or 'max' option")
        if not _is_number(value):
            return self.fail(options, value, "must be a number")

        if minimum is not None and maximum is not None:
            if not minimum <= value <= maximum:
                return self.fail(options, value, f"must be between {minimum} and {maximum}")
        elif minimum is not None:
            if value < minimum:
                return self.fail(options, value, f"must be at least {minimum}")
        elif value > maximum:
            return self.fail(options, value, f"must be at most {maximum}")
        return Success(value)


class Positive(BaseValidator):
    def check(self, value: Any, options: Mapping[str, Any], env: Any) -> Result:
        if not _is_number(value):
            return self.fail(options, value, "must be a number")
        if value <= 0:
            return self.fail(options, value, "must be positive")
        return Success(value)


class Negative(BaseValidator):
    def check(self, value: Any, options: Mapping[str, Any], env: Any) -> Result:
        if not _is_number(value):
            return self.fail(options, value, "must be a number")
        if value >= 0:
            return self.fail(options, value, "must be negative")
        return Success(value)


class Integer(BaseValidator):
    def check(self, value: Any, options: Mapping[str, Any], env: Any) -> Result:
        if not isinstance(value, int) or isinstance(value, bool):
            return self.fail(options, value, "must be an integer")
        return Success(value)


# =============================================================================
# Membership
# =============================================================================


class In(BaseValidator):
    """Options: ``values`` (required), the allowed values."""

    def check(self, value: Any, options: Mapping[str, Any], env: Any) -> Result:
        values = list(require_option(options, "values", "In"))
        if value not in values:
            return self.fail(options, value, f"must be one of: {values!r}")
        return Success(value)


class NotIn(BaseValidator):
    """Options: ``values`` (required), the disallowed values."""

    def check(self, value: Any, options: Mapping[str, Any], env: Any) -> Result:
        values = list(require_option(options, "values", "NotIn"))
        if value in values:
            return self.fail(options, value, f"must not be one of: {values!r}")
        return Success(value)


class Contains(BaseValidator):
    """Options: ``value`` (required), the element a list must contain."""

    def check(self, value: Any, options: Mapping[str, Any], env: Any) -> Result:
        element = require_option(options, "value", "Contains")
        if not isinstance(value, (list, tuple, set, frozenset)) or element not in value:
            return self.fail(options, value, f"must contain {element!r}")
        return Success(value)


# =============================================================================
# Comparison
# =============================================================================


class Equal(BaseValidator):
    """Options: ``value`` (required), the expected value.

    When ``value`` is a class, an instance of it counts as equal.
    """

    def check(self, value: Any, options: Mapping[str, Any], env: Any) -> Result:
        expected = require_option(options, "value", "Equal")
        if isinstance(expected, type) and isinstance(value, expected):
            return Success(value)
        if value != expected:
            return self.fail(options, value, f"must equal {expected!r}")
        return Success(value)


class NotEqual(BaseValidator):
    """Options: ``value`` (required), the forbidden value."""

    def check(self, value: Any, options: Mapping[str, Any], env: Any) -> Result:
        reference = require_option(options, "value", "NotEqual")
        if value == reference:
            return self.fail(options, value, f"must not be equal to {reference!r}")
        return Success(value)


class _Comparison(BaseValidator):
    """Orders the focus against the ``value`` option.

    A numeric reference requires a numeric focus.
    """

    name: str = ""
    phrase: str = ""

    def holds(self, value: Any, reference: Any) -> bool:
        raise NotImplementedError

    def check(self, value: Any, options: Mapping[str, Any], env: Any) -> Result:
        reference = require_option(options, "value", self.name)
        if _is_number(reference) and not _is_number(value):
            return self.fail(options, value, "must be a number")
        if not self.holds(value, reference):
            return self.fail(options, value, f"must be {self.phrase} {reference!r}")
        return Success(value)


class GreaterThan(_Comparison):
    name = "GreaterThan"
    phrase = "greater than"

    def holds(self, value: Any, reference: Any) -> bool:
        return value > reference


class GreaterThanOrEqual(_Comparison):
    name = "GreaterThanOrEqual"
    phrase = "greater than or equal to"

    def holds(self, value: Any, reference: Any) -> bool:
        return value >= reference


class LessThan(_Comparison):
    name = "LessThan"
    phrase = "less than"

    def holds(self, value: Any, reference: Any) -> bool:
        return value < reference


class LessThanOrEqual(_Comparison):
    name = "LessThanOrEqual"
    phrase = "less than or equal to"

    def holds(self, value: Any, reference: Any) -> bool:
        return value <= reference
