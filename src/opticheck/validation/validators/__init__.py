"""Built-in validators.

This module provides ready-to-use validators that can be used directly in
code or referenced by name from plan documents once registered.
"""

from opticheck.validation.registry import ValidatorRegistry
from opticheck.validation.validators.canned import (
    AllEqual,
    AnyOf,
    Confirmation,
    DateRange,
    Each,
    Not,
    Predicate,
)
from opticheck.validation.validators.field_constraints import (
    Contains,
    Email,
    Equal,
    GreaterThan,
    GreaterThanOrEqual,
    In,
    Integer,
    LessThan,
    LessThanOrEqual,
    MaxLength,
    MinLength,
    Negative,
    NotEqual,
    NotIn,
    Pattern,
    Positive,
    Range,
    Required,
)

BUILTIN_VALIDATORS = {
    "required": Required,
    "minLength": MinLength,
    "maxLength": MaxLength,
    "pattern": Pattern,
    "email": Email,
    "range": Range,
    "positive": Positive,
    "negative": Negative,
    "integer": Integer,
    "in": In,
    "notIn": NotIn,
    "contains": Contains,
    "equal": Equal,
    "notEqual": NotEqual,
    "greaterThan": GreaterThan,
    "greaterThanOrEqual": GreaterThanOrEqual,
    "lessThan": LessThan,
    "lessThanOrEqual": LessThanOrEqual,
    "allEqual": AllEqual,
    "dateRange": DateRange,
    "confirmation": Confirmation,
    "anyOf": AnyOf,
    "not": Not,
    "each": Each,
    "predicate": Predicate,
}


def register_builtin_validators() -> None:
    """Register all built-in validators with the ValidatorRegistry."""
    for name, validator in BUILTIN_VALIDATORS.items():
        ValidatorRegistry.register(name, validator)


__all__ = [
    "AllEqual",
    "AnyOf",
    "BUILTIN_VALIDATORS",
    "Confirmation",
    "Contains",
    "DateRange",
    "Each",
    "Email",
    "Equal",
    "GreaterThan",
    "GreaterThanOrEqual",
    "In",
    "Integer",
    "LessThan",
    "LessThanOrEqual",
    "MaxLength",
    "MinLength",
    "Negative",
    "Not",
    "NotEqual",
    "NotIn",
    "Pattern",
    "Positive",
    "Predicate",
    "Range",
    "Required",
    "register_builtin_validators",
]
