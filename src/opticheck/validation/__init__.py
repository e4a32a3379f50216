"""opticheck validation plans.

A plan is an ordered list of steps. Each step projects part of the input
(or takes all of it) and runs one or more validators on that focus. Plans
are compiled once and run many times; failures from every step are collected
into a single error set.

Usage:
    from opticheck.validation import ValidationPlan, at
    from opticheck.validation.validators import Email, MinLength, Required

    plan = (
        ValidationPlan.builder()
        .add_step("name", [Required, (MinLength, {"min": 2})])
        .add_step(at("email", [Required, Email]))
        .build(mode="parallel", encoding="tagged")
    )

    plan.run({"name": "Al", "email": "al@example.com"})
    # ("ok", {"name": "Al", "email": "al@example.com"})

Plans declared in YAML are compiled by ``opticheck.validation.loader``.
"""

from opticheck.validation.types import (
    Encoding,
    Mode,
    ValidationError,
    ValidationFailed,
    error_messages,
)
from opticheck.validation.appendable import (
    Appendable,
    AppendableRegistry,
    ListAppendable,
    ValidationErrorAppendable,
    accumulate,
)
from opticheck.validation.registry import BaseValidator, ValidatorRegistry
from opticheck.validation.adapter import ValidatorRef, to_validator_ref
from opticheck.validation.steps import At, Step, at, normalize_step
from opticheck.validation.executor import Executor
from opticheck.validation.encoding import encode
from opticheck.validation.plan import PlanBuilder, ValidationPlan, compile_plan
from opticheck.validation.validators import register_builtin_validators

__all__ = [
    "Appendable",
    "AppendableRegistry",
    "At",
    "BaseValidator",
    "Encoding",
    "Executor",
    "ListAppendable",
    "Mode",
    "PlanBuilder",
    "Step",
    "ValidationError",
    "ValidationErrorAppendable",
    "ValidationFailed",
    "ValidationPlan",
    "ValidatorRef",
    "ValidatorRegistry",
    "accumulate",
    "at",
    "compile_plan",
    "encode",
    "error_messages",
    "normalize_step",
    "register_builtin_validators",
    "to_validator_ref",
]
